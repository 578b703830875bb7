"""Projection engines and the plan evaluator that chains them."""
