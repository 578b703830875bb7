"""Pydantic output records produced by the projection engines."""
