"""Caller-layer plan state (persistence and sharing)."""
