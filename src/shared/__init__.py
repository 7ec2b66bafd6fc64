"""Shared infrastructure: key-value storage, clocks and error types."""
