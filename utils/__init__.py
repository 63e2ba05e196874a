"""Shared helpers: the Result value type and operation logging."""
