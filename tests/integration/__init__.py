"""Integration tests (real database)."""
