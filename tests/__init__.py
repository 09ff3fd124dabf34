"""Test suite for Keyhold.

Test structure follows the test pyramid:
- unit/: Unit tests - domain rules, services and adapters in isolation
- integration/: Integration tests - repositories and session lifecycle
  against a real (SQLite) database
- api/: API endpoint tests - HTTP request/response cycle with overrides
"""
