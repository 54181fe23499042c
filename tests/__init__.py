"""Test suite for the observability service.

Test structure follows the test pyramid:
- unit/: Unit tests - domain logic and services with mocked dependencies
- integration/: Integration tests - repositories against a real SQLite file
- api/: API tests - HTTP endpoints end-to-end through the middleware stack
"""
