"""
policystore test suite.

Tests are organized by layer:
    tests/unit/         Unit tests (SQLite files under tmp_path, Click CliRunner)

Run all tests:
    pytest

Run with coverage:
    pytest --cov=policystore
"""
