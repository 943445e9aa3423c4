"""
policystore — persistent per-host policy status store.

Tracks whether each named policy is installed, pending, or failed, together
with a free-form diagnostic message. Data lives in a single SQLite file owned
by one process at a time.

Package layout (src/policystore/):
  core/         — constants, exceptions, config, logging setup
  core/store/   — the status store (mutable and read-only handles)
  cli/          — Click CLI entry point
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
