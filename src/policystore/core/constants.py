"""policystore constants: exit codes, filesystem layout, and limits."""

from __future__ import annotations

from enum import IntEnum

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    NOT_FOUND = 3
    STORAGE_ERROR = 4


# ---------------------------------------------------------------------------
# Filesystem layout
# ---------------------------------------------------------------------------

POLICYSTORE_DIR_NAME = ".policystore"
CONFIG_FILENAME = "config.toml"
DB_FILENAME = "policy.db"

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

OPEN_TIMEOUT_SECONDS = 1.0  # SQLite busy timeout while taking the exclusive lock
TABLE_NAME = "policy_status"
