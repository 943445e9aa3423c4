"""policystore exception hierarchy."""

from __future__ import annotations


class PolicyStoreError(Exception):
    """Base exception for all policystore errors."""


class ConfigError(PolicyStoreError):
    """Raised when the configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file does not exist."""


# ---------------------------------------------------------------------------
# Status store
# ---------------------------------------------------------------------------


class StatusStoreError(PolicyStoreError):
    """Base exception for status store failures."""


class StorageUnavailableError(StatusStoreError):
    """Raised when the backing file cannot be created, opened, or locked."""


class InvalidArgumentError(StatusStoreError, ValueError):
    """Raised when a caller passes an unknown status kind or an empty policy name."""


class PolicyNotFoundError(StatusStoreError, LookupError):
    """Raised when no record exists for the requested policy."""

    def __init__(self, policy: str) -> None:
        super().__init__(f"No status recorded for policy {policy!r}")
        self.policy = policy


class StorageError(StatusStoreError):
    """Raised on an underlying I/O failure during a well-formed operation."""


class StoreClosedError(StorageError):
    """Raised when an operation is attempted on a closed store."""
