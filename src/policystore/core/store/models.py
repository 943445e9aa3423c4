"""Typed records for the status store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from policystore.core.exceptions import InvalidArgumentError


class StatusKind(StrEnum):
    """Closed set of states a policy can be in on this host."""

    UNKNOWN = "unknown"
    PENDING = "pending"  # queued, not yet applied
    INSTALLED = "installed"
    FAILED = "failed"


def parse_status_kind(value: StatusKind | str) -> StatusKind:
    """
    Coerce ``value`` to a :class:`StatusKind`.

    Raises:
        InvalidArgumentError: if ``value`` is not one of the known kinds.
    """
    if isinstance(value, StatusKind):
        return value
    if isinstance(value, str):
        try:
            return StatusKind(value)
        except ValueError:
            pass
    allowed = ", ".join(k.value for k in StatusKind)
    raise InvalidArgumentError(f"Unknown status kind {value!r} (expected one of: {allowed})")


@dataclass(frozen=True)
class PolicyStatus:
    """A stored record: the last status and message written for a policy."""

    policy: str
    status: StatusKind
    message: str
    updated_at: str  # ISO-8601, UTC
