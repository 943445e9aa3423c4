"""
Persistent policy status store.

Public API::

    from policystore.core.store import StatusKind, StatusStore

    with StatusStore.open("/var/lib/policies/policy.db") as store:
        store.put_status("my-policy", StatusKind.INSTALLED, "all is good")
        reader = store.get_read_only()
        reader.get_status("my-policy")
"""

from policystore.core.store.datastore import (
    ReadOnlyStatusStore,
    StatusReader,
    StatusStore,
    open_store,
)
from policystore.core.store.models import PolicyStatus, StatusKind, parse_status_kind

__all__ = [
    "PolicyStatus",
    "ReadOnlyStatusStore",
    "StatusKind",
    "StatusReader",
    "StatusStore",
    "open_store",
    "parse_status_kind",
]
