"""
Status store — durable mapping from policy name to (status, message).

Usage::

    with StatusStore.open(path) as store:
        store.put_status("my-policy", StatusKind.INSTALLED, "all is good")
        status, message = store.get_status("my-policy")

        reader = store.get_read_only()
        reader.list_policies()

The backing file is a SQLite database opened in exclusive locking mode: the
opening handle owns it until :meth:`StatusStore.close`. Opening the same path
from a second process (or a second handle) is not supported; it fails at open
with :class:`StorageUnavailableError` rather than sharing the file.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path

from policystore.core.constants import OPEN_TIMEOUT_SECONDS, TABLE_NAME
from policystore.core.exceptions import (
    InvalidArgumentError,
    PolicyNotFoundError,
    StorageError,
    StorageUnavailableError,
    StoreClosedError,
)
from policystore.core.store.models import PolicyStatus, StatusKind, parse_status_kind

logger = logging.getLogger(__name__)

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    policy      TEXT PRIMARY KEY,
    status      TEXT NOT NULL,
    message     TEXT NOT NULL DEFAULT '',
    updated_at  TEXT NOT NULL
)
"""

_UPSERT = f"""
INSERT INTO {TABLE_NAME} (policy, status, message, updated_at)
VALUES (?, ?, ?, ?)
ON CONFLICT(policy) DO UPDATE SET
    status = excluded.status,
    message = excluded.message,
    updated_at = excluded.updated_at
"""


def _check_text(value: object, what: str) -> None:
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{what} must be a string, got {type(value).__name__}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidArgumentError(f"{what} is not valid UTF-8 text: {value!r}") from exc


class StatusReader(ABC):
    """Read capability shared by the mutable and the read-only handle."""

    @property
    @abstractmethod
    def path(self) -> Path:
        """Backing file of the store."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """True once the owning store has been closed."""

    @abstractmethod
    def get_record(self, policy: str) -> PolicyStatus:
        """Return the full record for ``policy`` or raise PolicyNotFoundError."""

    @abstractmethod
    def list_policies(self) -> list[str]:
        """Return every policy name currently stored."""

    def get_status(self, policy: str) -> tuple[StatusKind, str]:
        """Return ``(status, message)`` for ``policy`` or raise PolicyNotFoundError."""
        record = self.get_record(policy)
        return record.status, record.message


class StatusStore(StatusReader):
    """
    Mutable handle over a status store file.

    Thread-safe: every statement runs under one re-entrant lock, so concurrent
    writers are serialized and readers never see a half-applied write. Readers take
    the same lock, so reads do not run in parallel with each other either. Each
    ``put_status``/``remove`` is its own transaction, committed with
    ``synchronous=FULL`` before the call returns.
    """

    def __init__(self, path: Path, conn: sqlite3.Connection) -> None:
        self._path = path
        self._conn: sqlite3.Connection | None = conn
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def open(cls, path: str | Path) -> StatusStore:
        """
        Open (creating if needed) the store at ``path``.

        The parent directory must already exist.

        Raises:
            StorageUnavailableError: if the file cannot be created, opened, or locked.
        """
        p = Path(path).expanduser()
        if not p.parent.is_dir():
            raise StorageUnavailableError(f"Parent directory does not exist: {p.parent}")
        if p.is_dir():
            raise StorageUnavailableError(f"Store path is a directory: {p}")

        try:
            conn = sqlite3.connect(str(p), timeout=OPEN_TIMEOUT_SECONDS, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StorageUnavailableError(f"Cannot open status store {p}: {exc}") from exc

        try:
            conn.execute("PRAGMA locking_mode=EXCLUSIVE")
            conn.execute("PRAGMA synchronous=FULL")
            # Take the exclusive lock now instead of on the first write.
            conn.execute("BEGIN EXCLUSIVE")
            conn.execute(_SCHEMA)
            conn.commit()
        except sqlite3.Error as exc:
            conn.close()
            raise StorageUnavailableError(f"Cannot initialise status store {p}: {exc}") from exc

        logger.debug("Opened status store at %s", p)
        return cls(p, conn)

    def close(self) -> None:
        """Release the file. Further calls on this handle raise StoreClosedError."""
        with self._lock:
            if self._conn is None:
                return
            conn, self._conn = self._conn, None
            try:
                conn.close()
            except sqlite3.Error as exc:
                logger.error("Failed to close status store %s: %s", self._path, exc)
                raise StorageError(f"Cannot close status store {self._path}: {exc}") from exc
        logger.debug("Closed status store at %s", self._path)

    def __enter__(self) -> StatusStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<StatusStore {self._path} ({state})>"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._conn is None

    def get_read_only(self) -> ReadOnlyStatusStore:
        """Return a view of this store that can only read."""
        return ReadOnlyStatusStore(self)

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreClosedError(f"Status store {self._path} is closed")
        return self._conn

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put_status(self, policy: str, status: StatusKind | str, message: str = "") -> None:
        """
        Create or overwrite the record for ``policy``.

        Raises:
            InvalidArgumentError: empty policy, unknown status, or text that is not
                                  a UTF-8 encodable string.
            StoreClosedError:     the store has been closed.
            StorageError:         the write could not be committed; the prior
                                  record is left untouched.
        """
        _check_text(policy, "Policy name")
        if not policy:
            raise InvalidArgumentError("Policy name must not be empty")
        kind = parse_status_kind(status)
        _check_text(message, "Message")

        updated_at = datetime.now(UTC).isoformat()
        with self._lock:
            conn = self._require_conn()
            try:
                with conn:
                    conn.execute(_UPSERT, (policy, kind.value, message, updated_at))
            except sqlite3.Error as exc:
                logger.error("Failed to write status for %r: %s", policy, exc)
                raise StorageError(f"Cannot write status for policy {policy!r}: {exc}") from exc
        logger.debug("Policy %r -> %s", policy, kind.value)

    def remove(self, policy: str) -> None:
        """Delete the record for ``policy``. Removing an absent policy is a no-op."""
        _check_text(policy, "Policy name")
        with self._lock:
            conn = self._require_conn()
            try:
                with conn:
                    cur = conn.execute(
                        f"DELETE FROM {TABLE_NAME} WHERE policy = ?",  # noqa: S608
                        (policy,),
                    )
            except sqlite3.Error as exc:
                logger.error("Failed to remove %r: %s", policy, exc)
                raise StorageError(f"Cannot remove policy {policy!r}: {exc}") from exc
        if cur.rowcount:
            logger.debug("Removed policy %r", policy)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_record(self, policy: str) -> PolicyStatus:
        _check_text(policy, "Policy name")
        with self._lock:
            conn = self._require_conn()
            try:
                row = conn.execute(
                    f"SELECT status, message, updated_at FROM {TABLE_NAME} WHERE policy = ?",  # noqa: S608
                    (policy,),
                ).fetchone()
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot read status for policy {policy!r}: {exc}") from exc

        if row is None:
            raise PolicyNotFoundError(policy)
        status, message, updated_at = row
        try:
            kind = StatusKind(status)
        except ValueError as exc:
            raise StorageError(f"Corrupt status {status!r} stored for policy {policy!r}") from exc
        return PolicyStatus(policy=policy, status=kind, message=message, updated_at=updated_at)

    def list_policies(self) -> list[str]:
        # Sorted only for stable output; callers must not rely on the order.
        with self._lock:
            conn = self._require_conn()
            try:
                rows = conn.execute(
                    f"SELECT policy FROM {TABLE_NAME} ORDER BY policy"  # noqa: S608
                ).fetchall()
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot list policies: {exc}") from exc
        return [r[0] for r in rows]


class ReadOnlyStatusStore(StatusReader):
    """
    Read-only view over a :class:`StatusStore`.

    Built only by :meth:`StatusStore.get_read_only`. Shares the owner's
    connection, so it sees every later write and is closed with it.
    """

    def __init__(self, store: StatusStore) -> None:
        if not isinstance(store, StatusStore):
            raise TypeError("ReadOnlyStatusStore must be created from a StatusStore")
        self._store = store

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<ReadOnlyStatusStore {self._store.path} ({state})>"

    @property
    def path(self) -> Path:
        return self._store.path

    @property
    def closed(self) -> bool:
        return self._store.closed

    def get_record(self, policy: str) -> PolicyStatus:
        return self._store.get_record(policy)

    def list_policies(self) -> list[str]:
        return self._store.list_policies()


def open_store(path: str | Path) -> StatusStore:
    """Shorthand for :meth:`StatusStore.open`."""
    return StatusStore.open(path)
