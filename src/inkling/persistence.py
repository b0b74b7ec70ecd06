# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Durable key/value state that survives editor restarts.

Reads are served from memory. Writes update memory immediately and are
flushed to the backend by a background task; a failed flush is logged and
forgotten. The file converges to the in-memory state because every flush
writes the latest snapshot.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from inkling.errors import PersistedWriteFailure

_log = logging.getLogger(__name__)

TERMS_ACCEPTED_KEY = "inkling.termsAccepted"
AUTO_TRIGGER_ENABLED_KEY = "inkling.autoTriggerEnabled"
WELCOME_MESSAGE_SHOWN_KEY = "inkling.welcomeMessageShown"


def _full_write(fd: int, data: bytes) -> None:
    """Write all bytes, retrying on short writes."""
    while data:
        n = os.write(fd, data)
        data = data[n:]


def atomic_write(path: Path, data: bytes) -> None:
    """Write data to path atomically via temp + fsync + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    fd = os.open(str(tmp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    try:
        _full_write(fd, data)
        os.fsync(fd)
    finally:
        os.close(fd)
    os.replace(str(tmp), str(path))


class StateBackend(Protocol):
    """Where snapshots of the key/value map end up."""

    def load(self) -> dict[str, Any]:
        """Return the stored map. Empty if nothing was ever written."""
        ...

    async def write(self, snapshot: dict[str, Any]) -> None:
        """Persist a full snapshot. Raises on failure."""
        ...


class JsonFileBackend:
    """Snapshot stored as one JSON object, replaced atomically."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            obj = json.loads(self._path.read_bytes())
        except (OSError, json.JSONDecodeError) as exc:
            _log.warning("unreadable state file %s: %s", self._path, exc)
            return {}
        return obj if isinstance(obj, dict) else {}

    async def write(self, snapshot: dict[str, Any]) -> None:
        data = json.dumps(snapshot, indent=2, sort_keys=True).encode()
        await asyncio.to_thread(atomic_write, self._path, data)


class PersistedState:
    """Global key/value state. Absent keys read as unset.

    Must be mutated from inside a running event loop: set() schedules the
    flush as a task on it.
    """

    def __init__(self, backend: StateBackend) -> None:
        self._backend = backend
        self._values: dict[str, Any] = backend.load()
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[bool]] = set()

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def get_bool(self, key: str) -> bool:
        """Flag lookup. Missing or non-bool values are False."""
        return self._values.get(key) is True

    def set(self, key: str, value: Any) -> "asyncio.Task[bool]":
        """Update in memory and schedule a flush. Returns the flush task.

        The task resolves to False if the backend rejected the write. It
        never raises.
        """
        self._values[key] = value
        task = asyncio.get_running_loop().create_task(self._flush(key))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)

    async def drain(self) -> None:
        """Wait for every scheduled flush to settle."""
        while self._pending:
            batch = list(self._pending)
            await asyncio.gather(*batch)
            self._pending.difference_update(batch)

    async def _flush(self, key: str) -> bool:
        async with self._lock:
            try:
                await self._backend.write(self.snapshot())
            except Exception as exc:  # noqa: BLE001
                failure = PersistedWriteFailure(f"update of {key!r} failed: {exc}")
                _log.debug("failed to update global state: %s", failure)
                return False
        return True
