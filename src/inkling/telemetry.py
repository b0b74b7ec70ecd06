# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""User-decision telemetry: one durable record per resolved session."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from types import TracebackType
from typing import Any, Protocol

from inkling import now_iso
from inkling.persistence import _full_write
from inkling.session.model import RecommendationSession, Resolution
from inkling.session.slot import SessionSlot

_log = logging.getLogger(__name__)

DECISION_EVENT = "user_decision"


@dataclass(frozen=True)
class DecisionRecord:
    decision_index: int
    request_id: str
    trigger_type: str
    completion_type: str
    language: str
    line: int
    outcome: str
    session_serial: int

    @classmethod
    def from_session(cls, session: RecommendationSession) -> DecisionRecord:
        if session.resolution is None:
            raise ValueError(f"session {session.serial} is not resolved")
        return cls(
            decision_index=session.resolution.decision_index,
            request_id=session.request_id,
            trigger_type=session.trigger_type.value,
            completion_type=session.completion_type,
            language=session.language,
            line=session.origin_line,
            outcome=session.resolution.kind.value,
            session_serial=session.serial,
        )


class DecisionSink(Protocol):
    def write(self, record: DecisionRecord) -> None:
        """Persist one record. Failures are logged by the recorder."""
        ...


class DecisionLog:
    """Append-only JSONL decision log. Each entry is durable on return."""

    def __init__(self, path: Path, context: dict[str, str] | None = None) -> None:
        self._path = path
        self._context = context or {}
        self._fd: int | None = None

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        """Open for append, dropping a torn trailing line from a prior crash."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._truncate_partial_tail()
        self._fd = os.open(
            self._path,
            os.O_WRONLY | os.O_CREAT | os.O_APPEND,
            0o644,
        )

    def __enter__(self) -> DecisionLog:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def write(self, record: DecisionRecord) -> None:
        if self._fd is None:
            msg = "DecisionLog not open"
            raise RuntimeError(msg)
        _full_write(self._fd, self._serialize(record))
        os.fsync(self._fd)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def _serialize(self, record: DecisionRecord) -> bytes:
        entry: dict[str, Any] = {
            **self._context,
            "ts": now_iso(),
            "event": DECISION_EVENT,
            "data": asdict(record),
        }
        return (json.dumps(entry, separators=(",", ":")) + "\n").encode()

    def _truncate_partial_tail(self) -> None:
        if not self._path.exists():
            return
        content = self._path.read_bytes()
        if not content or content.endswith(b"\n"):
            return
        last_nl = content.rfind(b"\n")
        fd = os.open(self._path, os.O_WRONLY)
        try:
            os.ftruncate(fd, last_nl + 1)
            os.fsync(fd)
        finally:
            os.close(fd)


def read_decisions(path: Path) -> list[DecisionRecord]:
    """Load every decision record in a log. Missing file means none."""
    if not path.is_file():
        return []
    records: list[DecisionRecord] = []
    for line in path.read_text().splitlines():
        if not line.strip():
            continue
        entry = json.loads(line)
        if entry.get("event") == DECISION_EVENT:
            records.append(DecisionRecord(**entry["data"]))
    return records


class TelemetryRecorder:
    """Turns resolved sessions into decision records. Best effort.

    The slot resolves sessions in serial order, so a high-water mark is
    enough to drop repeats without remembering every session.
    """

    def __init__(self, sink: DecisionSink) -> None:
        self._sink = sink
        self._last_serial = 0
        self._recorded = 0

    @property
    def recorded_count(self) -> int:
        return self._recorded

    @property
    def last_serial(self) -> int:
        return self._last_serial

    def attach(self, slot: SessionSlot) -> None:
        """Record every session the slot resolves from now on."""
        slot.on_resolved = self.record

    def record(self, session: RecommendationSession) -> None:
        if session.serial <= self._last_serial:
            _log.debug("session %d already recorded", session.serial)
            return
        record = DecisionRecord.from_session(session)
        self._last_serial = session.serial
        self._recorded += 1
        try:
            self._sink.write(record)
        except Exception as exc:  # noqa: BLE001
            _log.warning("decision record for session %d lost: %s", session.serial, exc)

    def flush_on_shutdown(self, slot: SessionSlot) -> None:
        """Force-resolve a session still open at exit so it gets its record."""
        session = slot.current
        if session is None:
            return
        _log.debug("shutdown with session %d open", session.serial)
        slot.resolve(session, Resolution.rejected())
        # No-op when the slot hook already recorded it.
        self.record(session)
