# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Session slot: owns the single live recommendation."""

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from inkling.session.model import RecommendationSession, Resolution, TriggerType

_log = logging.getLogger(__name__)

ResolvedCallback = Callable[[RecommendationSession], None]


@dataclass(frozen=True)
class SessionParams:
    """What a trigger decided to request."""

    trigger_type: TriggerType
    language: str
    document_uri: str = ""
    line: int = 0


class SessionSlot:
    """Arena of one. At most one unresolved session exists at any time.

    Opening while a session is live supersedes it first. Resolution evicts
    the session and fires on_resolved exactly once for it.
    """

    def __init__(self) -> None:
        self._current: RecommendationSession | None = None
        self._serials = itertools.count(1)
        self._opened = 0
        self.on_resolved: ResolvedCallback | None = None

    @property
    def current(self) -> RecommendationSession | None:
        return self._current

    @property
    def opened_count(self) -> int:
        """Sessions opened since construction."""
        return self._opened

    def open(self, params: SessionParams) -> RecommendationSession:
        """Supersede the live session, if any, then slot a new one."""
        if self._current is not None:
            self.resolve(self._current, Resolution.superseded())
        session = RecommendationSession(
            serial=next(self._serials),
            trigger_type=params.trigger_type,
            language=params.language,
            document_uri=params.document_uri,
            origin_line=params.line,
        )
        self._current = session
        self._opened += 1
        return session

    def is_current(self, serial: int) -> bool:
        """Whether serial names the live, unresolved session."""
        return self._current is not None and self._current.serial == serial

    def resolve(self, session: RecommendationSession, resolution: Resolution) -> bool:
        """Resolve and evict. No-op (False) if already resolved."""
        if not session.resolve(resolution):
            return False
        if self._current is session:
            self._current = None
        _log.debug(
            "session %d resolved: %s",
            session.serial,
            resolution.kind.value,
        )
        if self.on_resolved is not None:
            self.on_resolved(session)
        return True

    def resolve_current(self, resolution: Resolution) -> bool:
        """Resolve whatever is live. False if the slot is empty."""
        if self._current is None:
            return False
        return self.resolve(self._current, resolution)
