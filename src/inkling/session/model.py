# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Recommendation session data model and state machine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from inkling import now_iso
from inkling.errors import SessionStateError


class TriggerType(enum.Enum):
    MANUAL = "OnDemand"
    AUTOMATIC = "AutoTrigger"


class SessionState(enum.Enum):
    REQUESTED = "requested"
    DISPLAYED = "displayed"
    RESOLVED = "resolved"


class ResolutionKind(enum.Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    SUPERSEDED = "superseded"


# Valid state transitions.
_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.REQUESTED: frozenset({SessionState.DISPLAYED, SessionState.RESOLVED}),
    SessionState.DISPLAYED: frozenset({SessionState.RESOLVED}),
    SessionState.RESOLVED: frozenset(),
}


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    index: int = -1

    @classmethod
    def accepted(cls, index: int) -> Resolution:
        if index < 0:
            raise ValueError(f"accepted index must be >= 0, got {index}")
        return cls(ResolutionKind.ACCEPTED, index)

    @classmethod
    def rejected(cls) -> Resolution:
        return cls(ResolutionKind.REJECTED)

    @classmethod
    def superseded(cls) -> Resolution:
        return cls(ResolutionKind.SUPERSEDED)

    @property
    def decision_index(self) -> int:
        """Candidate index if accepted, -1 for every other outcome."""
        return self.index if self.kind == ResolutionKind.ACCEPTED else -1


@dataclass
class RecommendationSession:
    """One recommendation from request to user decision."""

    serial: int
    trigger_type: TriggerType
    language: str
    document_uri: str = ""
    origin_line: int = 0
    request_id: str = ""
    completion_type: str = ""
    candidates: list[str] = field(default_factory=list)
    state: SessionState = SessionState.REQUESTED
    resolution: Resolution | None = None
    created_at: str = field(default_factory=now_iso)
    resolved_at: str | None = None

    @property
    def is_open(self) -> bool:
        return self.state != SessionState.RESOLVED

    def transition(self, target: SessionState) -> None:
        """Transition to a new state. Raises SessionStateError if invalid."""
        allowed = _TRANSITIONS[self.state]
        if target not in allowed:
            msg = f"{self.state.value} → {target.value}"
            raise SessionStateError(msg)
        self.state = target

    def display(self, request_id: str, candidates: list[str], completion_type: str) -> None:
        """REQUESTED → DISPLAYED with the fetched candidates."""
        if not candidates:
            raise SessionStateError("cannot display an empty recommendation")
        self.transition(SessionState.DISPLAYED)
        self.request_id = request_id
        self.candidates = list(candidates)
        self.completion_type = completion_type

    def resolve(self, resolution: Resolution) -> bool:
        """REQUESTED/DISPLAYED → RESOLVED. Returns False if already resolved.

        Acceptance is only valid from DISPLAYED.
        """
        if self.state == SessionState.RESOLVED:
            return False
        if resolution.kind == ResolutionKind.ACCEPTED:
            if self.state != SessionState.DISPLAYED:
                raise SessionStateError(f"{self.state.value} → accepted")
            if resolution.index >= len(self.candidates):
                raise SessionStateError(
                    f"accepted index {resolution.index} out of range"
                    f" ({len(self.candidates)} candidates)"
                )
        self.transition(SessionState.RESOLVED)
        self.resolution = resolution
        self.resolved_at = now_iso()
        return True
