# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

from inkling.errors import SessionStateError
from inkling.session.model import (
    RecommendationSession,
    Resolution,
    ResolutionKind,
    SessionState,
    TriggerType,
)
from inkling.session.slot import SessionParams, SessionSlot

__all__ = [
    "RecommendationSession",
    "Resolution",
    "ResolutionKind",
    "SessionParams",
    "SessionSlot",
    "SessionState",
    "SessionStateError",
    "TriggerType",
]
