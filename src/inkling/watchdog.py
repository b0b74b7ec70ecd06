# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Implicit rejection: editor-state changes that close a recommendation."""

from inkling.events import (
    ActiveEditorChanged,
    DocumentClosed,
    DocumentSaved,
    Event,
    SelectionChanged,
    SelectionOrigin,
    VisibleEditorsChanged,
)
from inkling.session.model import Resolution
from inkling.session.slot import SessionSlot

_SIGNALS = (
    DocumentSaved,
    ActiveEditorChanged,
    VisibleEditorsChanged,
    SelectionChanged,
    DocumentClosed,
)


class RejectionWatchdog:
    """Resolves the live session to REJECTED on any rejection signal.

    Caret movement from the keyboard is not a signal, only pointer
    selection is.
    """

    def __init__(self, slot: SessionSlot) -> None:
        self._slot = slot

    @staticmethod
    def is_signal(event: Event) -> bool:
        if isinstance(event, SelectionChanged):
            return event.origin == SelectionOrigin.POINTER
        return isinstance(event, _SIGNALS)

    def observe(self, event: Event) -> bool:
        """Returns True if this event resolved a session."""
        if not self.is_signal(event):
            return False
        return self._slot.resolve_current(Resolution.rejected())
