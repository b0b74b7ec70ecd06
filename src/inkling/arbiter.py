# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Trigger arbitration: should this event open a recommendation?"""

from __future__ import annotations

from dataclasses import dataclass

from inkling.consent import TriggerConfig
from inkling.events import Event, ManualTrigger, TextChanged
from inkling.language import PLAINTEXT, convert_language
from inkling.session.model import TriggerType
from inkling.session.slot import SessionParams


@dataclass(frozen=True)
class Suppress:
    reason: str


@dataclass(frozen=True)
class OpenSession:
    params: SessionParams


Decision = Suppress | OpenSession


class TriggerArbiter:
    """Stateless. Pass a freshly computed TriggerConfig on every call."""

    def evaluate(self, event: Event, trigger: TriggerConfig) -> Decision:
        if isinstance(event, ManualTrigger):
            return self._manual(event, trigger)
        if isinstance(event, TextChanged):
            return self._automatic(event, trigger)
        return Suppress("not a trigger")

    @staticmethod
    def _manual(event: ManualTrigger, trigger: TriggerConfig) -> Decision:
        if not trigger.manual_trigger_allowed:
            return Suppress("manual trigger not allowed")
        if event.editor is None:
            return Suppress("no active editor")
        doc = event.editor.document
        return OpenSession(
            SessionParams(
                trigger_type=TriggerType.MANUAL,
                language=convert_language(doc.language_id),
                document_uri=doc.uri,
                line=event.editor.line,
            )
        )

    @staticmethod
    def _automatic(event: TextChanged, trigger: TriggerConfig) -> Decision:
        active = event.active
        if active is None or active.document.uri != event.document.uri:
            return Suppress("change outside the active editor")
        language = convert_language(event.document.language_id)
        if language == PLAINTEXT:
            return Suppress("unsupported language")
        if not event.changes:
            return Suppress("empty change set")
        if not trigger.automatic_trigger_allowed:
            return Suppress("automatic trigger not allowed")
        return OpenSession(
            SessionParams(
                trigger_type=TriggerType.AUTOMATIC,
                language=language,
                document_uri=event.document.uri,
                line=active.line,
            )
        )
