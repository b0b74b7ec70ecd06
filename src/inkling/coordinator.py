# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Coordinator: the single entry point into the recommendation state machine."""

from __future__ import annotations

import logging

from inkling.arbiter import OpenSession, TriggerArbiter
from inkling.config import Configuration, EditorContext, auto_closing_brackets_enabled
from inkling.consent import ConsentGate
from inkling.errors import ExternalCollaboratorFailure
from inkling.events import Event, ManualTrigger, Shutdown, TextChanged
from inkling.provider.base import SuggestionDisplay, SuggestionFetcher, SuggestionRequest
from inkling.session.model import RecommendationSession, Resolution, SessionState
from inkling.session.slot import SessionSlot
from inkling.telemetry import TelemetryRecorder
from inkling.watchdog import RejectionWatchdog

_log = logging.getLogger(__name__)


class Coordinator:
    """Routes host events to the arbiter, slot, watchdog and recorder.

    Every handler runs to completion on the event loop except the fetch,
    which suspends. Anything may happen to the slot during that suspension,
    so the continuation re-checks the slot before touching the session.
    """

    def __init__(
        self,
        gate: ConsentGate,
        fetcher: SuggestionFetcher,
        display: SuggestionDisplay,
        recorder: TelemetryRecorder,
        *,
        config: Configuration,
        editor: EditorContext | None = None,
        slot: SessionSlot | None = None,
    ) -> None:
        self._gate = gate
        self._fetcher = fetcher
        self._display = display
        self._recorder = recorder
        self._config = config
        self._editor = editor or EditorContext()
        self._slot = slot or SessionSlot()
        self._arbiter = TriggerArbiter()
        self._watchdog = RejectionWatchdog(self._slot)
        self._closed = False
        recorder.attach(self._slot)

    @property
    def slot(self) -> SessionSlot:
        return self._slot

    @property
    def closed(self) -> bool:
        return self._closed

    # -- Public API -----------------------------------------------------------

    async def dispatch(self, event: Event) -> None:
        """Handle one host event. Never raises for runtime failures."""
        if isinstance(event, ManualTrigger | TextChanged):
            await self._trigger(event)
        elif isinstance(event, Shutdown):
            self.shutdown()
        else:
            self._watchdog.observe(event)

    async def accept(
        self,
        line: int,
        index: int,
        text: str,
        request_id: str,
        trigger_type: str,
        completion_type: str,
        language: str,
    ) -> bool:
        """Explicit acceptance of candidate `index`. False if ignored."""
        session = self._slot.current
        if (
            session is None
            or session.state != SessionState.DISPLAYED
            or session.request_id != request_id
        ):
            _log.debug("accept for %s ignored: not the displayed session", request_id)
            return False
        if not 0 <= index < len(session.candidates):
            _log.debug("accept for %s ignored: index %d out of range", request_id, index)
            return False
        if (trigger_type, completion_type, language) != (
            session.trigger_type.value,
            session.completion_type,
            session.language,
        ):
            _log.debug("accept metadata for %s disagrees with session", request_id)
        # The record carries the line the text landed on.
        session.origin_line = line
        self._slot.resolve(session, Resolution.accepted(index))
        try:
            self._display.accepted(
                session,
                text,
                auto_closing_brackets=auto_closing_brackets_enabled(self._config),
            )
        except Exception as exc:  # noqa: BLE001
            failure = ExternalCollaboratorFailure(f"post-accept edit failed: {exc}")
            _log.warning("%s", failure)
        return True

    def shutdown(self) -> None:
        """Flush the open session, if any. Triggers are ignored afterwards."""
        if self._closed:
            return
        self._recorder.flush_on_shutdown(self._slot)
        self._closed = True

    # -- Private --------------------------------------------------------------

    async def _trigger(self, event: ManualTrigger | TextChanged) -> None:
        if self._closed:
            _log.debug("trigger after shutdown ignored")
            return
        decision = self._arbiter.evaluate(event, self._gate.trigger_config())
        if not isinstance(decision, OpenSession):
            _log.debug("trigger suppressed: %s", decision.reason)
            return
        session = self._slot.open(decision.params)
        await self._fetch_and_display(session)

    async def _fetch_and_display(self, session: RecommendationSession) -> None:
        request = SuggestionRequest(
            trigger_type=session.trigger_type,
            language=session.language,
            document_uri=session.document_uri,
            line=session.origin_line,
            tab_size=self._editor.tab_size,
        )
        try:
            result = await self._fetcher.fetch(request)
        except Exception as exc:  # noqa: BLE001
            if not self._slot.is_current(session.serial):
                return
            failure = ExternalCollaboratorFailure(f"suggestion fetch failed: {exc}")
            _log.warning("session %d: %s", session.serial, failure)
            self._slot.resolve(session, Resolution.rejected())
            return

        # Must be the first thing after resuming.
        if not self._slot.is_current(session.serial):
            _log.debug(
                "discarding stale result %s for session %d",
                result.request_id,
                session.serial,
            )
            return

        session.request_id = result.request_id
        session.completion_type = result.completion_type
        if not result.candidates:
            self._slot.resolve(session, Resolution.rejected())
            return
        session.display(result.request_id, result.candidates, result.completion_type)
        try:
            self._display.show(session)
        except Exception as exc:  # noqa: BLE001
            failure = ExternalCollaboratorFailure(f"display failed: {exc}")
            _log.warning("session %d: %s", session.serial, failure)
            self._slot.resolve(session, Resolution.rejected())
