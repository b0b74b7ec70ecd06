# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Stateful fuzzer for the coordinator.

Interleaves triggers, parked fetches, fetch completions, rejection
signals, acceptances and consent flips in random order, and checks the
no-loss/no-duplication decision invariant after every step. Gated behind
--run-stress.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, invariant, rule

from inkling.config import EXPERIMENTS_SECTION, SettingsConfiguration
from inkling.consent import ConsentGate
from inkling.coordinator import Coordinator
from inkling.events import (
    ActiveEditorChanged,
    Document,
    DocumentClosed,
    DocumentSaved,
    Editor,
    ManualTrigger,
    SelectionChanged,
    SelectionOrigin,
    TextChanged,
    VisibleEditorsChanged,
)
from inkling.persistence import PersistedState
from inkling.provider.base import FetchResult, SuggestionRequest
from inkling.session import RecommendationSession, SessionState
from inkling.telemetry import DecisionRecord, TelemetryRecorder

pytestmark = pytest.mark.stress

PY = Document("file:///a.py", "python")
TXT = Document("file:///notes.txt", "plaintext")

SIGNALS = [
    DocumentSaved(PY),
    ActiveEditorChanged(),
    VisibleEditorsChanged(),
    SelectionChanged(SelectionOrigin.POINTER),
    SelectionChanged(SelectionOrigin.KEYBOARD),
    DocumentClosed(PY),
]

# -- Fakes -----------------------------------------------------------------


class MemoryBackend:
    def load(self) -> dict[str, Any]:
        return {}

    async def write(self, snapshot: dict[str, Any]) -> None:
        pass


class BatchFetcher:
    """Every fetch parks until release(). Some return nothing."""

    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.count = 0

    async def fetch(self, request: SuggestionRequest) -> FetchResult:
        self.count += 1
        n = self.count
        gate = self.gate
        await gate.wait()
        candidates = [] if n % 5 == 0 else [f"c{i}" for i in range(n % 4 + 1)]
        return FetchResult(f"req-{n}", candidates, "Line")

    def release(self) -> None:
        self.gate.set()
        self.gate = asyncio.Event()


class NullDisplay:
    def show(self, session: RecommendationSession) -> None:
        pass

    def accepted(
        self,
        session: RecommendationSession,
        text: str,
        *,
        auto_closing_brackets: bool,
    ) -> None:
        pass


class ListSink:
    def __init__(self) -> None:
        self.records: list[DecisionRecord] = []

    def write(self, record: DecisionRecord) -> None:
        self.records.append(record)


# -- State machine ---------------------------------------------------------


class CoordinatorStateMachine(RuleBasedStateMachine):
    def __init__(self) -> None:
        super().__init__()
        self._loop = asyncio.new_event_loop()
        self.config = SettingsConfiguration({EXPERIMENTS_SECTION: {"preview": True}})
        self.state = PersistedState(MemoryBackend())
        self.gate = ConsentGate(self.state, self.config)
        self.fetcher = BatchFetcher()
        self.sink = ListSink()
        self.coord = Coordinator(
            self.gate,
            self.fetcher,
            NullDisplay(),
            TelemetryRecorder(self.sink),
            config=self.config,
        )
        self.tasks: list[asyncio.Task[None]] = []
        self._run(self._accept_terms())

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    async def _accept_terms(self) -> None:
        self.gate.accept_terms()

    async def _revoke(self) -> None:
        await self.gate.on_preview_feature_disabled()

    def _park(self, event: Any) -> None:
        self.tasks.append(self._loop.create_task(self.coord.dispatch(event)))
        self._run(asyncio.sleep(0))

    def teardown(self) -> None:
        self.fetcher.release()
        if self.tasks:
            self._run(asyncio.gather(*self.tasks))
        self.coord.shutdown()
        opened = self.coord.slot.opened_count
        assert len(self.sink.records) == opened
        self._run(self.state.drain())
        self._loop.close()

    # -- Rules -------------------------------------------------------------

    @rule(plaintext=st.booleans())
    def keystroke(self, plaintext: bool) -> None:
        doc = TXT if plaintext else PY
        self._park(TextChanged(doc, active=Editor(doc, line=1), changes=("x",)))

    @rule(line=st.integers(min_value=0, max_value=50))
    def manual(self, line: int) -> None:
        self._park(ManualTrigger(Editor(PY, line=line)))

    @rule()
    def complete_fetches(self) -> None:
        self.fetcher.release()
        if self.tasks:
            self._run(asyncio.gather(*self.tasks))
        self.tasks.clear()

    @rule(signal=st.sampled_from(SIGNALS))
    def reject(self, signal: Any) -> None:
        self._run(self.coord.dispatch(signal))

    @rule(index=st.integers(min_value=0, max_value=4))
    def accept(self, index: int) -> None:
        session = self.coord.slot.current
        if session is None or session.state != SessionState.DISPLAYED:
            return
        self._run(
            self.coord.accept(
                1,
                index,
                "text",
                session.request_id,
                session.trigger_type.value,
                session.completion_type,
                session.language,
            )
        )

    @rule()
    def stale_accept(self) -> None:
        self._run(self.coord.accept(1, 0, "t", "req-0", "OnDemand", "Line", "python"))

    @rule(enable=st.booleans())
    def flip_consent(self, enable: bool) -> None:
        if enable:
            self.config.set(EXPERIMENTS_SECTION, "preview", True)
            self._run(self._accept_terms())
        else:
            self.config.set(EXPERIMENTS_SECTION, "preview", False)
            self._run(self._revoke())

    # -- Invariants --------------------------------------------------------

    @invariant()
    def one_record_per_closed_session(self) -> None:
        open_now = 1 if self.coord.slot.current is not None else 0
        assert len(self.sink.records) == self.coord.slot.opened_count - open_now

    @invariant()
    def no_duplicate_records(self) -> None:
        serials = [r.session_serial for r in self.sink.records]
        assert len(serials) == len(set(serials))

    @invariant()
    def slot_holds_only_open_sessions(self) -> None:
        session = self.coord.slot.current
        assert session is None or session.is_open

    @invariant()
    def accepted_index_in_range(self) -> None:
        for record in self.sink.records:
            assert record.decision_index >= -1
            if record.outcome != "accepted":
                assert record.decision_index == -1


# Hypothesis needs a concrete TestCase class.
TestCoordinatorFuzz = CoordinatorStateMachine.TestCase
TestCoordinatorFuzz.settings = settings(
    max_examples=200,
    stateful_step_count=40,
    deadline=None,
)
