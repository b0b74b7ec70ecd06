# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Extension: composition root with explicit activate/shutdown."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from inkling.commands import CommandHandler, Commands
from inkling.config import (
    EDITOR_SECTION,
    EXPERIMENTS_SECTION,
    TAB_SIZE_KEY,
    Configuration,
    EditorContext,
    enable_default_config,
    preview_enabled,
)
from inkling.consent import ConsentGate
from inkling.coordinator import Coordinator
from inkling.events import ConfigurationChanged, Event, Shutdown
from inkling.host import Host
from inkling.persistence import JsonFileBackend, PersistedState
from inkling.provider.base import SuggestionDisplay, SuggestionFetcher
from inkling.telemetry import DecisionLog, TelemetryRecorder

_log = logging.getLogger(__name__)

STATE_FILE = "global-state.json"
DECISION_LOG_FILE = "decisions.jsonl"


class Extension:
    """Owns the persisted store, decision log and coordinator.

    Host events go through handle(), commands through execute(). Nothing
    is wired until activate() and nothing is accepted after shutdown().
    """

    def __init__(
        self,
        storage_dir: Path,
        *,
        config: Configuration,
        host: Host,
        fetcher: SuggestionFetcher,
        display: SuggestionDisplay,
    ) -> None:
        self._storage_dir = storage_dir
        self._config = config
        self._host = host
        self._fetcher = fetcher
        self._display = display
        self._state: PersistedState | None = None
        self._decisions: DecisionLog | None = None
        self._coordinator: Coordinator | None = None
        self._commands: dict[str, CommandHandler] = {}
        self._gate: ConsentGate | None = None
        self.editor = EditorContext()

    @property
    def state(self) -> PersistedState:
        if self._state is None:
            raise RuntimeError("extension not active")
        return self._state

    @property
    def coordinator(self) -> Coordinator:
        if self._coordinator is None:
            raise RuntimeError("extension not active")
        return self._coordinator

    @property
    def commands(self) -> frozenset[str]:
        return frozenset(self._commands)

    async def activate(self) -> None:
        """Load state, open the decision log, write editor defaults, wire."""
        if self._coordinator is not None:
            raise RuntimeError("extension already active")
        await enable_default_config(self._config)
        self.editor.update_tab_size(self._config)

        self._state = PersistedState(JsonFileBackend(self._storage_dir / STATE_FILE))
        self._decisions = DecisionLog(self._storage_dir / DECISION_LOG_FILE)
        self._decisions.open()

        self._gate = ConsentGate(self._state, self._config, self._host)
        await self._gate.reconcile_preview()
        recorder = TelemetryRecorder(self._decisions)
        self._coordinator = Coordinator(
            self._gate,
            self._fetcher,
            self._display,
            recorder,
            config=self._config,
            editor=self.editor,
        )
        self._commands = Commands(
            self._gate, self._state, self._host, self._coordinator
        ).table()
        _log.info("activated, state in %s", self._storage_dir)

    async def execute(self, command: str, *args: Any) -> Any:
        """Run a registered command. KeyError if unknown."""
        handler = self._commands[command]
        return await handler(*args)

    async def handle(self, event: Event | ConfigurationChanged) -> None:
        if isinstance(event, ConfigurationChanged):
            await self._on_configuration_changed(event)
        elif isinstance(event, Shutdown):
            await self.shutdown()
        elif self._coordinator is None:
            _log.debug("event %s while inactive ignored", type(event).__name__)
        else:
            await self._coordinator.dispatch(event)

    async def shutdown(self) -> None:
        """Flush the open recommendation, settle writes, close the log."""
        if self._coordinator is None:
            return
        self._coordinator.shutdown()
        if self._state is not None:
            await self._state.drain()
        if self._decisions is not None:
            self._decisions.close()
        self._coordinator = None
        self._commands = {}
        _log.info("shut down")

    async def _on_configuration_changed(self, event: ConfigurationChanged) -> None:
        if event.affects(f"{EDITOR_SECTION}.{TAB_SIZE_KEY}"):
            self.editor.update_tab_size(self._config)
        if event.affects(EXPERIMENTS_SECTION):
            if self._gate is None:
                return
            if not preview_enabled(self._config):
                await self._gate.on_preview_feature_disabled()
            else:
                await self._host.refresh_explorer()
