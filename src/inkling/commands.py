# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Host-facing commands."""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from inkling.consent import ConsentGate
from inkling.coordinator import Coordinator
from inkling.events import Editor, ManualTrigger
from inkling.host import LEARN_MORE_URI, WELCOME_README, Host
from inkling.persistence import (
    TERMS_ACCEPTED_KEY,
    WELCOME_MESSAGE_SHOWN_KEY,
    PersistedState,
)

CommandHandler = Callable[..., Coroutine[Any, Any, Any]]

PAUSE = "inkling.pauseSuggestions"
RESUME = "inkling.resumeSuggestions"
ACCEPT_TERMS = "inkling.acceptTermsAndConditions"
CANCEL_TERMS = "inkling.cancelTermsAndConditions"
CONFIGURE = "inkling.configure"
INTRODUCTION = "inkling.introduction"
INVOKE = "inkling.invoke"
ACCEPT = "inkling.accept"
ENABLE_VIEW = "inkling.enableCodeSuggestions"


class Commands:
    """Command handlers bound to one extension instance."""

    def __init__(
        self,
        gate: ConsentGate,
        state: PersistedState,
        host: Host,
        coordinator: Coordinator,
    ) -> None:
        self._gate = gate
        self._state = state
        self._host = host
        self._coordinator = coordinator

    def table(self) -> dict[str, CommandHandler]:
        return {
            PAUSE: self.toggle_suggestions,
            RESUME: self.toggle_suggestions,
            ACCEPT_TERMS: self.accept_terms,
            CANCEL_TERMS: self.cancel_terms,
            CONFIGURE: self.configure,
            INTRODUCTION: self.introduction,
            INVOKE: self.invoke,
            ACCEPT: self.accept,
            ENABLE_VIEW: self.enable_view,
        }

    async def toggle_suggestions(self) -> bool:
        """Pause and resume are the same toggle."""
        changed = self._gate.toggle_auto_trigger()
        await self._host.refresh_explorer()
        return changed

    async def accept_terms(self) -> None:
        self._gate.accept_terms()
        await self._host.set_context(TERMS_ACCEPTED_KEY, True)
        await self._host.refresh_explorer()
        if not self._state.get_bool(WELCOME_MESSAGE_SHOWN_KEY):
            self._state.set(WELCOME_MESSAGE_SHOWN_KEY, True)
            await self._host.show_welcome(WELCOME_README)

    async def cancel_terms(self) -> None:
        self._gate.cancel_terms()
        await self._host.refresh_explorer()

    async def configure(self) -> None:
        await self._host.open_settings()

    async def introduction(self) -> None:
        await self._host.open_external(LEARN_MORE_URI)

    async def invoke(self, editor: Editor | None) -> None:
        await self._coordinator.dispatch(ManualTrigger(editor))

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
        return await self._coordinator.accept(
            line, index, text, request_id, trigger_type, completion_type, language
        )

    async def enable_view(self) -> None:
        await self._host.activate_view()
