# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Consent flags and the trigger permissions derived from them."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from inkling.config import Configuration, preview_enabled
from inkling.host import Host
from inkling.persistence import (
    AUTO_TRIGGER_ENABLED_KEY,
    TERMS_ACCEPTED_KEY,
    PersistedState,
)

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsentState:
    terms_accepted: bool
    preview_enabled: bool
    auto_trigger_enabled: bool


@dataclass(frozen=True)
class TriggerConfig:
    """Trigger permissions for one decision. Never stored."""

    manual_trigger_allowed: bool
    automatic_trigger_allowed: bool

    @classmethod
    def from_consent(cls, consent: ConsentState) -> TriggerConfig:
        return cls(
            manual_trigger_allowed=consent.terms_accepted and consent.preview_enabled,
            automatic_trigger_allowed=consent.auto_trigger_enabled,
        )


class ConsentGate:
    """Reads consent fresh on every call. No caching anywhere.

    The preview flag lives in host configuration and can flip between any
    two calls, so nothing here is memoized.
    """

    def __init__(
        self,
        state: PersistedState,
        config: Configuration,
        host: Host | None = None,
    ) -> None:
        self._state = state
        self._config = config
        self._host = host

    def current_consent(self) -> ConsentState:
        return ConsentState(
            terms_accepted=self._state.get_bool(TERMS_ACCEPTED_KEY),
            preview_enabled=preview_enabled(self._config),
            auto_trigger_enabled=self._state.get_bool(AUTO_TRIGGER_ENABLED_KEY),
        )

    def trigger_config(self) -> TriggerConfig:
        return TriggerConfig.from_consent(self.current_consent())

    def manual_trigger_allowed(self) -> bool:
        return self.trigger_config().manual_trigger_allowed

    def automatic_trigger_allowed(self) -> bool:
        return self._state.get_bool(AUTO_TRIGGER_ENABLED_KEY)

    async def reconcile_preview(self) -> None:
        """Revoke persisted consent left over from a session with preview on."""
        if preview_enabled(self._config):
            return
        consent = self.current_consent()
        if consent.terms_accepted or consent.auto_trigger_enabled:
            await self.on_preview_feature_disabled()

    async def on_preview_feature_disabled(self) -> None:
        """Cascading revocation: preview off clears terms and auto-trigger."""
        self._state.set(TERMS_ACCEPTED_KEY, False)
        self._state.set(AUTO_TRIGGER_ENABLED_KEY, False)
        _log.info("preview disabled, consent revoked")
        await self._refresh()

    def accept_terms(self) -> bool:
        """Record acceptance. Returns whether auto-trigger was switched on.

        Auto-trigger stays off while the preview feature is disabled.
        """
        self._state.set(TERMS_ACCEPTED_KEY, True)
        if not preview_enabled(self._config):
            _log.info("terms accepted, auto-trigger stays off: preview disabled")
            return False
        self._state.set(AUTO_TRIGGER_ENABLED_KEY, True)
        return True

    def cancel_terms(self) -> None:
        self._state.set(AUTO_TRIGGER_ENABLED_KEY, False)

    def toggle_auto_trigger(self) -> bool:
        """Flip the auto-trigger flag. Returns whether it changed.

        Turning it on requires manual triggering to be allowed.
        """
        target = not self.automatic_trigger_allowed()
        if target and not self.manual_trigger_allowed():
            _log.info("auto-trigger stays off: terms not accepted or preview off")
            return False
        self._state.set(AUTO_TRIGGER_ENABLED_KEY, target)
        return True

    async def _refresh(self) -> None:
        if self._host is not None:
            await self._host.refresh_explorer()
