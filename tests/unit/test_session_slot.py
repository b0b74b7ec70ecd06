# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the single-session slot."""

import pytest

from inkling.session import (
    RecommendationSession,
    Resolution,
    ResolutionKind,
    SessionParams,
    SessionSlot,
    TriggerType,
)

_AUTO = SessionParams(TriggerType.AUTOMATIC, "python", "file:///a.py", 3)
_MANUAL = SessionParams(TriggerType.MANUAL, "java", "file:///B.java", 7)


@pytest.fixture()
def resolved() -> list[RecommendationSession]:
    return []


@pytest.fixture()
def slot(resolved: list[RecommendationSession]) -> SessionSlot:
    s = SessionSlot()
    s.on_resolved = resolved.append
    return s


def test_empty_slot(slot: SessionSlot) -> None:
    assert slot.current is None
    assert not slot.resolve_current(Resolution.rejected())
    assert slot.opened_count == 0


def test_open_fills_slot(slot: SessionSlot) -> None:
    session = slot.open(_MANUAL)
    assert slot.current is session
    assert session.trigger_type == TriggerType.MANUAL
    assert session.language == "java"
    assert session.document_uri == "file:///B.java"
    assert session.origin_line == 7
    assert slot.is_current(session.serial)


def test_serials_increase(slot: SessionSlot) -> None:
    serials = [slot.open(_AUTO).serial for _ in range(5)]
    assert serials == sorted(serials)
    assert len(set(serials)) == 5


def test_open_supersedes_previous(
    slot: SessionSlot, resolved: list[RecommendationSession]
) -> None:
    first = slot.open(_AUTO)
    second = slot.open(_MANUAL)
    assert slot.current is second
    assert not first.is_open
    assert first.resolution is not None
    assert first.resolution.kind == ResolutionKind.SUPERSEDED
    # Superseded before the new one existed.
    assert resolved == [first]
    assert not slot.is_current(first.serial)


def test_resolve_evicts_and_notifies_once(
    slot: SessionSlot, resolved: list[RecommendationSession]
) -> None:
    session = slot.open(_AUTO)
    assert slot.resolve(session, Resolution.rejected())
    assert slot.current is None
    assert not slot.resolve(session, Resolution.rejected())
    assert not slot.resolve_current(Resolution.rejected())
    assert resolved == [session]


def test_resolving_stale_session_leaves_current(
    slot: SessionSlot, resolved: list[RecommendationSession]
) -> None:
    first = slot.open(_AUTO)
    second = slot.open(_AUTO)
    assert not slot.resolve(first, Resolution.rejected())
    assert slot.current is second
    assert resolved == [first]


def test_no_callback_is_fine() -> None:
    slot = SessionSlot()
    slot.open(_AUTO)
    assert slot.resolve_current(Resolution.rejected())
    assert slot.opened_count == 1
