# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Suggestion backend and display protocols: implemented by the host side."""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from inkling.session.model import RecommendationSession, TriggerType


@dataclass(frozen=True)
class SuggestionRequest:
    trigger_type: TriggerType
    language: str
    document_uri: str
    line: int
    tab_size: int = 4


@dataclass(frozen=True)
class FetchResult:
    """What the backend returned. request_id is opaque to us."""

    request_id: str
    candidates: list[str] = field(default_factory=list)
    completion_type: str = ""


@runtime_checkable
class SuggestionFetcher(Protocol):
    """Fetches candidates from the suggestion service.

    Retries, if any, happen inside the fetcher. A raised exception means
    no suggestion for this request.
    """

    async def fetch(self, request: SuggestionRequest) -> FetchResult:
        ...


@runtime_checkable
class SuggestionDisplay(Protocol):
    """Renders candidates into the editor's completion widget."""

    def show(self, session: RecommendationSession) -> None:
        """Render session.candidates. Raises if rendering failed."""
        ...

    def accepted(
        self,
        session: RecommendationSession,
        text: str,
        *,
        auto_closing_brackets: bool,
    ) -> None:
        """Post-acceptance cleanup, e.g. removing duplicated closing brackets."""
        ...
