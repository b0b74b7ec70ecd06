# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Host UI surface the coordinator drives but does not own."""

from typing import Any, Protocol, runtime_checkable

LEARN_MORE_URI = "https://inkling.dev/docs/getting-started"
WELCOME_README = "resources/welcome.md"


@runtime_checkable
class Host(Protocol):
    """Editor-side UI actions. Implementations must not block."""

    async def refresh_explorer(self) -> None:
        """Re-render the explorer nodes that reflect consent state."""
        ...

    async def set_context(self, key: str, value: Any) -> None:
        """Set a context key used by menu `when` clauses."""
        ...

    async def show_welcome(self, readme: str) -> None:
        """Open the welcome page beside the active editor."""
        ...

    async def open_external(self, uri: str) -> None:
        ...

    async def open_settings(self) -> None:
        ...

    async def activate_view(self) -> None:
        """Show the suggestions view."""
        ...
