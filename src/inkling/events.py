# SPDX-FileCopyrightText: 2026 Inkling authors
#
# SPDX-License-Identifier: Apache-2.0

"""Host events, as one tagged union the coordinator dispatches on."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class SelectionOrigin(enum.Enum):
    KEYBOARD = "keyboard"
    POINTER = "pointer"
    COMMAND = "command"


@dataclass(frozen=True)
class Document:
    uri: str
    language_id: str


@dataclass(frozen=True)
class Editor:
    """The active text editor at the moment an event fired."""

    document: Document
    line: int = 0


@dataclass(frozen=True)
class ManualTrigger:
    """Explicit invoke command. editor is None when nothing is focused."""

    editor: Editor | None


@dataclass(frozen=True)
class TextChanged:
    """Keystroke-driven change. active is the focused editor, if any."""

    document: Document
    active: Editor | None
    changes: tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentSaved:
    document: Document | None = None


@dataclass(frozen=True)
class ActiveEditorChanged:
    editor: Editor | None = None


@dataclass(frozen=True)
class VisibleEditorsChanged:
    editors: tuple[Editor, ...] = ()


@dataclass(frozen=True)
class SelectionChanged:
    origin: SelectionOrigin
    editor: Editor | None = None


@dataclass(frozen=True)
class DocumentClosed:
    document: Document | None = None


@dataclass(frozen=True)
class ConfigurationChanged:
    """sections holds the dotted settings prefixes that changed."""

    sections: frozenset[str] = field(default_factory=frozenset)

    def affects(self, name: str) -> bool:
        """True if name, a parent of it, or a child of it changed."""
        return any(
            s == name or s.startswith(name + ".") or name.startswith(s + ".")
            for s in self.sections
        )


@dataclass(frozen=True)
class Shutdown:
    pass


TriggerEvent = ManualTrigger | TextChanged
RejectionEvent = (
    DocumentSaved
    | ActiveEditorChanged
    | VisibleEditorsChanged
    | SelectionChanged
    | DocumentClosed
)
Event = TriggerEvent | RejectionEvent | Shutdown
