"""
Notekeeper API - Note Domain Model
===================================

What:  The `Note` record held by the in-memory store.
How:   A plain dataclass. The store owns the canonical instances and hands
       out copies, so a caller can never mutate a stored note.

Field lifecycle:
    id          Assigned once by the store, sequential from 1, never reused
    title       Trimmed, never empty
    content     Trimmed, never empty
    created_at  Set at creation, never changes
    updated_at  Equal to created_at until a real field change happens
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List


@dataclass
class Note:
    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    def copy(self) -> "Note":
        return replace(self)

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match; `needle` must already be lower-cased."""
        return needle in self.title.lower() or needle in self.content.lower()


@dataclass
class NoteUpdateResult:
    """Outcome of `NoteStore.update`: the current note and what changed."""

    note: Note
    updated_fields: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.updated_fields)
