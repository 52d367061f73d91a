"""
Notekeeper API - In-Memory Note Store
======================================

What:  The ordered collection of notes plus the monotonic id counter.
How:   A Python list scanned linearly; every read and write runs under a
       single `threading.Lock`, so id assignment, append and update are
       serialized even when handlers run on worker threads.
Who:   Owned by NoteService; nothing else mutates it.
When:  Created empty at process start, cleared on shutdown. Nothing is
       persisted across restarts.

Ordering:
    list() and search() return notes by `updated_at` descending. Python's
    sort is stable, so notes sharing a timestamp keep insertion order.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from notekeeper.models.note import Note, NoteUpdateResult

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _by_recent_update(notes: List[Note]) -> List[Note]:
    return sorted(notes, key=lambda note: note.updated_at, reverse=True)


class NoteStore:
    """
    Thread-safe in-memory note collection.

    All methods return copies of the stored records. Callers are expected to
    pass already-validated, non-blank strings to `create`; `update` trims
    its inputs itself so that comparisons against stored values are exact.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or utc_now
        self._lock = threading.Lock()
        self._notes: List[Note] = []
        self._next_id = 1

    def create(self, title: str, content: str) -> Note:
        with self._lock:
            now = self._clock()
            note = Note(
                id=self._next_id,
                title=title.strip(),
                content=content.strip(),
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self._notes.append(note)
            return note.copy()

    def list(self) -> List[Note]:
        with self._lock:
            return _by_recent_update([note.copy() for note in self._notes])

    def find_by_id(self, note_id: int) -> Optional[Note]:
        with self._lock:
            note = self._find(note_id)
            return note.copy() if note else None

    def update(
        self,
        note_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Optional[NoteUpdateResult]:
        """
        Apply a partial update.

        Each provided field is trimmed and compared to the stored value; only
        real differences are staged. With nothing staged the record is left
        untouched (no timestamp bump). Otherwise every staged change and the
        new `updated_at` are applied together.

        Returns None when no note has `note_id`.
        """
        with self._lock:
            note = self._find(note_id)
            if note is None:
                return None

            staged = {}
            if title is not None and title.strip() != note.title:
                staged["title"] = title.strip()
            if content is not None and content.strip() != note.content:
                staged["content"] = content.strip()

            if not staged:
                return NoteUpdateResult(note=note.copy())

            for field_name, value in staged.items():
                setattr(note, field_name, value)
            note.updated_at = self._clock()
            return NoteUpdateResult(note=note.copy(), updated_fields=list(staged))

    def search(self, query: str) -> List[Note]:
        needle = query.strip().lower()
        with self._lock:
            hits = [note.copy() for note in self._notes if note.matches(needle)]
        return _by_recent_update(hits)

    def count(self) -> int:
        with self._lock:
            return len(self._notes)

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._notes)
            self._notes.clear()
            self._next_id = 1
        logger.debug("Note store cleared (%d notes dropped)", dropped)

    def _find(self, note_id: int) -> Optional[Note]:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None
