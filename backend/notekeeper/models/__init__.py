from notekeeper.models.note import Note, NoteUpdateResult

__all__ = ["Note", "NoteUpdateResult"]
