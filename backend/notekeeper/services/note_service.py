"""
Notekeeper API - Note Service (Business Logic Orchestrator)
============================================================

What:  Coordinates rate limiting, validation and the note store for the four
       note operations: create, list, update, search.
How:   Holds a NoteStore and a SlidingWindowRateLimiter; each method either
       returns a response schema or raises an application exception that the
       global handlers turn into an error response.
Who:   Called by the route handlers through the `get_note_service` dependency.
When:  Once per request.

Request Flows:
    create:  rate limit → validate (all fields) → store.create
    list:    store.list
    update:  resolve id (404) → validate present fields (first error) → store.update
    search:  require q → normalize → store.search

Rejections never change state: a rate-limited request records nothing, and
a create that fails validation gives back the rate limit slot it was granted.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from notekeeper.config import settings
from notekeeper.exceptions import (
    InvalidQueryError,
    MissingQueryError,
    NotFoundError,
    ValidationError,
)
from notekeeper.schemas.note import (
    NoteCreatedResponse,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    NoteUpdateResponse,
    SearchResponse,
)
from notekeeper.services.rate_limiter import SlidingWindowRateLimiter
from notekeeper.services.validation import (
    normalize_query,
    validate_note_changes,
    validate_note_input,
)
from notekeeper.store import NoteStore

logger = logging.getLogger(__name__)

NO_CHANGES_MESSAGE = "No changes detected - note remains unchanged"
UPDATED_MESSAGE = "Note updated successfully"

# Marks a request body that was present but not decodable as JSON
MALFORMED_BODY = object()


def parse_note_id(raw: Any) -> Optional[int]:
    """
    Turn a path segment into a note id; None if it cannot name a note.

    Only plain ASCII digit strings (or ints) qualify. `int()` alone would
    also take "1_0", " 7" or non-ASCII digits and resolve them to some
    other note.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        note_id = raw
    elif isinstance(raw, str) and raw.isascii() and raw.isdigit():
        note_id = int(raw)
    else:
        return None
    return note_id if note_id > 0 else None


def changes_from_body(body: Any) -> Dict[str, Any]:
    """
    Extract the note fields present in a decoded update body.

    None (no body) means no changes. Anything that is not a JSON object is a
    ValidationError.
    """
    if body is None:
        return {}
    if body is MALFORMED_BODY:
        raise ValidationError(details=["Request body must be valid JSON"], fields=["body"])
    if not isinstance(body, dict):
        raise ValidationError(details=["Request body must be a JSON object"], fields=["body"])
    return NoteUpdate.model_validate(body).provided_fields()


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create_note(): Rate-limited, validated note creation
        - list_notes(): All notes, most recently updated first
        - update_note(): Partial update with change detection
        - search_notes(): Case-insensitive substring search
    """

    def __init__(self, store: NoteStore, limiter: SlidingWindowRateLimiter):
        self.store = store
        self.limiter = limiter

    def create_note(self, client_id: str, title: Any, content: Any) -> NoteCreatedResponse:
        """
        Create a note for `client_id`.

        Raises:
            RateLimitExceededError: Client exceeded its creation window
            ValidationError: Title and/or content blank (all failures listed)
        """
        stamp = self.limiter.hit(client_id)

        validation = validate_note_input(title, content)
        if not validation.is_valid:
            self.limiter.release(client_id, stamp)
            logger.info(
                "Rejected note from %s: invalid %s",
                client_id,
                ", ".join(validation.invalid_fields),
            )
            validation.raise_for_errors()

        note = self.store.create(validation.title, validation.content)
        logger.info("Note %d created by %s", note.id, client_id)

        return NoteCreatedResponse(note=NoteResponse.model_validate(note))

    def list_notes(self) -> NoteListResponse:
        notes = [NoteResponse.model_validate(note) for note in self.store.list()]
        return NoteListResponse(count=len(notes), notes=notes)

    def update_note(self, note_id: Any, body: Any) -> NoteUpdateResponse:
        """
        Apply the fields present in `body` to an existing note.

        An unknown id is reported before the body is looked at, so a
        missing note is always a 404 whatever the body contains, even when
        it is not a JSON object or not JSON at all.

        Args:
            note_id: Raw id from the URL path
            body: Decoded request body (None, a dict, any other JSON value,
                  or MALFORMED_BODY)

        Raises:
            NotFoundError: No note with this id
            ValidationError: Body is not a JSON object, or the first
                provided field that is blank
        """
        parsed_id = parse_note_id(note_id)
        if parsed_id is None or self.store.find_by_id(parsed_id) is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        try:
            cleaned = validate_note_changes(changes_from_body(body))
        except ValidationError as e:
            logger.info("Rejected update of note %d: invalid %s", parsed_id, ", ".join(e.fields))
            raise

        result = self.store.update(parsed_id, **cleaned)
        if result is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        note = NoteResponse.model_validate(result.note)
        if not result.changed:
            return NoteUpdateResponse(message=NO_CHANGES_MESSAGE, note=note)

        logger.info("Note %d updated: %s", parsed_id, ", ".join(result.updated_fields))
        return NoteUpdateResponse(
            message=UPDATED_MESSAGE,
            note=note,
            updated_fields=result.updated_fields,
        )

    def search_notes(self, raw_query: Optional[str]) -> SearchResponse:
        """
        Raises:
            MissingQueryError: `q` absent or empty
            InvalidQueryError: `q` only whitespace
        """
        query, notes = self._search(raw_query)
        results = [NoteResponse.model_validate(note) for note in notes]
        return SearchResponse(query=query, count=len(results), notes=results)

    def _search(self, raw_query: Optional[str]) -> Tuple[str, list]:
        if not raw_query:
            raise MissingQueryError()
        query = normalize_query(raw_query)
        if query is None:
            raise InvalidQueryError(context={"query": raw_query})
        return query, self.store.search(query)

    def reset(self) -> None:
        """Discard all notes and rate limit history."""
        self.store.clear()
        self.limiter.reset()


def build_note_service() -> NoteService:
    """Wire a NoteService from the current settings."""
    return NoteService(
        store=NoteStore(),
        limiter=SlidingWindowRateLimiter(
            limit=settings.rate_limit_requests,
            window=settings.rate_limit_window,
            cleanup_every=settings.rate_limit_cleanup_every,
        ),
    )


# ── Process-wide Instance ─────────────────────────────────────────────────
# Created empty at import, cleared at shutdown (see main.lifespan)
note_service = build_note_service()


def get_note_service() -> NoteService:
    """FastAPI dependency returning the process-wide NoteService."""
    return note_service
