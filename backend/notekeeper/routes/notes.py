"""
Notekeeper API - Notes Route Handlers
======================================

What:  POST /notes, GET /notes, PUT /notes/{id}, GET /notes/search.
How:   Extracts the client address, body and query parameters, delegates to
       NoteService and returns its response model.

Routes stay thin: every rejection is an exception raised by the service and
formatted by the global handlers in main.py.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from notekeeper.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteCreatedResponse,
    NoteListResponse,
    NoteUpdate,
    NoteUpdateResponse,
    SearchResponse,
)
from notekeeper.services.note_service import (
    MALFORMED_BODY,
    NoteService,
    get_note_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


def client_id_for(request: Request) -> str:
    """Rate limit key for the request: the peer address."""
    return getattr(request.client, "host", None) or "unknown"


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body, None when empty, MALFORMED_BODY when undecodable."""
    if not await request.body():
        return None
    try:
        return await request.json()
    except ValueError:
        return MALFORMED_BODY


@router.post(
    "",
    status_code=201,
    response_model=NoteCreatedResponse,
    responses={
        400: {"description": "Title or content blank", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    request: Request,
    payload: Optional[NoteCreate] = None,
    service: NoteService = Depends(get_note_service),
) -> NoteCreatedResponse:
    body = payload or NoteCreate()
    return service.create_note(
        client_id=client_id_for(request),
        title=body.title,
        content=body.content,
    )


@router.get(
    "",
    response_model=NoteListResponse,
    summary="List all notes, most recently updated first",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> NoteListResponse:
    return service.list_notes()


# Registered before /{note_id} so "search" is never read as an id
@router.get(
    "/search",
    response_model=SearchResponse,
    responses={
        400: {"description": "Query missing or blank", "model": ErrorResponse},
    },
    summary="Search notes by title or content",
    description="Case-insensitive substring search. Results are ordered by last update.",
)
async def search_notes(
    q: Optional[str] = Query(default=None, description="Text to look for"),
    service: NoteService = Depends(get_note_service),
) -> SearchResponse:
    return service.search_notes(q)


@router.put(
    "/{note_id}",
    response_model=NoteUpdateResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "A provided field is blank", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": NoteUpdate.model_json_schema()}},
        },
    },
    summary="Update a note's title and/or content",
)
async def update_note(
    note_id: str,
    request: Request,
    service: NoteService = Depends(get_note_service),
) -> NoteUpdateResponse:
    """
    Partially update a note.

    Both the id and the body are taken raw: the service looks the note up
    first, so an unknown or non-numeric id is a 404 whatever the body holds,
    and only then decides whether the body is usable.
    """
    return service.update_note(note_id, await read_json_body(request))
