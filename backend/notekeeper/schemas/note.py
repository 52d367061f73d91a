"""
Notekeeper API - Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these models to parse request bodies, serialize
       responses and generate the OpenAPI document.

Request bodies are deliberately lenient: title/content are optional and
non-string values are coerced to "" so that the service-level validator
reports them with the same messages as blank strings. Blank checks are a
business rule and live in services/validation.py, not here.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


def _non_string_to_blank(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return ""


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /notes."""

    title: Optional[str] = Field(default=None, description="Note title (required, trimmed)")
    content: Optional[str] = Field(default=None, description="Note body (required, trimmed)")

    @field_validator("title", "content", mode="before")
    @classmethod
    def coerce_non_strings(cls, v: Any) -> Any:
        return _non_string_to_blank(v)


class NoteUpdate(BaseModel):
    """
    Body of PUT /notes/{id}.

    Presence matters: a field left out of the JSON is not touched, a field
    sent as "" or null is rejected. Use `provided_fields()` rather than
    checking for None.
    """

    title: Optional[str] = Field(default=None, description="New title (optional)")
    content: Optional[str] = Field(default=None, description="New content (optional)")

    @field_validator("title", "content", mode="before")
    @classmethod
    def coerce_non_strings(cls, v: Any) -> Any:
        return _non_string_to_blank(v)

    def provided_fields(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    id: int = Field(description="Sequential note identifier, starting at 1")
    title: str
    content: str
    created_at: datetime = Field(description="Creation time (UTC, ISO 8601)")
    updated_at: datetime = Field(description="Last change time (UTC, ISO 8601)")

    model_config = {"from_attributes": True}


class NoteCreatedResponse(BaseModel):
    message: str = Field(default="Note created successfully")
    note: NoteResponse


class NoteListResponse(BaseModel):
    """All notes, most recently updated first."""

    count: int
    notes: List[NoteResponse]


class NoteUpdateResponse(BaseModel):
    """
    Result of PUT /notes/{id}.

    `updated_fields` is omitted when nothing changed; the message then says
    so and `note` is the untouched record.
    """

    message: str
    note: NoteResponse
    updated_fields: Optional[List[str]] = None


class SearchResponse(BaseModel):
    query: str = Field(description="The normalized (trimmed, lower-cased) query")
    count: int
    notes: List[NoteResponse]


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "details": ["Content is required and cannot be empty or just spaces"],
            "request_id": "1f0c9a2b"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status")
    version: str
    note_count: int = Field(description="Notes currently held in memory")
    uptime_seconds: float
