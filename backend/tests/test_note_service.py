"""
Notekeeper API - Note Service Unit Tests
=========================================

What:  Tests for NoteService business logic (create, list, update, search).
How:   Real NoteStore and limiter on fake clocks; no HTTP involved.

What we test:
    ✅ Create: trimming, validation messages, rate limit ordering
    ✅ Rejections leave store and limiter untouched
    ✅ Update: 404 before validation, change detection, updated_fields
    ✅ Search: missing vs blank query, normalization, ordering
"""

import pytest

from notekeeper.exceptions import (
    InvalidQueryError,
    MissingQueryError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from notekeeper.services.note_service import (
    MALFORMED_BODY,
    NO_CHANGES_MESSAGE,
    UPDATED_MESSAGE,
    changes_from_body,
    parse_note_id,
)

CLIENT = "198.51.100.7"


class TestNoteServiceCreate:
    """Tests for the create_note workflow."""

    def test_create_note_success(self, service):
        """Valid input should be trimmed, stored and returned with id 1."""
        result = service.create_note(CLIENT, "  Meeting Notes  ", "  Discussed hiring  ")

        assert result.message == "Note created successfully"
        assert result.note.id == 1
        assert result.note.title == "Meeting Notes"
        assert result.note.content == "Discussed hiring"
        assert result.note.created_at == result.note.updated_at

    def test_create_lists_every_missing_field(self, service):
        """Create validation reports all failing fields, not just the first."""
        with pytest.raises(ValidationError) as exc_info:
            service.create_note(CLIENT, " ", None)

        assert exc_info.value.details == [
            "Title is required and cannot be empty or just spaces",
            "Content is required and cannot be empty or just spaces",
        ]
        assert service.store.count() == 0

    def test_invalid_create_does_not_use_rate_limit(self, service, limiter):
        """Rejected creates give their rate limit slot back."""
        for _ in range(10):
            with pytest.raises(ValidationError):
                service.create_note(CLIENT, "", "")

        assert limiter.remaining(CLIENT) == 5

    def test_rate_limit_checked_before_validation(self, service):
        """An over-limit client gets RateLimitExceededError even with a bad payload."""
        for i in range(5):
            service.create_note(CLIENT, f"t{i}", "c")

        with pytest.raises(RateLimitExceededError):
            service.create_note(CLIENT, "", "")
        assert service.store.count() == 5

    def test_rate_limit_recovers_after_window(self, service, clock):
        for i in range(5):
            service.create_note(CLIENT, f"t{i}", "c")
        with pytest.raises(RateLimitExceededError):
            service.create_note(CLIENT, "t5", "c")

        clock.advance(60)
        assert service.create_note(CLIENT, "t6", "c").note.id == 6


class TestNoteServiceList:
    """Tests for list_notes."""

    def test_list_empty(self, service):
        """Empty store should return count 0 and no notes."""
        result = service.list_notes()
        assert result.count == 0
        assert result.notes == []

    def test_list_most_recent_first(self, service):
        """An updated note moves to the front of the list."""
        for title in ("one", "two", "three"):
            service.create_note(CLIENT, title, "c")
        service.update_note("1", {"content": "changed"})

        result = service.list_notes()
        assert result.count == 3
        assert [n.id for n in result.notes] == [1, 3, 2]


class TestNoteServiceUpdate:
    """Tests for the update_note workflow."""

    def setup_method(self):
        self.client = CLIENT

    def test_update_title_only(self, service):
        """Only the provided field changes and updated_at moves forward."""
        created = service.create_note(self.client, "Old", "Body").note
        result = service.update_note(str(created.id), {"title": "New"})

        assert result.message == UPDATED_MESSAGE
        assert result.updated_fields == ["title"]
        assert result.note.title == "New"
        assert result.note.content == "Body"
        assert result.note.updated_at > created.updated_at

    def test_update_with_same_value_reports_no_changes(self, service):
        """A value equal after trimming is not a change."""
        created = service.create_note(self.client, "Same", "Body").note
        result = service.update_note(str(created.id), {"title": "  Same  "})

        assert result.message == NO_CHANGES_MESSAGE
        assert result.updated_fields is None
        assert result.note.updated_at == created.updated_at

    def test_update_empty_payload_reports_no_changes(self, service):
        service.create_note(self.client, "T", "C")
        assert service.update_note("1", {}).message == NO_CHANGES_MESSAGE

    def test_update_without_body_reports_no_changes(self, service):
        """No body at all is treated like an empty object."""
        service.create_note(self.client, "T", "C")
        assert service.update_note("1", None).message == NO_CHANGES_MESSAGE

    def test_update_unknown_id_is_not_found_even_with_bad_payload(self, service):
        """Non-existent note should raise NotFoundError before validation."""
        with pytest.raises(NotFoundError) as exc_info:
            service.update_note("99999", {"title": ""})
        assert exc_info.value.message == "No note exists with id 99999"

    @pytest.mark.parametrize("body", [["x"], "text", 5, MALFORMED_BODY])
    def test_update_unknown_id_with_non_object_body_is_not_found(self, service, body):
        """The id is resolved before the body shape is checked."""
        with pytest.raises(NotFoundError):
            service.update_note("99999", body)

    @pytest.mark.parametrize("body,detail", [
        (["x"], "Request body must be a JSON object"),
        (MALFORMED_BODY, "Request body must be valid JSON"),
    ])
    def test_update_existing_note_with_unusable_body(self, service, body, detail):
        """An existing note with a non-object body is a ValidationError."""
        service.create_note(self.client, "T", "C")
        with pytest.raises(ValidationError) as exc_info:
            service.update_note("1", body)
        assert exc_info.value.details == [detail]
        assert service.store.find_by_id(1).title == "T"

    @pytest.mark.parametrize("raw_id", ["abc", "0", "-3", "1.5", "", "1_0", " 1", "1 ", "١"])
    def test_update_unparseable_id_is_not_found(self, service, raw_id):
        """Ids that are not plain ASCII digits never resolve to a note."""
        for i in range(10):
            service.store.create(f"T{i}", "C")
        with pytest.raises(NotFoundError):
            service.update_note(raw_id, {"title": "x"})
        assert [n.title for n in service.store.list()] == [f"T{i}" for i in reversed(range(10))]

    def test_update_blank_field_rejected_and_note_unchanged(self, service):
        """First blank provided field is reported and nothing is written."""
        created = service.create_note(self.client, "T", "C").note
        with pytest.raises(ValidationError) as exc_info:
            service.update_note("1", {"title": "New", "content": "   "})

        assert exc_info.value.details == ["Content cannot be empty or just spaces"]
        stored = service.store.find_by_id(1)
        assert stored.title == "T"
        assert stored.updated_at == created.updated_at


class TestNoteServiceSearch:
    """Tests for search_notes."""

    def test_search_case_insensitive(self, service):
        """Upper-case query should match lower-case title."""
        service.create_note(CLIENT, "Meeting agenda", "Q1 goals")
        service.create_note(CLIENT, "Shopping", "groceries")

        result = service.search_notes("MEETING")
        assert result.query == "meeting"
        assert result.count == 1
        assert result.notes[0].title == "Meeting agenda"

    def test_search_echoes_normalized_query(self, service):
        assert service.search_notes("  Meet  ").query == "meet"

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing_query(self, service, raw):
        """Absent or empty q should raise MissingQueryError."""
        with pytest.raises(MissingQueryError):
            service.search_notes(raw)

    def test_blank_query(self, service):
        """Whitespace-only q should raise InvalidQueryError."""
        with pytest.raises(InvalidQueryError):
            service.search_notes("   ")


class TestParseNoteId:
    """Tests for turning a path segment into a note id."""

    @pytest.mark.parametrize("raw,expected", [
        ("1", 1),
        (7, 7),
        ("007", 7),
        ("x", None),
        (None, None),
        (True, None),
        ("0", None),
        ("1_0", None),
        ("+1", None),
        ("²", None),
    ])
    def test_parse(self, raw, expected):
        """Only positive ASCII digit strings (or ints) become ids."""
        assert parse_note_id(raw) == expected


class TestChangesFromBody:
    """Tests for extracting update fields from a decoded body."""

    def test_only_present_fields_are_returned(self):
        """Absent keys are left out; explicit null is kept."""
        assert changes_from_body({"title": None}) == {"title": None}

    def test_no_body_is_no_changes(self):
        assert changes_from_body(None) == {}

    def test_array_body_rejected(self):
        """A JSON array is not a usable update body."""
        with pytest.raises(ValidationError) as exc_info:
            changes_from_body(["x"])
        assert exc_info.value.fields == ["body"]
