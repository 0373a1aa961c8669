"""
Test suite for broker event contracts.

System role: Verification of queue message validation and serialization
"""

import pytest
from pydantic import ValidationError

from docingest.boundary.db.models import IngestionStatus
from docingest.models.events import DeadLetterMessage, StatusUpdateEvent, WorkEvent


class TestStatusUpdateEvent:
    """Test suite for StatusUpdateEvent validation."""

    def test_valid_event_with_all_fields(self) -> None:
        """Test camelCase payload parses into snake_case fields."""
        event = StatusUpdateEvent.model_validate(
            {"documentId": "abc", "status": "completed", "details": "done", "summary": "ok"}
        )

        assert event.document_id == "abc"
        assert event.status == IngestionStatus.COMPLETED
        assert event.details == "done"
        assert event.summary == "ok"

    def test_status_is_case_insensitive(self) -> None:
        """Test uppercase status values are accepted."""
        event = StatusUpdateEvent.model_validate({"documentId": "abc", "status": "PROCESSING"})

        assert event.status == IngestionStatus.PROCESSING

    def test_optional_fields_default_to_none(self) -> None:
        event = StatusUpdateEvent.model_validate({"documentId": "abc", "status": "failed"})

        assert event.details is None
        assert event.summary is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"documentId": "abc"},
            {"status": "completed"},
            {"documentId": "abc", "status": "unknown"},
            {"documentId": 123, "status": "completed"},
            {"documentId": "abc", "status": 1},
            {"documentId": "abc", "status": "completed", "summary": 42},
            {"documentId": "abc", "status": "completed", "details": ["x"]},
        ],
    )
    def test_invalid_payloads_are_rejected(self, payload: dict) -> None:
        """Test missing fields, unknown status and non-string values fail."""
        with pytest.raises(ValidationError):
            StatusUpdateEvent.model_validate(payload)


class TestWorkEvent:
    """Test suite for WorkEvent serialization."""

    def test_to_message_uses_camel_case(self) -> None:
        event = WorkEvent(document_id="d1", user_id="u1", attempt_id=2, storage_key="k")

        assert event.to_message() == {
            "documentId": "d1",
            "userId": "u1",
            "attemptId": 2,
            "storageKey": "k",
        }

    def test_attempt_id_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            WorkEvent(document_id="d1", user_id="u1", attempt_id=0, storage_key="k")


class TestDeadLetterMessage:
    """Test suite for DeadLetterMessage serialization."""

    def test_error_omitted_when_absent(self) -> None:
        message = DeadLetterMessage(event="document_status_update", data="raw")

        assert message.to_message() == {"event": "document_status_update", "data": "raw"}

    def test_error_included_when_present(self) -> None:
        message = DeadLetterMessage(event="document_status_update", data={"a": 1}, error="boom")

        assert message.to_message()["error"] == "boom"
