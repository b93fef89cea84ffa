from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import pytest
from pydantic import ValidationError

from tasktable.models import TaskRecord, TaskStatus, parse_timestamp

UUID_A = "6f1b8a4e-3c1e-4c55-9a6b-0f6d2a1e7b11"
UUID_B = "0a4c2d6e-8f10-4b12-a3c4-5e6f7a8b9c0d"


def test_compact_timestamps_become_local_naive() -> None:
    parsed = parse_timestamp("20240131T120000Z")

    expected = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed == expected
    assert parsed.tzinfo is None


def test_iso_and_empty_timestamps() -> None:
    assert parse_timestamp("2024-02-01T08:30:00") == datetime(2024, 2, 1, 8, 30)
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
    with pytest.raises(ValueError):
        parse_timestamp("next tuesday")


def test_record_from_export_payload() -> None:
    record = TaskRecord.model_validate(
        {
            "id": 3,
            "uuid": UUID_A,
            "description": "Write report",
            "status": "pending",
            "entry": "20240101T090000Z",
            "project": "work",
            "tags": ["office", "READY"],
            "depends": f"{UUID_B}",
            "annotations": [{"entry": "20240102T090000Z", "description": "draft sent"}],
            "urgency": 4.5,
            "estimate": 3600,
            "reviewer": "sam",
            "flagged": True,
        }
    )

    assert record.uuid == UUID(UUID_A)
    assert record.status is TaskStatus.PENDING
    assert record.depends == [UUID(UUID_B)]
    assert record.annotation_count == 1
    assert record.attributes == {"estimate": 3600, "reviewer": "sam"}


def test_zero_id_means_no_working_set_number() -> None:
    record = TaskRecord.model_validate(
        {"id": 0, "uuid": UUID_A, "status": "completed", "entry": "20240101T090000Z"}
    )

    assert record.id is None
    assert record.status.display_name == "Completed"


def test_record_requires_entry_and_uuid() -> None:
    with pytest.raises(ValidationError):
        TaskRecord.model_validate({"uuid": UUID_A})
    with pytest.raises(ValidationError):
        TaskRecord.model_validate({"uuid": "not-a-uuid", "entry": "20240101T090000Z"})


def test_to_document_flattens_attributes() -> None:
    record = TaskRecord.model_validate(
        {"uuid": UUID_A, "entry": "2024-01-01T09:00:00", "estimate": 90}
    )

    document = record.to_document()

    assert document["uuid"] == UUID_A
    assert document["estimate"] == 90
    assert "attributes" not in document
    assert "due" not in document
    assert TaskRecord.model_validate(document).attributes == {"estimate": 90}
