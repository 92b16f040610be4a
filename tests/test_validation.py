from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from task_tracker.errors import ValidationFailedError
from task_tracker.models import TaskPriority, TaskStatus
from task_tracker.validation import (
    parse_category,
    parse_profile_update,
    parse_registration,
    parse_task_create,
    parse_task_update,
)


def test_task_create_trims_and_applies_defaults() -> None:
    payload = parse_task_create({"title": "  Plan sprint  ", "description": "  notes  "})

    assert payload.title == "Plan sprint"
    assert payload.description == "notes"
    assert payload.status is TaskStatus.TODO
    assert payload.priority is TaskPriority.MEDIUM
    assert payload.category_id is None


def test_task_create_reports_every_offending_field() -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        parse_task_create({"title": "ab", "description": "x" * 1001, "priority": "URGENT"})

    fields = excinfo.value.fields
    assert set(fields) == {"title", "description", "priority"}
    assert all(reasons for reasons in fields.values())
    assert excinfo.value.details == {"fields": fields}


def test_task_create_parses_dates_as_utc() -> None:
    date_only = parse_task_create({"title": "Pay rent", "due_date": "2030-03-01"})
    assert date_only.due_date == datetime(2030, 3, 1, tzinfo=timezone.utc)

    offset = parse_task_create({"title": "Pay rent", "due_date": "2030-03-01T10:00:00+02:00"})
    assert offset.due_date == datetime(2030, 3, 1, 8, 0, tzinfo=timezone.utc)
    assert offset.due_date.utcoffset() == timedelta(0)

    blank = parse_task_create({"title": "Pay rent", "due_date": "  ", "category_id": ""})
    assert blank.due_date is None
    assert blank.category_id is None

    with pytest.raises(ValidationFailedError) as excinfo:
        parse_task_create({"title": "Pay rent", "due_date": "next tuesday"})
    assert "due_date" in excinfo.value.fields


def test_task_update_keeps_only_present_fields() -> None:
    update = parse_task_update({"status": "COMPLETED", "description": None})

    assert update.changes() == {"status": TaskStatus.COMPLETED, "description": None}


@pytest.mark.parametrize("field", ["title", "status", "priority"])
def test_task_update_rejects_null_for_required_fields(field: str) -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        parse_task_update({field: None})
    assert field in excinfo.value.fields


def test_non_mapping_payload_is_rejected() -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        parse_task_create(["not", "an", "object"])
    assert "__root__" in excinfo.value.fields


def test_category_name_bounds() -> None:
    assert parse_category({"name": "  Work  "}).name == "Work"

    with pytest.raises(ValidationFailedError) as short:
        parse_category({"name": " a "})
    assert "name" in short.value.fields

    with pytest.raises(ValidationFailedError):
        parse_category({"name": "x" * 31})


def test_registration_validates_email_and_password() -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        parse_registration({"name": "A", "email": "not-an-email", "password": "short"})

    assert set(excinfo.value.fields) == {"name", "email", "password"}


def test_profile_update_rejects_null_name_but_clears_image() -> None:
    assert parse_profile_update({"image": None}).changes() == {"image": None}

    with pytest.raises(ValidationFailedError) as excinfo:
        parse_profile_update({"name": None})
    assert "name" in excinfo.value.fields
