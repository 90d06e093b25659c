"""User Schemas: boundary parsing messages and camelCase response envelopes.

Invariants:
    - parse_user_create rejects non-objects and non-string fields with one fixed message
    - parse_user_update distinguishes "nothing to update" from "wrong type"
    - Parsed values are normalized; email validity is judged after trimming
    - Responses use createdAt / totalPages / hasNext casing
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from user_registry.core.domain_types import UserRecord
from user_registry.core.errors import InvalidInputError
from user_registry.core.pagination import PageRequest, build_page_meta
from user_registry.schemas.user import (
    INVALID_BODY, INVALID_EMAIL, NOT_AN_OBJECT, NOTHING_TO_UPDATE,
    PageMetaOut, UserContact, UserDetail, UserEnvelope, UserSummary,
    parse_user_create, parse_user_update,
)


def _record(created_at: datetime) -> UserRecord:
    return UserRecord(id=uuid4(), name="Ada", email="ada@example.com", created_at=created_at)


# --- parse_user_create --------------------------------------------------------

def test_create_normalizes():
    body = parse_user_create({"name": " Ada ", "email": " ADA@Example.com "})
    assert (body.name, body.email) == ("Ada", "ada@example.com")


@pytest.mark.parametrize("payload", [None, [], "x", {"name": "Ada"}, {"name": 1, "email": "a@b.c"}])
def test_create_rejects_bad_shape(payload):
    with pytest.raises(InvalidInputError) as exc_info:
        parse_user_create(payload)
    assert exc_info.value.message == INVALID_BODY


def test_create_rejects_bad_email():
    with pytest.raises(InvalidInputError) as exc_info:
        parse_user_create({"name": "Ada", "email": "ada.example.com"})
    assert exc_info.value.message == INVALID_EMAIL
    assert exc_info.value.field == "email"


def test_create_ignores_unknown_fields():
    body = parse_user_create({"name": "Ada", "email": "ada@example.com", "role": "admin"})
    assert body.model_dump() == {"name": "Ada", "email": "ada@example.com"}


# --- parse_user_update --------------------------------------------------------

def test_update_reports_only_sent_fields():
    assert parse_user_update({"email": "Ada@Example.com"}).changes() == {"email": "ada@example.com"}
    assert parse_user_update({"name": " Ada "}).changes() == {"name": "Ada"}


def test_update_requires_a_field():
    with pytest.raises(InvalidInputError) as exc_info:
        parse_user_update({"role": "admin"})
    assert exc_info.value.message == NOTHING_TO_UPDATE


def test_update_rejects_non_object():
    with pytest.raises(InvalidInputError) as exc_info:
        parse_user_update(["name"])
    assert exc_info.value.message == NOT_AN_OBJECT


def test_update_rejects_null_field():
    with pytest.raises(InvalidInputError) as exc_info:
        parse_user_update({"name": None})
    assert exc_info.value.message == "Field 'name' must be a string."


# --- Responses ----------------------------------------------------------------

def test_detail_serializes_naive_timestamps_as_utc():
    detail = UserDetail.model_validate(_record(datetime(2026, 1, 2, 3, 4, 5)))

    assert detail.to_json() == {
        "name": "Ada", "email": "ada@example.com",
        "createdAt": "2026-01-02T03:04:05+00:00",
    }


def test_summary_includes_id():
    record = _record(datetime(2026, 1, 2, tzinfo=timezone.utc))

    assert UserSummary.model_validate(record).to_json()["id"] == str(record.id)


def test_envelope_keeps_contact_projection():
    record = _record(datetime(2026, 1, 2, tzinfo=timezone.utc))
    body = UserEnvelope(message="User created.", user=UserContact.model_validate(record))

    assert body.to_json() == {
        "message": "User created.",
        "user": {"name": "Ada", "email": "ada@example.com"},
    }


def test_page_meta_is_camel_case():
    meta = PageMetaOut.from_meta(build_page_meta(PageRequest.clamped(page=2, limit=5), 12))

    assert meta.to_json() == {
        "page": 2, "limit": 5, "total": 12, "totalPages": 3,
        "hasNext": True, "hasPrev": True, "sortBy": "createdAt", "order": "desc",
    }
