"""Domain Types: verifies the sorting vocabulary and identity wrapper.

Tests:
    - SortField is exactly the public allow-list
    - SortOrder.parse only honours an explicit "asc"
    - ConnectionState covers the connection lifecycle
"""

from uuid import uuid4

import pytest

from user_registry.core.domain_types import ConnectionState, SortField, SortOrder, UserId


def test_user_id_wraps_uuid():
    uid = uuid4()
    assert UserId(uid) == uid


def test_sort_field_allow_list():
    assert {f.value for f in SortField} == {"name", "email", "createdAt", "updatedAt"}


def test_sort_field_rejects_unknown_names():
    with pytest.raises(ValueError):
        SortField("created_at")


@pytest.mark.parametrize("raw, expected", [
    ("asc", SortOrder.ASC),
    ("ASC", SortOrder.ASC),
    (" asc ", SortOrder.ASC),
    ("desc", SortOrder.DESC),
    ("ascending", SortOrder.DESC),
    ("", SortOrder.DESC),
    (None, SortOrder.DESC),
])
def test_sort_order_parse(raw, expected):
    assert SortOrder.parse(raw) is expected


def test_connection_state_members():
    assert {s.value for s in ConnectionState} == {
        "uninitialized", "connecting", "ready", "disconnected", "failed", "closed",
    }
