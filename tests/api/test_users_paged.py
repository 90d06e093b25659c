"""Paged listing: page math, sorting allow-list and search precedence.

Invariants:
    - 12 records at limit 5 -> 3 pages; page 2 has prev and next, page 3 has only prev
    - sortBy outside name/email/createdAt/updatedAt -> 400
    - email filter is exact and case-insensitive and wins over q
    - q is a case-insensitive substring match on name OR email
"""

import pytest


@pytest.fixture
async def twelve_users(create_user):
    for i in range(12):
        res = await create_user(f"User {i:02d}", f"user{i:02d}@example.com")
        assert res.status_code == 201


@pytest.fixture
async def people(create_user):
    for name, email in [
        ("Ada Lovelace", "ada@example.com"),
        ("Grace Hopper", "grace@navy.mil"),
        ("Alan Turing", "alan@bletchley.uk"),
    ]:
        await create_user(name, email)


async def test_second_page_of_twelve(client, twelve_users):
    res = await client.get("/api/users/paged", params={"page": 2, "limit": 5})

    assert res.status_code == 200
    body = res.json()
    assert len(body["data"]) == 5
    assert body["meta"] == {
        "page": 2, "limit": 5, "total": 12, "totalPages": 3,
        "hasNext": True, "hasPrev": True, "sortBy": "createdAt", "order": "desc",
    }


async def test_last_page_of_twelve(client, twelve_users):
    res = await client.get("/api/users/paged", params={"page": 3, "limit": 5})

    body = res.json()
    assert len(body["data"]) == 2
    assert body["meta"]["hasNext"] is False
    assert body["meta"]["hasPrev"] is True


async def test_defaults(client, twelve_users):
    res = await client.get("/api/users/paged")

    meta = res.json()["meta"]
    assert (meta["page"], meta["limit"], meta["order"]) == (1, 5, "desc")
    assert meta["hasPrev"] is False
    assert res.json()["data"][0]["name"] == "User 11"


async def test_empty_collection_has_one_page(client):
    res = await client.get("/api/users/paged")

    assert res.json()["data"] == []
    assert res.json()["meta"]["total"] == 0
    assert res.json()["meta"]["totalPages"] == 1
    assert res.json()["meta"]["hasNext"] is False


async def test_page_and_limit_are_clamped(client, twelve_users):
    res = await client.get("/api/users/paged", params={"page": 0, "limit": 500})

    meta = res.json()["meta"]
    assert meta["page"] == 1
    assert meta["limit"] == 100
    assert len(res.json()["data"]) == 12


async def test_huge_page_returns_empty_last_page(client, twelve_users):
    res = await client.get("/api/users/paged", params={"page": "10000000000000000000"})

    assert res.status_code == 200
    assert res.json()["data"] == []
    assert res.json()["meta"]["hasNext"] is False


async def test_non_numeric_page_returns_400(client):
    res = await client.get("/api/users/paged", params={"page": "two"})

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid page"}


async def test_bogus_sort_field_returns_400(client):
    res = await client.get("/api/users/paged", params={"sortBy": "bogus"})

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid sortBy"}


async def test_sort_by_created_at_ascending(client, create_user):
    for name in ("first", "second", "third"):
        await create_user(name, f"{name}@example.com")

    res = await client.get(
        "/api/users/paged", params={"sortBy": "createdAt", "order": "asc"},
    )

    assert [u["name"] for u in res.json()["data"]] == ["first", "second", "third"]
    assert res.json()["meta"]["order"] == "asc"


async def test_sort_by_updated_at_puts_last_edited_first(client, create_user):
    first = await create_user("A", "a@example.com")
    await create_user("B", "b@example.com")
    user_id = first.headers["location"].rsplit("/", 1)[-1]
    await client.put(f"/api/users/{user_id}", json={"name": "A2"})

    res = await client.get(
        "/api/users/paged", params={"sortBy": "updatedAt", "order": "desc"},
    )

    assert [u["name"] for u in res.json()["data"]] == ["A2", "B"]
    assert res.json()["meta"]["sortBy"] == "updatedAt"


async def test_sort_by_name_descending(client, people):
    res = await client.get(
        "/api/users/paged", params={"sortBy": "name", "order": "DESC"},
    )
    assert [u["name"] for u in res.json()["data"]] == [
        "Grace Hopper", "Alan Turing", "Ada Lovelace",
    ]


async def test_unknown_order_falls_back_to_descending(client, people):
    res = await client.get(
        "/api/users/paged", params={"sortBy": "email", "order": "sideways"},
    )
    assert res.json()["meta"]["order"] == "desc"
    assert res.json()["data"][0]["email"] == "grace@navy.mil"


async def test_search_matches_name_or_email_case_insensitively(client, people):
    by_name = await client.get("/api/users/paged", params={"q": "HOPPER"})
    by_email = await client.get("/api/users/paged", params={"q": "bletchley"})

    assert [u["name"] for u in by_name.json()["data"]] == ["Grace Hopper"]
    assert [u["name"] for u in by_email.json()["data"]] == ["Alan Turing"]
    assert by_name.json()["meta"]["total"] == 1


async def test_search_treats_wildcards_literally(client, people):
    res = await client.get("/api/users/paged", params={"q": "%"})
    assert res.json()["data"] == []


async def test_email_filter_is_exact_and_wins_over_q(client, people):
    res = await client.get(
        "/api/users/paged", params={"email": "  ADA@example.com ", "q": "grace"},
    )

    assert [u["email"] for u in res.json()["data"]] == ["ada@example.com"]


async def test_email_filter_does_not_substring_match(client, people):
    res = await client.get("/api/users/paged", params={"email": "ada@example"})
    assert res.json()["meta"]["total"] == 0


async def test_rows_are_projected(client, people):
    res = await client.get("/api/users/paged")
    assert set(res.json()["data"][0]) == {"id", "name", "email", "createdAt"}
