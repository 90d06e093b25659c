"""User Routes: CRUD, paged listing and search over /api/users.

Invariants:
    - Every route is behind the readiness guard (503 before any query)
    - Bodies and ids are validated before the gateway is called
    - Exactly one gateway operation per request
    - Failures are raised as UserRegistryError and shaped by the global handlers
    - /paged is registered before /{user_id} so it is never parsed as an id
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from user_registry.api.dependencies import get_user_gateway, read_payload, require_db_ready
from user_registry.core.domain_types import SortField, SortOrder
from user_registry.core.errors import InvalidInputError, UserNotFoundError
from user_registry.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, PageRequest, build_page_meta
from user_registry.core.search_filter import UserFilter
from user_registry.core.validation import parse_user_id
from user_registry.core.repository_protocols import UserRepository
from user_registry.schemas.user import (
    PageMetaOut, UserContact, UserDetail, UserEnvelope, UserPage, UserSummary,
    parse_user_create, parse_user_update,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/users", tags=["users"],
    dependencies=[Depends(require_db_ready)],
)


def _parse_sort_field(raw: str) -> SortField:
    try:
        return SortField(raw)
    except ValueError:
        raise InvalidInputError("Invalid sortBy", field="sortBy")


@router.get("/paged")
async def list_users_paged(
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_LIMIT),
    sort_by: str = Query(SortField.CREATED_AT.value, alias="sortBy"),
    order: str | None = Query(None),
    q: str | None = Query(None),
    email: str | None = Query(None),
    gateway: UserRepository = Depends(get_user_gateway),
):
    """Paged listing with exact-email or free-text search."""
    request = PageRequest.clamped(
        page=page, limit=limit,
        sort_by=_parse_sort_field(sort_by), order=SortOrder.parse(order),
    )
    user_filter = UserFilter.from_query(q=q, email=email)
    rows, total = await gateway.find_page(
        user_filter, request.sort_by, request.order, request.skip, request.limit,
    )
    body = UserPage(
        data=[UserSummary.model_validate(r) for r in rows],
        meta=PageMetaOut.from_meta(build_page_meta(request, total)),
    )
    return body.to_json()


@router.get("")
async def list_users(gateway: UserRepository = Depends(get_user_gateway)):
    """Every user, newest first."""
    rows = await gateway.list_all()
    return [UserSummary.model_validate(r).to_json() for r in rows]


@router.get("/{user_id}")
async def get_user(user_id: str, gateway: UserRepository = Depends(get_user_gateway)):
    uid = parse_user_id(user_id)
    record = await gateway.find_by_id(uid)
    if record is None:
        raise UserNotFoundError(user_id)
    return UserEnvelope(
        message="User found.", user=UserDetail.model_validate(record),
    ).to_json()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: Any = Depends(read_payload),
    gateway: UserRepository = Depends(get_user_gateway),
):
    body = parse_user_create(payload)
    record = await gateway.create(body.name, body.email)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=UserEnvelope(
            message="User created.", user=UserContact.model_validate(record),
        ).to_json(),
        headers={"Location": f"{router.prefix}/{record.id}"},
    )


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: Any = Depends(read_payload),
    gateway: UserRepository = Depends(get_user_gateway),
):
    """Partial update of name and/or email."""
    uid = parse_user_id(user_id)
    body = parse_user_update(payload)
    record = await gateway.update_by_id(uid, body.changes())
    if record is None:
        raise UserNotFoundError(user_id)
    return UserEnvelope(
        message="User updated.", user=UserContact.model_validate(record),
    ).to_json()


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, gateway: UserRepository = Depends(get_user_gateway)):
    uid = parse_user_id(user_id)
    if not await gateway.delete_by_id(uid):
        raise UserNotFoundError(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
