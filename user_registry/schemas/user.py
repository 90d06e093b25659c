"""User Schemas: typed request parsing and response envelopes for /api/users.

Invariants:
    - parse_user_create / parse_user_update are the only way a request body
      reaches the gateway; both raise InvalidInputError with a client-safe message
    - Parsed values are already normalized (trimmed name, trimmed lowercased email)
    - Email shape is checked after normalization, so surrounding whitespace is tolerated
    - Timestamps serialize as ISO 8601 in UTC

Design Decisions:
    - Shape checks (is_user_input, key presence) run before Pydantic so the
      error messages stay stable regardless of Pydantic's wording
    - PydanticCustomError over ValueError: message surfaces without a "Value error," prefix
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from user_registry.core.errors import InvalidInputError
from user_registry.core.pagination import PageMeta
from user_registry.core.validation import (
    is_user_input, looks_like_email, normalize_email, normalize_name,
)

INVALID_BODY = "Invalid body: 'name' and 'email' must be strings."
INVALID_EMAIL = "Please provide a valid email address."
EMPTY_NAME = "Field 'name' must not be empty."
NOTHING_TO_UPDATE = "Provide at least one of: name, email."
NOT_AN_OBJECT = "Invalid body: expected a JSON object."


def _check_name(v: str) -> str:
    v = normalize_name(v)
    if not v:
        raise PydanticCustomError("empty_name", EMPTY_NAME)
    return v


def _check_email(v: str) -> str:
    v = normalize_email(v)
    if not looks_like_email(v):
        raise PydanticCustomError("invalid_email", INVALID_EMAIL)
    return v


# --- Requests -----------------------------------------------------------------

class UserCreate(BaseModel):
    """Body of POST /api/users."""
    name: StrictStr
    email: StrictStr

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return _check_email(v)


class UserUpdate(BaseModel):
    """Body of PUT /api/users/{id}: a partial update."""
    name: StrictStr | None = None
    email: StrictStr | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return None if v is None else _check_name(v)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str | None) -> str | None:
        return None if v is None else _check_email(v)

    def changes(self) -> dict[str, str]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


def _first_error(exc: ValidationError) -> InvalidInputError:
    err = exc.errors()[0]
    field = ".".join(str(loc) for loc in err["loc"]) or None
    return InvalidInputError(err["msg"], field=field)


def parse_user_create(payload: Any) -> UserCreate:
    if not is_user_input(payload):
        raise InvalidInputError(INVALID_BODY)
    try:
        return UserCreate.model_validate(
            {"name": payload["name"], "email": payload["email"]},
        )
    except ValidationError as e:
        raise _first_error(e)


def parse_user_update(payload: Any) -> UserUpdate:
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise InvalidInputError(NOT_AN_OBJECT)
    provided = {k: payload[k] for k in ("name", "email") if k in payload}
    if not provided:
        raise InvalidInputError(NOTHING_TO_UPDATE)
    for key, value in provided.items():
        if not isinstance(value, str):
            raise InvalidInputError(f"Field '{key}' must be a string.", field=key)
    try:
        return UserUpdate.model_validate(provided)
    except ValidationError as e:
        raise _first_error(e)


# --- Responses ----------------------------------------------------------------

def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on read; values are always written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class UserContact(_CamelModel):
    """Returned by create and update."""
    name: str
    email: str


class UserDetail(_CamelModel):
    """Returned by get-by-id."""
    name: str
    email: str
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return _as_utc(value).isoformat()


class UserSummary(UserDetail):
    """One row of a listing."""
    id: UUID


class UserEnvelope(_CamelModel):
    message: str
    user: UserContact | UserDetail


class PageMetaOut(_CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
    sort_by: str
    order: str

    @classmethod
    def from_meta(cls, meta: PageMeta) -> "PageMetaOut":
        return cls(
            page=meta.page, limit=meta.limit, total=meta.total,
            total_pages=meta.total_pages, has_next=meta.has_next,
            has_prev=meta.has_prev, sort_by=meta.sort_by.value,
            order=meta.order.value,
        )


class UserPage(_CamelModel):
    data: list[UserSummary]
    meta: PageMetaOut
