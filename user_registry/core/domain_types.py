"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps a UUID; raw strings are parsed once at the boundary
    - Sortable fields are an allow-list encoded as an Enum (no raw string matching)
    - SortField values are the public (camelCase) names clients send in ?sortBy=
    - UserRecord is the only shape a stored user takes outside the gateway

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class SortField(str, Enum):
    """Fields the paged listing may be ordered by."""
    NAME = "name"
    EMAIL = "email"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortOrder(str, Enum):
    """Sort direction for the paged listing."""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str | None) -> "SortOrder":
        """Only an explicit 'asc' (any case) sorts ascending."""
        if raw is not None and raw.strip().lower() == cls.ASC.value:
            return cls.ASC
        return cls.DESC


class ConnectionState(str, Enum):
    """Database connection lifecycle, see DatabaseSessionManager."""
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    READY = "ready"
    DISCONNECTED = "disconnected"
    FAILED = "failed"
    CLOSED = "closed"


# ─── Projections ─────────────────────────────────────────────────

@dataclass(frozen=True)
class UserRecord:
    """Projection of a stored user: {id, name, email, createdAt}."""
    id: UUID
    name: str
    email: str
    created_at: datetime
