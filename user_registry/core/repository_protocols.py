"""Boundary Protocols: contracts between the routes and the persistence shell.

Invariants:
    - Routes depend on UserRepository, never on SQLAlchemy types
    - Implementations provided by infrastructure via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
"""

from typing import Protocol

from user_registry.core.domain_types import SortField, SortOrder, UserId, UserRecord
from user_registry.core.search_filter import UserFilter


class UserRepository(Protocol):
    """Contract for user persistence, implemented by infrastructure.UserGateway."""
    async def create(self, name: str, email: str) -> UserRecord: ...
    async def find_by_id(self, user_id: UserId) -> UserRecord | None: ...
    async def find_page(
        self,
        user_filter: UserFilter,
        sort_by: SortField,
        order: SortOrder,
        skip: int,
        limit: int,
    ) -> tuple[list[UserRecord], int]: ...
    async def update_by_id(
        self, user_id: UserId, changes: dict[str, str],
    ) -> UserRecord | None: ...
    async def delete_by_id(self, user_id: UserId) -> bool: ...
    async def count(self, user_filter: UserFilter) -> int: ...
    async def list_all(self) -> list[UserRecord]: ...
