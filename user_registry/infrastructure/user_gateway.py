"""User Gateway: the only code that queries the users table.

Invariants:
    - Bound to exactly one AsyncSession, supplied by the caller
    - Every read is projected (no ORM entity leaves the gateway)
    - Duplicate email on insert/update raises DuplicateEmailError, nothing is written
    - Callers pass already-normalized values (see schemas/user.py)
    - Identifiers are UserId values; malformed ids never reach this layer

Design Decisions:
    - Duplicate detection by interpreting IntegrityError instead of a pre-check
      SELECT: the unique index is the only race-free arbiter
    - update_by_id goes through the ORM (get + setattr) so updated_at onupdate fires
    - id is the secondary sort key so equal timestamps page deterministically
"""

import logging
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry.core.domain_types import SortField, SortOrder, UserId, UserRecord
from user_registry.core.errors import DatabaseError, DuplicateEmailError, ErrorContext
from user_registry.core.search_filter import UserFilter
from user_registry.models.user import User

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortField.NAME: User.name,
    SortField.EMAIL: User.email,
    SortField.CREATED_AT: User.created_at,
    SortField.UPDATED_AT: User.updated_at,
}


def _project(user: User) -> UserRecord:
    return UserRecord(
        id=user.id, name=user.name, email=user.email, created_at=user.created_at,
    )


_EMAIL_UNIQUE_MARKERS = (
    "uq_users_email",  # postgres: duplicate key value violates unique constraint "uq_users_email"
    "unique constraint failed: users.email",  # sqlite
)


def _is_duplicate_email(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return any(marker in message for marker in _EMAIL_UNIQUE_MARKERS)


def _apply_filter(query: Select, user_filter: UserFilter) -> Select:
    if user_filter.email is not None:
        return query.where(User.email == user_filter.email)
    if user_filter.text is not None:
        return query.where(or_(
            User.name.icontains(user_filter.text, autoescape=True),
            User.email.icontains(user_filter.text, autoescape=True),
        ))
    return query


class UserGateway:
    """CRUD over users for one request."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self, operation: str, user_id: UUID | None = None) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if _is_duplicate_email(e):
                raise DuplicateEmailError(ErrorContext(
                    user_id=str(user_id) if user_id else None, operation=operation,
                ))
            raise DatabaseError(str(e.orig), operation) from e

    async def create(self, name: str, email: str) -> UserRecord:
        user = User(name=name, email=email)
        self.session.add(user)
        await self._commit("create")
        await self.session.refresh(user)
        logger.info("User created", extra={"user_id": str(user.id)})
        return _project(user)

    async def find_by_id(self, user_id: UserId) -> UserRecord | None:
        user = await self.session.get(User, user_id)
        return _project(user) if user else None

    async def find_page(
        self,
        user_filter: UserFilter,
        sort_by: SortField,
        order: SortOrder,
        skip: int,
        limit: int,
    ) -> tuple[list[UserRecord], int]:
        """One page of matching users plus the total number of matches."""
        column = _SORT_COLUMNS[sort_by]
        direction = column.asc() if order is SortOrder.ASC else column.desc()
        tie_break = User.id.asc() if order is SortOrder.ASC else User.id.desc()
        query = _apply_filter(select(User), user_filter)
        query = query.order_by(direction, tie_break).offset(skip).limit(limit)

        result = await self.session.execute(query)
        rows = [_project(u) for u in result.scalars().all()]
        total = await self.count(user_filter)
        return rows, total

    async def count(self, user_filter: UserFilter) -> int:
        query = _apply_filter(select(func.count()).select_from(User), user_filter)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def list_all(self) -> list[UserRecord]:
        result = await self.session.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc()),
        )
        return [_project(u) for u in result.scalars().all()]

    async def update_by_id(
        self, user_id: UserId, changes: dict[str, str],
    ) -> UserRecord | None:
        """Apply only the given fields; None when no such user."""
        user = await self.session.get(User, user_id)
        if user is None:
            return None
        for field, value in changes.items():
            setattr(user, field, value)
        await self._commit("update", user_id)
        await self.session.refresh(user)
        logger.info(
            f"User updated ({', '.join(sorted(changes))})",
            extra={"user_id": str(user_id)},
        )
        return _project(user)

    async def delete_by_id(self, user_id: UserId) -> bool:
        result = await self.session.execute(
            delete(User).where(User.id == user_id),
        )
        await self._commit("delete", user_id)
        deleted = result.rowcount > 0
        if deleted:
            logger.info("User deleted", extra={"user_id": str(user_id)})
        return deleted
