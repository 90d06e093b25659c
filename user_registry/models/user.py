"""User ORM: one row per registered user.

Invariants:
    - id is a UUID primary key generated on insert, never reassigned
    - email is unique (index uq_users_email); stored trimmed and lowercased
    - name is non-nullable; stored trimmed
    - created_at set on insert, updated_at refreshed on every ORM update

Design Decisions:
    - Normalization happens at the schema boundary, not in column hooks: the
      table only enforces what the database can enforce (uniqueness, not null)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from user_registry.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered user."""
    __tablename__ = "users"
    __table_args__ = (
        Index("uq_users_email", "email", unique=True),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )
