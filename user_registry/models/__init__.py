"""ORM Models: SQLAlchemy declarative models for all persisted entities.

Design Decisions:
    - Models imported here so Base.metadata is populated before create_all
      or alembic autogenerate run
"""

from user_registry.models.user import User  # noqa: F401
