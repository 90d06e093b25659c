"""User Validation: pure checks for untrusted user input.

Invariants:
    - Every function is pure and deterministic (no IO, no logging)
    - looks_like_email is a syntactic sanity check, not RFC 5322 validation
    - Stored names are trimmed; stored emails are trimmed and lowercased

Design Decisions:
    - Loose email pattern kept on purpose: false positives are cheaper than
      rejecting real addresses, and uniqueness is enforced by the store anyway
"""

import re
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from user_registry.core.domain_types import UserId
from user_registry.core.errors import InvalidIdentifierError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_user_input(value: Any) -> bool:
    """True iff value is an object with string 'name' and 'email' fields."""
    if not isinstance(value, Mapping):
        return False
    return isinstance(value.get("name"), str) and isinstance(value.get("email"), str)


def looks_like_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def normalize_name(name: str) -> str:
    return name.strip()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def parse_user_id(raw: str) -> UserId:
    """Parse a path identifier, raising before any query is attempted."""
    try:
        return UserId(UUID(raw))
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError(str(raw))
