"""Search Filter: normalized search criteria for the paged user listing.

Invariants:
    - An exact email match takes precedence over free-text search
    - Blank criteria are dropped (None), never matched literally
    - email is compared lowercased, matching how it is stored
"""

from dataclasses import dataclass

from user_registry.core.validation import normalize_email


@dataclass(frozen=True)
class UserFilter:
    """At most one of email/text is set."""
    email: str | None = None
    text: str | None = None

    @classmethod
    def from_query(cls, q: str | None = None, email: str | None = None) -> "UserFilter":
        exact = normalize_email(email) if email else ""
        if exact:
            return cls(email=exact)
        text = q.strip() if q else ""
        if text:
            return cls(text=text)
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.email is None and self.text is None
