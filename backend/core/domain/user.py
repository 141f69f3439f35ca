"""Subscriber profile and session entities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Profile:
    """Public profile of the authenticated subscriber."""

    id: str
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Profile":
        return cls(
            id=str(row["id"]),
            username=row.get("username"),
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
            bio=row.get("bio"),
        )


@dataclass(frozen=True)
class AuthSession:
    """Identity handed to the view-models by the authentication provider.

    ``loading`` is True until the provider has resolved the session; a
    resolved session without ``user_id`` means nobody is signed in.
    """

    user_id: str | None = None
    profile: Profile | None = None
    loading: bool = False

    @property
    def is_ready(self) -> bool:
        return not self.loading and self.user_id is not None


# Sentinel for "the provider has not resolved the session yet"
SESSION_NOT_LOADED = AuthSession(loading=True)
