"""Domain models for users, profiles and sessions."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class Role(str, Enum):
    """Coarse account role."""

    STAFF = "staff"
    REGULAR = "regular"

    @property
    def user_type(self) -> str:
        """Return the code stored in ``profiles.user_type``."""
        return _USER_TYPE_BY_ROLE[self]

    @classmethod
    def from_user_type(cls, user_type: str | None) -> "Role":
        """Map a stored ``user_type`` code to a role, defaulting to regular."""
        if user_type == "user1":
            return cls.STAFF
        return cls.REGULAR


_USER_TYPE_BY_ROLE = {Role.STAFF: "user1", Role.REGULAR: "user2"}


@dataclass(frozen=True)
class AuthUser:
    """Identity managed by the auth backend."""

    id: UUID
    email: str


@dataclass(frozen=True)
class AuthTokens:
    """Session tokens issued by the auth backend."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class Profile:
    """Public profile row for a user."""

    id: UUID
    username: str
    role: Role
