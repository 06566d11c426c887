"""Session and authentication service."""

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from mess_menu.domain.profiles import AuthTokens, AuthUser, Profile, Role

_logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid_credentials"
DUPLICATE_EMAIL = "duplicate_email"
EMAIL_NOT_CONFIRMED = "email_not_confirmed"
AUTH_REJECTED = "auth_rejected"


class AuthRejectedError(Exception):
    """Raised by gateways when the auth backend refuses a request."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthGateway(Protocol):
    """Interface to the hosted auth backend."""

    def sign_in_with_password(
        self, email: str, password: str
    ) -> tuple[AuthUser, AuthTokens]:
        """Sign in and return the user with fresh session tokens."""

    def sign_up(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> tuple[AuthUser, AuthTokens | None]:
        """Create an identity; tokens are None until the email is confirmed."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning an access token, if it is still valid."""

    def refresh_session(self, refresh_token: str) -> tuple[AuthUser, AuthTokens]:
        """Exchange a refresh token for a new session."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""


class ProfileRepository(Protocol):
    """Persistence interface for profile rows."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""

    def save_profile(self, profile: Profile) -> Profile:
        """Insert or replace a profile row."""

    def update_username(self, user_id: UUID, username: str) -> None:
        """Change a profile's username."""


@dataclass(frozen=True)
class SessionContext:
    """Per-request view of who is signed in."""

    user: AuthUser | None = None
    profile: Profile | None = None
    tokens: AuthTokens | None = None
    loading: bool = False
    tokens_renewed: bool = False

    @property
    def role(self) -> Role | None:
        if self.profile is None:
            return None
        return self.profile.role

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_staff(self) -> bool:
        return self.role is Role.STAFF


ANONYMOUS = SessionContext()


@dataclass(frozen=True)
class AuthFailure:
    """Expected auth failure mapped for display."""

    kind: str
    message: str
    field_errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a sign-in or sign-up attempt."""

    session: SessionContext = ANONYMOUS
    error: AuthFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AuthService:
    """Single writer of session state; wraps the auth backend and profiles."""

    gateway: AuthGateway
    profile_repository: ProfileRepository

    def resolve(self, tokens: AuthTokens | None) -> SessionContext:
        """Resolve session tokens into a session context."""
        if tokens is None:
            return ANONYMOUS
        renewed = False
        try:
            user = self.gateway.get_user(tokens.access_token)
        except AuthRejectedError:
            user = None
        if user is None:
            try:
                user, tokens = self.gateway.refresh_session(tokens.refresh_token)
            except AuthRejectedError as exc:
                _logger.info("Session expired: %s", exc.message)
                return ANONYMOUS
            renewed = True
        profile = self.profile_repository.get_profile(user.id)
        return SessionContext(
            user=user, profile=profile, tokens=tokens, tokens_renewed=renewed
        )

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password without raising on rejection."""
        try:
            user, tokens = self.gateway.sign_in_with_password(email, password)
        except AuthRejectedError as exc:
            return AuthResult(error=_map_sign_in_error(exc.message))
        profile = self.profile_repository.get_profile(user.id)
        return AuthResult(
            session=SessionContext(user=user, profile=profile, tokens=tokens)
        )

    def sign_up(
        self, email: str, password: str, username: str, role: Role
    ) -> AuthResult:
        """Create an identity and its profile row."""
        try:
            user, tokens = self.gateway.sign_up(
                email,
                password,
                {"username": username, "user_type": role.user_type},
            )
        except AuthRejectedError as exc:
            return AuthResult(error=_map_sign_up_error(exc.message))
        profile = self.profile_repository.save_profile(
            Profile(id=user.id, username=username, role=role)
        )
        _logger.info("Registered user %s as %s", user.id, role.value)
        return AuthResult(
            session=SessionContext(user=user, profile=profile, tokens=tokens)
        )

    def sign_out(self, tokens: AuthTokens | None) -> SessionContext:
        """Revoke the current session, if any."""
        if tokens is None:
            return ANONYMOUS
        try:
            self.gateway.sign_out(tokens.access_token)
        except AuthRejectedError as exc:
            _logger.info("Sign-out ignored: %s", exc.message)
        return ANONYMOUS

    def refresh_profile(self, context: SessionContext) -> SessionContext:
        """Re-read the profile row for the signed-in user."""
        if context.user is None:
            return context
        profile = self.profile_repository.get_profile(context.user.id)
        return replace(context, profile=profile)

    def update_username(self, context: SessionContext, username: str) -> SessionContext:
        """Rename the signed-in user's profile and return the refreshed context."""
        if context.user is None:
            raise PermissionError("Not signed in")
        self.profile_repository.update_username(context.user.id, username)
        return self.refresh_profile(context)


def _map_sign_in_error(message: str) -> AuthFailure:
    lowered = message.lower()
    if "invalid login credentials" in lowered:
        text = "Invalid email or password"
        return AuthFailure(
            kind=INVALID_CREDENTIALS,
            message=f"{text}. Please try again.",
            field_errors={"email": text, "password": text},
        )
    if "email not confirmed" in lowered:
        return AuthFailure(
            kind=EMAIL_NOT_CONFIRMED,
            message="Please confirm your email address before signing in.",
            field_errors={"email": "Email not confirmed"},
        )
    return AuthFailure(kind=AUTH_REJECTED, message=message)


def _map_sign_up_error(message: str) -> AuthFailure:
    lowered = message.lower()
    if "already registered" in lowered or "already exists" in lowered:
        return AuthFailure(
            kind=DUPLICATE_EMAIL,
            message="An account with this email already exists.",
            field_errors={"email": "This email is already registered"},
        )
    return AuthFailure(kind=AUTH_REJECTED, message=message)
