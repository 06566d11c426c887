"""Supabase Auth gateway."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AuthApiError, Client

from mess_menu.domain.profiles import AuthTokens, AuthUser
from mess_menu.services.auth import AuthGateway, AuthRejectedError


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Email/password auth backed by Supabase.

    Password flows run on ``public_client`` (anon key, no persisted session)
    because the SDK attaches the signed-in session to the client it was called
    on. Token checks and revocation use ``admin_client`` (service key).
    """

    public_client: Client
    admin_client: Client

    def sign_in_with_password(
        self, email: str, password: str
    ) -> tuple[AuthUser, AuthTokens]:
        """Sign in and return the user with fresh session tokens."""
        try:
            response = self.public_client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as exc:
            raise AuthRejectedError(exc.message) from exc
        if response.user is None or response.session is None:
            raise AuthRejectedError("Invalid login credentials")
        return _to_user(response.user), _to_tokens(response.session)

    def sign_up(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> tuple[AuthUser, AuthTokens | None]:
        """Create an identity; tokens are None until the email is confirmed."""
        try:
            response = self.public_client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": metadata},
                }
            )
        except AuthApiError as exc:
            raise AuthRejectedError(exc.message) from exc
        if response.user is None:
            raise AuthRejectedError("Sign up did not return a user")
        # With email confirmation on, an existing address comes back as an
        # obfuscated user without identities instead of an error.
        if response.user.identities == []:
            raise AuthRejectedError("User already registered")
        tokens = _to_tokens(response.session) if response.session else None
        return _to_user(response.user), tokens

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning an access token, if it is still valid."""
        try:
            response = self.admin_client.auth.get_user(access_token)
        except AuthApiError as exc:
            raise AuthRejectedError(exc.message) from exc
        if response is None or response.user is None:
            return None
        return _to_user(response.user)

    def refresh_session(self, refresh_token: str) -> tuple[AuthUser, AuthTokens]:
        """Exchange a refresh token for a new session."""
        try:
            response = self.public_client.auth.refresh_session(refresh_token)
        except AuthApiError as exc:
            raise AuthRejectedError(exc.message) from exc
        if response.user is None or response.session is None:
            raise AuthRejectedError("Session refresh returned no session")
        return _to_user(response.user), _to_tokens(response.session)

    def sign_out(self, access_token: str) -> None:
        """Revoke every session of the token's user."""
        try:
            self.admin_client.auth.admin.sign_out(access_token)
        except AuthApiError as exc:
            raise AuthRejectedError(exc.message) from exc


def _to_user(user) -> AuthUser:  # type: ignore[no-untyped-def]
    return AuthUser(id=UUID(str(user.id)), email=user.email or "")


def _to_tokens(session) -> AuthTokens:  # type: ignore[no-untyped-def]
    return AuthTokens(
        access_token=session.access_token, refresh_token=session.refresh_token
    )
