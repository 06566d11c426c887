"""Session cookies and route-level access control."""

from urllib.parse import urlencode

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse, Response

from mess_menu.config import Settings
from mess_menu.domain.profiles import AuthTokens
from mess_menu.services.auth import ANONYMOUS, SessionContext

ACCESS_COOKIE = "mess_access_token"
REFRESH_COOKIE = "mess_refresh_token"


class LoginRequiredError(Exception):
    """Raised when a route needs a signed-in user."""

    def __init__(self, return_to: str) -> None:
        super().__init__(return_to)
        self.return_to = return_to


class StaffOnlyError(Exception):
    """Raised when a signed-in regular user opens a staff-only route."""


def read_session_cookies(request: Request) -> AuthTokens | None:
    """Return the session tokens stored in cookies, if both are present."""
    access_token = request.cookies.get(ACCESS_COOKIE)
    refresh_token = request.cookies.get(REFRESH_COOKIE)
    if not access_token or not refresh_token:
        return None
    return AuthTokens(access_token=access_token, refresh_token=refresh_token)


def set_session_cookies(
    response: Response, tokens: AuthTokens, settings: Settings
) -> None:
    """Persist session tokens in HTTP-only cookies."""
    for name, value in (
        (ACCESS_COOKIE, tokens.access_token),
        (REFRESH_COOKIE, tokens.refresh_token),
    ):
        response.set_cookie(
            name,
            value,
            max_age=settings.session_cookie_max_age_seconds,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
        )


def clear_session_cookies(response: Response) -> None:
    """Remove session cookies."""
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)


def safe_return_path(value: str | None) -> str:
    """Return a same-site path to redirect to, defaulting to home."""
    if not value or not value.startswith("/") or value.startswith("//"):
        return "/"
    if "\\" in value:
        return "/"
    return value


def login_redirect(return_to: str) -> RedirectResponse:
    """Redirect to the login page carrying the path to come back to."""
    query = urlencode({"return_to": safe_return_path(return_to)})
    return RedirectResponse(f"/login?{query}", status_code=303)


def get_session(request: Request) -> SessionContext:
    """Return the session resolved for this request."""
    return getattr(request.state, "session", ANONYMOUS)


def require_user(
    request: Request, session: SessionContext = Depends(get_session)
) -> SessionContext:
    """Ensure a user is signed in."""
    if not session.is_authenticated:
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        raise LoginRequiredError(return_to=path)
    return session


def require_staff(session: SessionContext = Depends(require_user)) -> SessionContext:
    """Ensure the signed-in user has the staff role."""
    if not session.is_staff:
        raise StaffOnlyError()
    return session
