"""Login, registration and sign-out endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from mess_menu.api.session import (
    clear_session_cookies,
    get_session,
    safe_return_path,
    set_session_cookies,
)
from mess_menu.api.views import toast, unexpected_error_response
from mess_menu.containers import AppContainer
from mess_menu.domain.profiles import Role
from mess_menu.forms import LoginForm, RegistrationForm
from mess_menu.services.auth import (
    DUPLICATE_EMAIL,
    INVALID_CREDENTIALS,
    AuthFailure,
    SessionContext,
)

router = APIRouter(tags=["auth"])
_logger = logging.getLogger(__name__)

_ROLE_OPTIONS = [
    {
        "value": Role.STAFF.value,
        "label": "Mess Worker (can update menu)",
        "note": "Mess Worker accounts require approval from administrators.",
    },
    {
        "value": Role.REGULAR.value,
        "label": "Regular User (can view menu and give feedback)",
        "note": None,
    },
]


@router.get("/login")
async def login_page(
    return_to: str | None = None,
    session: SessionContext = Depends(get_session),
) -> dict[str, object]:
    """Login page."""
    return {
        "page": "login",
        "title": "Welcome Back",
        "return_to": safe_return_path(return_to),
        "authenticated": session.is_authenticated,
        "register_url": "/register",
    }


@router.post("/login", response_model=None)
async def login(
    form: LoginForm, request: Request, return_to: str | None = None
) -> RedirectResponse | JSONResponse:
    """Sign in and go back to the page that required it."""
    container: AppContainer = request.app.state.container
    try:
        result = container.auth_service.sign_in(form.email, form.password)
    except Exception as exc:
        _logger.exception("Login failed unexpectedly")
        return unexpected_error_response(
            container, exc, "An unexpected error occurred. Please try again."
        )
    if result.error is not None:
        return _auth_failure_response("Login failed", result.error)

    response = RedirectResponse(
        safe_return_path(return_to), status_code=status.HTTP_303_SEE_OTHER
    )
    if result.session.tokens is not None:
        set_session_cookies(response, result.session.tokens, container.settings)
    return response


@router.get("/register")
async def register_page() -> dict[str, object]:
    """Registration page."""
    return {
        "page": "register",
        "title": "Create an Account",
        "roles": _ROLE_OPTIONS,
        "login_url": "/login",
    }


@router.post("/register", response_model=None)
async def register(
    form: RegistrationForm, request: Request
) -> RedirectResponse | JSONResponse:
    """Create an account and its profile."""
    container: AppContainer = request.app.state.container
    try:
        result = container.auth_service.sign_up(
            form.email, form.password, form.username, form.account_role
        )
    except Exception as exc:
        _logger.exception("Registration failed unexpectedly")
        return unexpected_error_response(
            container, exc, "An unexpected error occurred. Please try again."
        )
    if result.error is not None:
        return _auth_failure_response("Registration failed", result.error)

    if result.session.tokens is None:
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={
                "redirect_to": "/login",
                "toast": toast(
                    "Registration successful",
                    "Please check your email to confirm your account.",
                ),
            },
        )
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookies(response, result.session.tokens, container.settings)
    return response


@router.post("/logout")
async def logout(
    request: Request, session: SessionContext = Depends(get_session)
) -> RedirectResponse:
    """Sign out; safe to call without a session."""
    container: AppContainer = request.app.state.container
    try:
        container.auth_service.sign_out(session.tokens)
    except Exception:
        _logger.exception("Failed to revoke session")
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookies(response)
    return response


def _auth_failure_response(title: str, failure: AuthFailure) -> JSONResponse:
    status_code = status.HTTP_400_BAD_REQUEST
    if failure.kind == INVALID_CREDENTIALS:
        status_code = status.HTTP_401_UNAUTHORIZED
    elif failure.kind == DUPLICATE_EMAIL:
        status_code = status.HTTP_409_CONFLICT
    return JSONResponse(
        status_code=status_code,
        content={
            "errors": failure.field_errors,
            "toast": toast(title, failure.message, destructive=True),
        },
    )
