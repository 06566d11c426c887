"""FastAPI application factory."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from mess_menu.api.auth import router as auth_router
from mess_menu.api.dashboard import router as dashboard_router
from mess_menu.api.pages import router as pages_router
from mess_menu.api.session import (
    ACCESS_COOKIE,
    LoginRequiredError,
    StaffOnlyError,
    clear_session_cookies,
    login_redirect,
    read_session_cookies,
    set_session_cookies,
)
from mess_menu.api.views import toast, validation_error_response
from mess_menu.app_logging import configure_logging
from mess_menu.containers import AppContainer
from mess_menu.forms import errors_by_field
from mess_menu.services.auth import ANONYMOUS


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title=container.settings.app_name)
    app.state.container = container

    @app.middleware("http")
    async def attach_session(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        tokens = read_session_cookies(request)
        try:
            session = container.auth_service.resolve(tokens)
        except Exception:
            logger.exception("Failed to resolve session")
            session = ANONYMOUS
        request.state.session = session
        response = await call_next(request)
        # Login and logout write the session cookies themselves.
        if _sets_session_cookie(response):
            return response
        if session.tokens_renewed and session.tokens is not None:
            set_session_cookies(response, session.tokens, container.settings)
        elif tokens is not None and not session.is_authenticated:
            clear_session_cookies(response)
        return response

    @app.exception_handler(LoginRequiredError)
    async def login_required(
        request: Request, exc: LoginRequiredError
    ) -> RedirectResponse:
        return login_redirect(exc.return_to)

    @app.exception_handler(StaffOnlyError)
    async def staff_only(request: Request, exc: StaffOnlyError) -> RedirectResponse:
        logger.info("Non-staff user redirected from %s", request.url.path)
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return validation_error_response(errors_by_field(list(exc.errors())))

    @app.exception_handler(status.HTTP_404_NOT_FOUND)
    async def not_found(request: Request, exc: Exception) -> JSONResponse:
        logger.warning("404: no route for %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "page": "not-found",
                "path": request.url.path,
                "message": "Oops! Page not found",
                "home_url": "/",
                "toast": toast(
                    "Page not found",
                    "The page you are looking for does not exist.",
                    destructive=True,
                ),
            },
        )

    app.include_router(pages_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _sets_session_cookie(response: Response) -> bool:
    return any(
        header.startswith(f"{ACCESS_COOKIE}=")
        for header in response.headers.getlist("set-cookie")
    )
