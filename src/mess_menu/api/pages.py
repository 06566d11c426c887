"""Public pages: landing, menu, feedback and account."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from mess_menu.api.session import get_session, require_user
from mess_menu.api.views import (
    meal_type_options,
    serialize_feedback,
    serialize_menu_item,
    serialize_session,
    toast,
    unexpected_error_response,
    validation_error_response,
)
from mess_menu.containers import AppContainer
from mess_menu.domain.menu import (
    ALL_MEAL_TYPES,
    MealType,
    MenuFilter,
    SortOption,
)
from mess_menu.forms import FeedbackForm, ProfileForm
from mess_menu.services.auth import SessionContext
from mess_menu.services.feedback import RatingRequiredError
from mess_menu.services.menu import MenuUnavailableError

router = APIRouter(tags=["pages"])
_logger = logging.getLogger(__name__)


@router.get("/")
async def index(
    request: Request, session: SessionContext = Depends(get_session)
) -> dict[str, object]:
    """Landing page with the best-rated dishes."""
    container: AppContainer = request.app.state.container
    page: dict[str, object] = {
        "page": "home",
        "title": container.settings.app_name,
        "session": serialize_session(session),
        "meal_types": meal_type_options(),
        "featured": [],
    }
    try:
        items = await container.menu_service.list_menu_items(
            MenuFilter(), SortOption.RATING_DESC
        )
    except MenuUnavailableError as exc:
        page["toast"] = toast("Error", str(exc), destructive=True)
        return page
    page["featured"] = [
        serialize_menu_item(item)
        for item in items[: container.settings.featured_items_limit]
    ]
    return page


@router.get("/menu", response_model=None)
async def menu_page(  # noqa: PLR0913
    request: Request,
    meal_type: str = ALL_MEAL_TYPES,
    search: str | None = None,
    tags: list[str] = Query(default=[]),
    sort: SortOption = SortOption.RATING_DESC,
    session: SessionContext = Depends(get_session),
) -> dict[str, object] | JSONResponse:
    """Browse the menu with meal-type, search and tag filters."""
    container: AppContainer = request.app.state.container
    try:
        selected_meal = None if meal_type == ALL_MEAL_TYPES else MealType(meal_type)
    except ValueError:
        return validation_error_response({"meal_type": "Unknown meal type"})
    menu_filter = MenuFilter(
        meal_type=selected_meal,
        search_term=search,
        tags=frozenset(tag for tag in tags if tag),
    )
    try:
        listing = await container.menu_service.browse(menu_filter, sort)
    except MenuUnavailableError as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"items": [], "toast": toast("Error", str(exc), destructive=True)},
        )
    return {
        "page": "menu",
        "session": serialize_session(session),
        "filters": {
            "meal_type": meal_type,
            "search": search or "",
            "tags": sorted(menu_filter.tags),
            "sort": sort.value,
        },
        "meal_types": meal_type_options(),
        "available_tags": listing.available_tags,
        "items": [serialize_menu_item(item) for item in listing.items],
        "total": len(listing.items),
    }


@router.get("/feedback", response_model=None)
async def feedback_page(
    request: Request,
    menu_item_id: str | None = Query(default=None, alias="menuItemId"),
    session: SessionContext = Depends(get_session),
) -> dict[str, object] | JSONResponse:
    """Show a menu item with the current user's feedback, if any."""
    container: AppContainer = request.app.state.container
    if not menu_item_id:
        return _feedback_error(
            status.HTTP_400_BAD_REQUEST,
            "No menu item selected. Please go back to the menu and select an "
            "item to provide feedback for.",
        )
    item_id = _parse_uuid(menu_item_id)
    try:
        item = container.menu_service.get_menu_item(item_id) if item_id else None
    except Exception as exc:
        _logger.exception("Error fetching menu item", extra={"item_id": menu_item_id})
        return unexpected_error_response(
            container,
            exc,
            "An error occurred while fetching data. Please try again later.",
        )
    if item is None:
        return _feedback_error(
            status.HTTP_404_NOT_FOUND,
            "Menu item not found. Please go back to the menu and try again.",
        )

    existing = None
    if session.user is not None:
        try:
            existing = container.feedback_service.get_feedback(
                item.id, session.user.id
            )
        except Exception:
            _logger.exception("Error fetching feedback", extra={"item_id": item.id})
    return {
        "page": "feedback",
        "session": serialize_session(session),
        "menu_item": serialize_menu_item(item),
        "feedback": serialize_feedback(existing),
        "can_submit": session.is_authenticated,
        "submit_label": "Update Feedback" if existing else "Submit Feedback",
    }


@router.post("/feedback", response_model=None)
async def submit_feedback(
    form: FeedbackForm,
    request: Request,
    menu_item_id: str | None = Query(default=None, alias="menuItemId"),
    session: SessionContext = Depends(require_user),
) -> dict[str, object] | JSONResponse:
    """Create or update the signed-in user's feedback for a menu item."""
    container: AppContainer = request.app.state.container
    item_id = _parse_uuid(menu_item_id)
    if item_id is None:
        return _feedback_error(status.HTTP_400_BAD_REQUEST, "No menu item selected.")
    try:
        if container.menu_service.get_menu_item(item_id) is None:
            return _feedback_error(status.HTTP_404_NOT_FOUND, "Menu item not found.")
        feedback = container.feedback_service.upsert_feedback(
            menu_item_id=item_id,
            user_id=session.user.id,
            rating=form.rating,
            comment=form.comment,
        )
    except RatingRequiredError as exc:
        return validation_error_response({"rating": str(exc)})
    except Exception as exc:
        _logger.exception("Error submitting feedback", extra={"item_id": item_id})
        return unexpected_error_response(
            container, exc, "Failed to submit feedback. Please try again."
        )
    return {
        "feedback": serialize_feedback(feedback),
        "submit_label": "Update Feedback",
        "toast": toast("Success", "Your feedback has been submitted successfully!"),
    }


@router.get("/account")
async def account_page(
    session: SessionContext = Depends(require_user),
) -> dict[str, object]:
    """Profile page for the signed-in user."""
    links = []
    if session.is_staff:
        links = [
            {"label": "Go to Dashboard", "url": "/dashboard"},
            {"label": "Add New Menu Item", "url": "/add-menu-item"},
        ]
    return {
        "page": "account",
        "session": serialize_session(session),
        "admin_links": links,
    }


@router.post("/account", response_model=None)
async def update_account(
    form: ProfileForm,
    request: Request,
    session: SessionContext = Depends(require_user),
) -> dict[str, object] | JSONResponse:
    """Rename the signed-in user's profile."""
    container: AppContainer = request.app.state.container
    try:
        refreshed = container.auth_service.update_username(session, form.username)
    except Exception as exc:
        _logger.exception("Error updating profile", extra={"user_id": session.user.id})
        return unexpected_error_response(
            container, exc, "There was an error updating your profile."
        )
    request.state.session = refreshed
    return {
        "session": serialize_session(refreshed),
        "toast": toast("Profile updated", "Your profile has been updated successfully."),
    }


def _parse_uuid(value: str | None) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        return None


def _feedback_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "toast": toast("Error", message, destructive=True)},
    )
