"""Staff dashboard: menu management endpoints."""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from mess_menu.api.session import require_staff
from mess_menu.api.views import (
    meal_type_options,
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
    filter_by_title,
)
from mess_menu.forms import MenuItemForm, field_errors
from mess_menu.services.auth import SessionContext
from mess_menu.services.menu import ImageUpload, MenuUnavailableError

router = APIRouter(tags=["dashboard"], dependencies=[Depends(require_staff)])
_logger = logging.getLogger(__name__)


@dataclass
class MenuItemSubmission:
    """Raw multipart fields of the menu item form."""

    fields: dict[str, object]
    image: ImageUpload | None
    remove_image: bool


async def menu_item_submission(  # noqa: PLR0913
    title: str = Form(default=""),
    description: str = Form(default=""),
    meal_type: str = Form(default=""),
    serving_time: str = Form(default=""),
    detailed_description: str = Form(default=""),
    ingredients: list[str] = Form(default=[]),
    tags: list[str] = Form(default=[]),
    remove_image: bool = Form(default=False),
    image: UploadFile | None = File(default=None),
) -> MenuItemSubmission:
    """Collect the multipart form; an empty file input means no new image."""
    upload = None
    if image is not None and image.filename:
        upload = ImageUpload(
            filename=image.filename,
            content=await image.read(),
            content_type=image.content_type or "application/octet-stream",
        )
    return MenuItemSubmission(
        fields={
            "title": title,
            "description": description,
            "meal_type": meal_type,
            "serving_time": serving_time,
            "detailed_description": detailed_description,
            "ingredients": ingredients,
            "tags": tags,
        },
        image=upload,
        remove_image=remove_image,
    )


@router.get("/dashboard", response_model=None)
async def dashboard(
    request: Request,
    meal_type: str = ALL_MEAL_TYPES,
    search: str | None = None,
    session: SessionContext = Depends(require_staff),
) -> dict[str, object] | JSONResponse:
    """List menu items for management, newest first; search matches titles."""
    container: AppContainer = request.app.state.container
    try:
        selected_meal = None if meal_type == ALL_MEAL_TYPES else MealType(meal_type)
    except ValueError:
        return validation_error_response({"meal_type": "Unknown meal type"})
    try:
        items = await container.menu_service.list_menu_items(
            MenuFilter(meal_type=selected_meal)
        )
    except MenuUnavailableError as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"items": [], "toast": toast("Error", str(exc), destructive=True)},
        )
    items = filter_by_title(items, search)
    return {
        "page": "dashboard",
        "session": serialize_session(session),
        "filters": {"meal_type": meal_type, "search": search or ""},
        "meal_types": meal_type_options(),
        "items": [serialize_menu_item(item) for item in items],
        "add_url": "/add-menu-item",
    }


@router.delete("/dashboard/menu-items/{item_id}", response_model=None)
async def delete_menu_item(
    item_id: UUID, request: Request
) -> dict[str, object] | JSONResponse:
    """Delete a menu item and its image."""
    container: AppContainer = request.app.state.container
    try:
        deleted = container.menu_service.delete_menu_item(item_id)
    except Exception as exc:
        _logger.exception("Error deleting menu item", extra={"item_id": item_id})
        return unexpected_error_response(
            container, exc, "Failed to delete menu item. Please try again."
        )
    if not deleted:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "toast": toast("Error", "Menu item not found.", destructive=True)
            },
        )
    return {
        "deleted": str(item_id),
        "toast": toast("Success", "Menu item deleted successfully"),
    }


@router.get("/add-menu-item")
async def add_menu_item_page(
    session: SessionContext = Depends(require_staff),
) -> dict[str, object]:
    """Blank menu item form."""
    return {
        "page": "add-menu-item",
        "session": serialize_session(session),
        "meal_types": meal_type_options(),
        "menu_item": None,
        "submit_label": "Add Menu Item",
    }


@router.post("/add-menu-item", response_model=None)
async def add_menu_item(
    request: Request,
    submission: MenuItemSubmission = Depends(menu_item_submission),
) -> RedirectResponse | JSONResponse:
    """Create a menu item from the multipart form."""
    container: AppContainer = request.app.state.container
    try:
        form = MenuItemForm(**submission.fields)
    except ValidationError as exc:
        return validation_error_response(field_errors(exc))
    try:
        container.menu_service.create_menu_item(form, submission.image)
    except Exception as exc:
        _logger.exception("Error creating menu item")
        return unexpected_error_response(
            container, exc, "Failed to add menu item. Please try again."
        )
    return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/edit-menu-item/{item_id}", response_model=None)
async def edit_menu_item_page(
    item_id: UUID,
    request: Request,
    session: SessionContext = Depends(require_staff),
) -> dict[str, object] | JSONResponse:
    """Menu item form pre-filled with the stored values."""
    container: AppContainer = request.app.state.container
    try:
        item = container.menu_service.get_menu_item(item_id)
    except Exception as exc:
        _logger.exception("Error fetching menu item", extra={"item_id": item_id})
        return unexpected_error_response(
            container, exc, "Failed to load menu item. Please try again."
        )
    if item is None:
        return _not_found()
    return {
        "page": "edit-menu-item",
        "session": serialize_session(session),
        "meal_types": meal_type_options(),
        "menu_item": serialize_menu_item(item),
        "submit_label": "Update Menu Item",
    }


@router.post("/edit-menu-item/{item_id}", response_model=None)
async def edit_menu_item(
    item_id: UUID,
    request: Request,
    submission: MenuItemSubmission = Depends(menu_item_submission),
) -> RedirectResponse | JSONResponse:
    """Update a menu item from the multipart form."""
    container: AppContainer = request.app.state.container
    try:
        form = MenuItemForm(**submission.fields)
    except ValidationError as exc:
        return validation_error_response(field_errors(exc))
    try:
        updated = container.menu_service.update_menu_item(
            item_id,
            form,
            image=submission.image,
            remove_image=submission.remove_image,
        )
    except Exception as exc:
        _logger.exception("Error updating menu item", extra={"item_id": item_id})
        return unexpected_error_response(
            container, exc, "Failed to update menu item. Please try again."
        )
    if updated is None:
        return _not_found()
    return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)


def _not_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Menu item not found.",
            "toast": toast("Error", "Menu item not found.", destructive=True),
        },
    )
