"""View-model serializers and response helpers shared by the routers."""

from fastapi import status
from fastapi.responses import JSONResponse

from mess_menu.containers import AppContainer
from mess_menu.domain.feedback import Feedback
from mess_menu.domain.menu import MealType, MenuItem
from mess_menu.domain.profiles import Role
from mess_menu.services.auth import SessionContext


def toast(title: str, description: str, destructive: bool = False) -> dict[str, str]:
    """Build a toast notification payload."""
    return {
        "title": title,
        "description": description,
        "variant": "destructive" if destructive else "default",
    }


def validation_error_response(
    errors: dict[str, str], status_code: int = 422
) -> JSONResponse:
    """Field-scoped validation failure."""
    first = next(iter(errors.values()), "Please check the form and try again.")
    return JSONResponse(
        status_code=status_code,
        content={
            "errors": errors,
            "toast": toast("Please check the form", first, destructive=True),
        },
    )


def unexpected_error_response(
    container: AppContainer,
    exc: Exception,
    fallback: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    """Generic destructive toast, with debug detail in local environments."""
    description = fallback
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            description = f"{fallback} (debug: {detail})"
    return JSONResponse(
        status_code=status_code,
        content={"toast": toast("Error", description, destructive=True)},
    )


def meal_type_options() -> list[dict[str, str]]:
    return [{"value": meal.value, "label": meal.label} for meal in MealType]


def serialize_menu_item(item: MenuItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "title": item.title,
        "description": item.description,
        "detailed_description": item.detailed_description,
        "image_url": item.image_url,
        "meal_type": item.meal_type.value,
        "meal_type_label": item.meal_type.label,
        "tags": list(item.tags),
        "serving_time": item.serving_time,
        "ingredients": list(item.ingredients),
        "rating": round(item.rating, 1),
        "feedback_url": f"/feedback?menuItemId={item.id}",
        "created_at": item.created_at.isoformat() if item.created_at else None,
        "updated_at": item.updated_at.isoformat() if item.updated_at else None,
    }


def serialize_feedback(feedback: Feedback | None) -> dict[str, object] | None:
    if feedback is None:
        return None
    return {
        "id": str(feedback.id),
        "menu_item_id": str(feedback.menu_item_id),
        "rating": feedback.rating,
        "comment": feedback.comment,
        "updated_at": feedback.updated_at.isoformat() if feedback.updated_at else None,
    }


def serialize_session(session: SessionContext) -> dict[str, object]:
    """Navigation-bar view of the current user."""
    if session.user is None:
        return {"authenticated": False, "user": None}
    profile = session.profile
    return {
        "authenticated": True,
        "user": {
            "id": str(session.user.id),
            "email": session.user.email,
            "username": profile.username if profile else None,
            "role": session.role.value if session.role else None,
            "account_type": _account_type_label(session.role),
        },
    }


def _account_type_label(role: Role | None) -> str | None:
    if role is Role.STAFF:
        return "Admin"
    if role is Role.REGULAR:
        return "Regular User"
    return None
