"""Schema validation for login, registration, profile, feedback and menu forms."""

import re

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from mess_menu.domain.feedback import MAX_RATING, MIN_RATING
from mess_menu.domain.menu import MealType
from mess_menu.domain.profiles import Role

RATING_REQUIRED_MESSAGE = "Please select a rating before submitting."


def _check_email(value: str) -> str:
    cleaned = value.strip()
    try:
        validate_email(cleaned, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Please enter a valid email address") from exc
    return cleaned


def _require_text(value: str, message: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(message)
    return cleaned


class _Form(BaseModel):
    # Defaults are validated too, so an omitted field reports its own message.
    model_config = ConfigDict(validate_default=True)


class LoginForm(_Form):
    """Credentials submitted on the login page."""

    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def _min_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class RegistrationForm(_Form):
    """New account details.

    Field order matters: ``confirm_password`` is compared against the
    already-validated ``password``, and is skipped when the password itself
    failed so only one error is reported for it.
    """

    username: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    role: str = Role.REGULAR.value
    terms_accepted: bool = False

    @field_validator("username")
    @classmethod
    def _username_length(cls, value: str) -> str:
        cleaned = value.strip()
        if len(cleaned) < 3:
            raise ValueError("Username must be at least 3 characters")
        return cleaned

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def _password_policy(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        return value

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Passwords don't match")
        return value

    @field_validator("role")
    @classmethod
    def _known_role(cls, value: str) -> str:
        try:
            return Role(value).value
        except ValueError as exc:
            raise ValueError("Please choose an account type") from exc

    @field_validator("terms_accepted")
    @classmethod
    def _terms(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must accept the terms and conditions")
        return value

    @property
    def account_role(self) -> Role:
        return Role(self.role)


class ProfileForm(_Form):
    """Editable profile fields on the account page."""

    username: str = ""

    @field_validator("username")
    @classmethod
    def _username_length(cls, value: str) -> str:
        cleaned = value.strip()
        if len(cleaned) < 3:
            raise ValueError("Username must be at least 3 characters.")
        return cleaned


class FeedbackForm(_Form):
    """Star rating and optional comment for a menu item."""

    rating: int = 0
    comment: str | None = None

    @field_validator("rating")
    @classmethod
    def _rating_selected(cls, value: int) -> int:
        if value == 0:
            raise ValueError(RATING_REQUIRED_MESSAGE)
        if not MIN_RATING <= value <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        return value

    @field_validator("comment")
    @classmethod
    def _blank_comment(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class MenuItemForm(_Form):
    """Fields staff fill in when adding or editing a menu item."""

    title: str = ""
    description: str = ""
    meal_type: str = ""
    serving_time: str = ""
    detailed_description: str = ""
    ingredients: list[str] = []
    tags: list[str] = []

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _require_text(value, "Please enter a title for the menu item.")

    @field_validator("description")
    @classmethod
    def _description(cls, value: str) -> str:
        return _require_text(value, "Please enter a description for the menu item.")

    @field_validator("meal_type")
    @classmethod
    def _meal_type(cls, value: str) -> str:
        try:
            return MealType(value.strip()).value
        except ValueError as exc:
            raise ValueError("Please select a meal type.") from exc

    @field_validator("serving_time")
    @classmethod
    def _serving_time(cls, value: str) -> str:
        return _require_text(value, "Please enter a serving time for the menu item.")

    @field_validator("detailed_description")
    @classmethod
    def _detailed_description(cls, value: str) -> str:
        return value.strip()

    @field_validator("ingredients")
    @classmethod
    def _drop_blank_ingredients(cls, value: list[str]) -> list[str]:
        return [entry.strip() for entry in value if entry.strip()]

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        tags: list[str] = []
        for entry in value:
            tag = entry.strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    def to_payload(self) -> dict[str, object]:
        """Return the row values for the ``menu_items`` table."""
        return {
            "title": self.title,
            "description": self.description,
            "meal_type": self.meal_type,
            "serving_time": self.serving_time,
            "detailed_description": self.detailed_description or None,
            "ingredients": self.ingredients,
            "tags": self.tags,
        }


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a validation error into the first message per field."""
    return errors_by_field(exc.errors())


def errors_by_field(errors: list[dict]) -> dict[str, str]:
    """Map pydantic error dicts to ``{field: message}``."""
    result: dict[str, str] = {}
    for error in errors:
        names = [part for part in error.get("loc", ()) if isinstance(part, str)]
        field = names[-1] if names else "__root__"
        if field in {"body", "query", "path"}:
            field = "__root__"
        if field in result:
            continue
        ctx = error.get("ctx") or {}
        if error.get("type") == "value_error" and "error" in ctx:
            result[field] = str(ctx["error"])
        else:
            result[field] = str(error.get("msg", "Invalid value"))
    return result
