"""Tests for form validation."""

import pytest
from pydantic import ValidationError

from mess_menu.domain.profiles import Role
from mess_menu.forms import (
    RATING_REQUIRED_MESSAGE,
    FeedbackForm,
    LoginForm,
    MenuItemForm,
    ProfileForm,
    RegistrationForm,
    field_errors,
)


def _registration(**overrides) -> dict[str, object]:  # type: ignore[no-untyped-def]
    values: dict[str, object] = {
        "username": "hungry_student",
        "email": "student@campus.edu",
        "password": "Abcdef12",
        "confirm_password": "Abcdef12",
        "role": "regular",
        "terms_accepted": True,
    }
    values.update(overrides)
    return values


def _errors(form_class, values) -> dict[str, str]:  # type: ignore[no-untyped-def]
    with pytest.raises(ValidationError) as exc_info:
        form_class(**values)
    return field_errors(exc_info.value)


def test_registration_accepts_strong_password() -> None:
    form = RegistrationForm(**_registration())

    assert form.account_role is Role.REGULAR


def test_registration_rejects_password_without_uppercase_or_digit() -> None:
    errors = _errors(
        RegistrationForm,
        _registration(password="abcdefgh", confirm_password="abcdefgh"),
    )

    assert errors == {
        "password": "Password must contain at least one uppercase letter"
    }


@pytest.mark.parametrize(
    ("password", "message"),
    [
        ("Ab1", "Password must be at least 8 characters"),
        ("ABCDEFG1", "Password must contain at least one lowercase letter"),
        ("Abcdefgh", "Password must contain at least one number"),
    ],
)
def test_registration_password_policy(password: str, message: str) -> None:
    errors = _errors(
        RegistrationForm, _registration(password=password, confirm_password=password)
    )

    assert errors["password"] == message


def test_registration_mismatch_is_reported_on_confirmation() -> None:
    errors = _errors(RegistrationForm, _registration(confirm_password="Abcdef13"))

    assert errors == {"confirm_password": "Passwords don't match"}


def test_registration_requires_terms_and_known_role() -> None:
    errors = _errors(
        RegistrationForm, _registration(terms_accepted=False, role="chef")
    )

    assert errors["terms_accepted"] == "You must accept the terms and conditions"
    assert errors["role"] == "Please choose an account type"


def test_registration_staff_role() -> None:
    form = RegistrationForm(**_registration(role="staff"))

    assert form.account_role is Role.STAFF


def test_login_validates_email_and_password_length() -> None:
    errors = _errors(LoginForm, {"email": "not-an-email", "password": "12345"})

    assert errors == {
        "email": "Please enter a valid email address",
        "password": "Password must be at least 6 characters",
    }


def test_profile_username_minimum_length() -> None:
    errors = _errors(ProfileForm, {"username": " ab "})

    assert errors == {"username": "Username must be at least 3 characters."}


def test_feedback_requires_a_rating() -> None:
    errors = _errors(FeedbackForm, {"comment": "Tasty"})

    assert errors == {"rating": RATING_REQUIRED_MESSAGE}


def test_feedback_blank_comment_is_dropped() -> None:
    form = FeedbackForm(rating=4, comment="   ")

    assert form.comment is None


def test_menu_item_required_fields() -> None:
    errors = _errors(MenuItemForm, {"title": "  ", "meal_type": "brunch"})

    assert errors == {
        "title": "Please enter a title for the menu item.",
        "description": "Please enter a description for the menu item.",
        "meal_type": "Please select a meal type.",
        "serving_time": "Please enter a serving time for the menu item.",
    }


def test_menu_item_payload_drops_blank_entries() -> None:
    form = MenuItemForm(
        title="Poha",
        description="Flattened rice",
        meal_type="breakfast",
        serving_time="7:30 AM - 9:30 AM",
        ingredients=["Poha", "", "Peanuts"],
        tags=["Light", "", "Light", "Vegetarian"],
    )

    payload = form.to_payload()

    assert payload["ingredients"] == ["Poha", "Peanuts"]
    assert payload["tags"] == ["Light", "Vegetarian"]
    assert payload["detailed_description"] is None
