"""Feedback service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from mess_menu.domain.feedback import MAX_RATING, MIN_RATING, Feedback
from mess_menu.forms import RATING_REQUIRED_MESSAGE


class RatingRequiredError(ValueError):
    """Raised when feedback is submitted without a star rating."""


class FeedbackRepository(Protocol):
    """Persistence interface for feedback rows."""

    def find_feedback(self, menu_item_id: UUID, user_id: UUID) -> Feedback | None:
        """Return a user's feedback for a menu item, if present."""

    def create_feedback(
        self, menu_item_id: UUID, user_id: UUID, rating: int, comment: str | None
    ) -> Feedback:
        """Insert a feedback row and return it."""

    def update_feedback(
        self, feedback_id: UUID, rating: int, comment: str | None
    ) -> Feedback:
        """Update a feedback row and return it."""


@dataclass
class FeedbackService:
    """Keeps at most one feedback row per menu item and user."""

    repository: FeedbackRepository

    def get_feedback(self, menu_item_id: UUID, user_id: UUID) -> Feedback | None:
        """Return the user's existing feedback for a menu item."""
        return self.repository.find_feedback(menu_item_id, user_id)

    def upsert_feedback(
        self,
        menu_item_id: UUID,
        user_id: UUID,
        rating: int,
        comment: str | None = None,
    ) -> Feedback:
        """Update the user's feedback for the item, or create it."""
        if not MIN_RATING <= rating <= MAX_RATING:
            raise RatingRequiredError(RATING_REQUIRED_MESSAGE)
        existing = self.repository.find_feedback(menu_item_id, user_id)
        if existing:
            return self.repository.update_feedback(existing.id, rating, comment)
        return self.repository.create_feedback(menu_item_id, user_id, rating, comment)
