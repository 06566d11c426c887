"""Domain models for menu feedback."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class Feedback:
    """A user's rating of a menu item; one per (menu item, user)."""

    id: UUID
    menu_item_id: UUID
    user_id: UUID
    rating: int
    comment: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
