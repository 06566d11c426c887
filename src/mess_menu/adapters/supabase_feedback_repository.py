"""Supabase-backed feedback repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from mess_menu.adapters.rows import parse_timestamp
from mess_menu.domain.feedback import Feedback
from mess_menu.services.feedback import FeedbackRepository

_TABLE = "feedback"


@dataclass
class SupabaseFeedbackRepository(FeedbackRepository):
    """Supabase implementation for feedback persistence."""

    client: Client

    def find_feedback(self, menu_item_id: UUID, user_id: UUID) -> Feedback | None:
        """Return a user's feedback for a menu item, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("menu_item_id", str(menu_item_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_feedback(response.data[0])

    def create_feedback(
        self, menu_item_id: UUID, user_id: UUID, rating: int, comment: str | None
    ) -> Feedback:
        """Insert a feedback row and return it."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "menu_item_id": str(menu_item_id),
                    "user_id": str(user_id),
                    "rating": rating,
                    "comment": comment,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create feedback")
        return _parse_feedback(response.data[0])

    def update_feedback(
        self, feedback_id: UUID, rating: int, comment: str | None
    ) -> Feedback:
        """Update a feedback row and return it."""
        response = (
            self.client.table(_TABLE)
            .update(
                {
                    "rating": rating,
                    "comment": comment,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(feedback_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update feedback")
        return _parse_feedback(response.data[0])


def _parse_feedback(row: dict[str, object]) -> Feedback:
    return Feedback(
        id=UUID(str(row["id"])),
        menu_item_id=UUID(str(row["menu_item_id"])),
        user_id=UUID(str(row["user_id"])),
        rating=int(row["rating"]),
        comment=row.get("comment") or None,
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
