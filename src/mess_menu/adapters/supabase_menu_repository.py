"""Supabase-backed menu item repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from mess_menu.adapters.rows import parse_timestamp
from mess_menu.domain.menu import MealType, MenuItem
from mess_menu.services.menu import MenuRepository

_TABLE = "menu_items"


@dataclass
class SupabaseMenuRepository(MenuRepository):
    """Supabase implementation for menu item persistence."""

    client: Client

    def list_menu_items(self) -> list[MenuItem]:
        """Return all menu items, newest first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_menu_item(row) for row in response.data or []]

    def get_menu_item(self, item_id: UUID) -> MenuItem | None:
        """Return a menu item by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_menu_item(response.data[0])

    def create_menu_item(self, payload: dict[str, object]) -> MenuItem:
        """Insert a menu item and return it."""
        response = self.client.table(_TABLE).insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create menu item")
        return _parse_menu_item(response.data[0])

    def update_menu_item(self, item_id: UUID, payload: dict[str, object]) -> MenuItem:
        """Update a menu item and return it."""
        response = (
            self.client.table(_TABLE)
            .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(item_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update menu item")
        return _parse_menu_item(response.data[0])

    def delete_menu_item(self, item_id: UUID) -> None:
        """Delete a menu item row."""
        self.client.table(_TABLE).delete().eq("id", str(item_id)).execute()


def _parse_menu_item(row: dict[str, object]) -> MenuItem:
    """Parse a menu_items row into a domain model."""
    return MenuItem(
        id=UUID(str(row["id"])),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        meal_type=MealType(row["meal_type"]),
        serving_time=str(row.get("serving_time") or ""),
        rating=float(row.get("rating") or 0.0),
        tags=tuple(str(tag) for tag in row.get("tags") or []),
        ingredients=tuple(str(entry) for entry in row.get("ingredients") or []),
        detailed_description=row.get("detailed_description") or None,
        image_url=row.get("image_url") or None,
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
