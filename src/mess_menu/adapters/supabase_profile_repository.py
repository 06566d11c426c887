"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from mess_menu.domain.profiles import Profile, Role
from mess_menu.services.auth import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("id, username, user_type")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def save_profile(self, profile: Profile) -> Profile:
        """Insert or replace the profile row for a user."""
        response = (
            self.client.table("profiles")
            .upsert(
                {
                    "id": str(profile.id),
                    "username": profile.username,
                    "user_type": profile.role.user_type,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile")
        return _parse_profile(response.data[0])

    def update_username(self, user_id: UUID, username: str) -> None:
        """Change a profile's username."""
        self.client.table("profiles").update(
            {"username": username, "updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(user_id)).execute()


def _parse_profile(row: dict[str, object]) -> Profile:
    return Profile(
        id=UUID(str(row["id"])),
        username=str(row.get("username") or ""),
        role=Role.from_user_type(row.get("user_type")),
    )
