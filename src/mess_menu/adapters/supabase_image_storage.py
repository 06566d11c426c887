"""Supabase Storage adapter for menu images."""

from dataclasses import dataclass

from supabase import Client

from mess_menu.services.menu import ImageStorage


@dataclass
class SupabaseImageStorage(ImageStorage):
    """Stores menu images in a public Supabase Storage bucket."""

    client: Client
    bucket: str = "food_images"

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload an object and return its public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(path, content, {"content-type": content_type})
        return bucket.get_public_url(path)

    def remove(self, path: str) -> None:
        """Delete an object from the bucket."""
        self.client.storage.from_(self.bucket).remove([path])
