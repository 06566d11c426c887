"""Menu data access, filtering and image handling."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol
from urllib.parse import urlsplit
from uuid import UUID, uuid4

from mess_menu.domain.menu import (
    MenuFilter,
    MenuItem,
    SortOption,
    available_tags,
    filter_menu_items,
    sort_menu_items,
)
from mess_menu.forms import MenuItemForm

_logger = logging.getLogger(__name__)


class MenuUnavailableError(Exception):
    """Raised when menu items cannot be fetched after all retries."""


class MenuRepository(Protocol):
    """Persistence interface for menu items."""

    def list_menu_items(self) -> list[MenuItem]:
        """Return all menu items, newest first."""

    def get_menu_item(self, item_id: UUID) -> MenuItem | None:
        """Return a menu item by id, if present."""

    def create_menu_item(self, payload: dict[str, object]) -> MenuItem:
        """Insert a menu item and return it."""

    def update_menu_item(self, item_id: UUID, payload: dict[str, object]) -> MenuItem:
        """Update a menu item and return it."""

    def delete_menu_item(self, item_id: UUID) -> None:
        """Delete a menu item row."""


class ImageStorage(Protocol):
    """Object storage for menu item images."""

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store an object and return its public URL."""

    def remove(self, path: str) -> None:
        """Delete a stored object."""


@dataclass(frozen=True)
class ImageUpload:
    """An image file submitted with a menu item form."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class MenuListing:
    """A filtered menu page with the tags offered as filter chips."""

    items: list[MenuItem]
    available_tags: list[str]


@dataclass
class MenuService:
    """Service for browsing and managing menu items."""

    repository: MenuRepository
    image_storage: ImageStorage
    retry_attempts: int = 3
    retry_delay_seconds: float = 2.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def fetch_menu_items(self) -> list[MenuItem]:
        """Fetch every menu item, retrying with a fixed delay on failure."""
        attempt = 0
        while True:
            try:
                return self.repository.list_menu_items()
            except Exception as exc:
                if attempt >= self.retry_attempts:
                    _logger.exception(
                        "Menu fetch failed after %s retries", self.retry_attempts
                    )
                    raise MenuUnavailableError("Failed to load menu items.") from exc
                attempt += 1
                _logger.warning(
                    "Menu fetch failed (retry %s/%s in %ss): %s",
                    attempt,
                    self.retry_attempts,
                    self.retry_delay_seconds,
                    exc,
                )
                await self.sleep(self.retry_delay_seconds)

    async def list_menu_items(
        self, menu_filter: MenuFilter, sort: SortOption | None = None
    ) -> list[MenuItem]:
        """Return a filtered, optionally sorted copy of the menu."""
        items = filter_menu_items(await self.fetch_menu_items(), menu_filter)
        if sort is None:
            return items
        return sort_menu_items(items, sort)

    async def browse(self, menu_filter: MenuFilter, sort: SortOption) -> MenuListing:
        """Filter and sort the menu; tags are collected from the full menu."""
        items = await self.fetch_menu_items()
        matching = sort_menu_items(filter_menu_items(items, menu_filter), sort)
        return MenuListing(items=matching, available_tags=available_tags(items))

    def get_menu_item(self, item_id: UUID) -> MenuItem | None:
        """Return a single menu item."""
        return self.repository.get_menu_item(item_id)

    def create_menu_item(
        self, form: MenuItemForm, image: ImageUpload | None = None
    ) -> MenuItem:
        """Persist a new menu item, uploading its image first."""
        payload = form.to_payload()
        payload["image_url"] = self._upload_image(image) if image else None
        created = self.repository.create_menu_item(payload)
        _logger.info("Created menu item %s", created.id)
        return created

    def update_menu_item(
        self,
        item_id: UUID,
        form: MenuItemForm,
        image: ImageUpload | None = None,
        remove_image: bool = False,
    ) -> MenuItem | None:
        """Update a menu item; returns None when it does not exist."""
        existing = self.repository.get_menu_item(item_id)
        if existing is None:
            return None
        payload = form.to_payload()
        if image is not None:
            payload["image_url"] = self._upload_image(image)
        elif remove_image:
            payload["image_url"] = None
        else:
            payload["image_url"] = existing.image_url
        return self.repository.update_menu_item(item_id, payload)

    def delete_menu_item(self, item_id: UUID) -> bool:
        """Delete a menu item and, best effort, its stored image."""
        existing = self.repository.get_menu_item(item_id)
        if existing is None:
            return False
        self.repository.delete_menu_item(item_id)
        if existing.image_url:
            path = image_path_from_url(existing.image_url)
            try:
                self.image_storage.remove(path)
            except Exception:
                # The row is already gone; an orphaned object is tolerated.
                _logger.warning(
                    "Failed to delete image %s for menu item %s",
                    path,
                    item_id,
                    exc_info=True,
                )
        _logger.info("Deleted menu item %s", item_id)
        return True

    def _upload_image(self, image: ImageUpload) -> str:
        suffix = PurePosixPath(image.filename).suffix.lower()
        path = f"{uuid4().hex}{suffix}"
        return self.image_storage.upload(path, image.content, image.content_type)


def image_path_from_url(image_url: str) -> str:
    """Return the storage object name from its public URL."""
    return PurePosixPath(urlsplit(image_url).path).name
