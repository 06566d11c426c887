"""Domain models and list operations for menu items."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Meal slot a menu item is served in."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACKS = "snacks"
    DINNER = "dinner"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SortOption(str, Enum):
    """Supported orderings for menu listings."""

    RATING_DESC = "rating-desc"
    TITLE_ASC = "title-asc"
    TITLE_DESC = "title-desc"


ALL_MEAL_TYPES = "all"


@dataclass(frozen=True)
class MenuItem:
    """A dish on the mess menu."""

    id: UUID
    title: str
    description: str
    meal_type: MealType
    serving_time: str
    rating: float
    tags: tuple[str, ...] = ()
    ingredients: tuple[str, ...] = ()
    detailed_description: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MenuFilter:
    """Filter criteria for menu listings."""

    meal_type: MealType | None = None
    search_term: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)


def matches_filter(item: MenuItem, menu_filter: MenuFilter) -> bool:
    """Return True when the item satisfies every filter criterion."""
    if menu_filter.meal_type is not None and item.meal_type != menu_filter.meal_type:
        return False
    term = (menu_filter.search_term or "").strip().lower()
    if term and not (
        term in item.title.lower()
        or term in item.description.lower()
        or any(term in tag.lower() for tag in item.tags)
    ):
        return False
    # Selected tags are a conjunction: the item needs all of them.
    return menu_filter.tags.issubset(item.tags)


def filter_menu_items(
    items: list[MenuItem], menu_filter: MenuFilter
) -> list[MenuItem]:
    """Return the items matching the filter, in their original order."""
    return [item for item in items if matches_filter(item, menu_filter)]


def sort_menu_items(items: list[MenuItem], sort: SortOption) -> list[MenuItem]:
    """Return a stably sorted copy of the items."""
    if sort is SortOption.RATING_DESC:
        return sorted(items, key=lambda item: item.rating, reverse=True)
    if sort is SortOption.TITLE_ASC:
        return sorted(items, key=lambda item: item.title.casefold())
    return sorted(items, key=lambda item: item.title.casefold(), reverse=True)


def available_tags(items: list[MenuItem]) -> list[str]:
    """Return the unique tags across items, alphabetically."""
    return sorted({tag for item in items for tag in item.tags})


def filter_by_title(items: list[MenuItem], search_term: str | None) -> list[MenuItem]:
    """Return the items whose title contains the term, ignoring case."""
    term = (search_term or "").strip().lower()
    if not term:
        return list(items)
    return [item for item in items if term in item.title.lower()]
