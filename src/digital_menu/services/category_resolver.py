"""Category resolution for menu lookups.

The menu collections were populated by hand, so a category slug from the
frontend does not always match the stored collection name: hyphens, spaces
and ampersands drift between the two. Resolution runs in three tiers:

1. the collection named exactly like the token
2. the first separator variant of the token that names a collection
3. a case-insensitive substring search over the name and description of
   every item in every collection

The collection choice and the text predicate are pure functions so they can
be tested without DynamoDB.
"""

import logging
import unicodedata
from collections.abc import Collection, Iterable

from digital_menu.models.menu_models import MenuItem
from digital_menu.observability.metrics import record_category_resolution
from digital_menu.repositories.errors import StorageError
from digital_menu.repositories.menu_repositories import MenuItemRepository

logger = logging.getLogger(__name__)


def category_variants(token: str) -> list[str]:
    """Separator rewrites of a token, in lookup order.

    Duplicates and the token itself are dropped; order is significant since
    the first variant naming a collection wins.
    """
    candidates = [
        token.replace("-", " "),
        token.replace("-", "&"),
        token.replace("-", " & "),
        token.replace("&", "-"),
        token.replace(" ", "-"),
    ]
    return [variant for variant in dict.fromkeys(candidates) if variant != token]


def choose_collection(token: str, available: Collection[str]) -> str | None:
    """Pick the collection that holds the items for a token.

    Args:
        token: Caller-supplied category
        available: Names of collections that hold at least one item

    Returns:
        The exact token if available, else the first available variant, else None
    """
    if token in available:
        return token

    for variant in category_variants(token):
        if variant in available:
            return variant

    return None


def matches_text(token: str, item: MenuItem) -> bool:
    """Whether an item's name or description mentions the token.

    Hyphens in the token are read as spaces. Matching is a plain
    case-insensitive substring test.
    """
    needle = token.replace("-", " ").casefold()
    return needle in item.name.casefold() or needle in (item.description or "").casefold()


def _collation_key(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def sort_menu_items(items: Iterable[MenuItem]) -> list[MenuItem]:
    """Vegetarian items first, then by name ignoring case and accents.

    Names equal under that comparison put lowercase before uppercase
    ("apple" before "Apple"). Identical names keep their input order.
    """
    return sorted(
        items,
        key=lambda item: (not item.is_veg, _collation_key(item.name), item.name.swapcase()),
    )


class CategoryResolver:
    """Resolves a category token to the menu items it refers to."""

    def __init__(self, menu_repository: MenuItemRepository) -> None:
        """Initialize the resolver.

        Args:
            menu_repository: Repository for menu collections
        """
        self.menu_repository = menu_repository

    def resolve(self, token: str) -> list[MenuItem]:
        """Return the sorted items for a category token.

        Storage failures are logged and reported as no match; this never raises.

        Args:
            token: Caller-supplied category

        Returns:
            list: Matching items labelled with the collection they came from
        """
        try:
            items, tier = self._resolve(token)
        except StorageError as e:
            logger.error(f"Category lookup for {token!r} failed, returning no items: {e}")
            record_category_resolution("error")
            return []

        logger.info(f"Category {token!r} resolved via {tier} match: {len(items)} items")
        record_category_resolution(tier)
        return sort_menu_items(items)

    def _resolve(self, token: str) -> tuple[list[MenuItem], str]:
        # A direct partition query answers the common case without a scan
        items = self.menu_repository.list_items(token)
        if items:
            return [item.in_collection(token) for item in items], "exact"

        available = set(self.menu_repository.list_collection_names())
        available.discard(token)
        chosen = choose_collection(token, available)

        if chosen is not None:
            items = self.menu_repository.list_items(chosen)
            if items:
                return [item.in_collection(chosen) for item in items], "variant"

        matches = [
            item for item in self.menu_repository.list_all_items() if matches_text(token, item)
        ]
        return matches, "text" if matches else "none"
