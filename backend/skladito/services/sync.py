from __future__ import annotations

import re
from dataclasses import dataclass, field

from skladito.core.config import Settings, settings as default_settings
from skladito.core.errors import Forbidden, NotFound, ValidationError
from skladito.core.store import CATEGORIES, CONTAINERS, ITEMS, Record, RecordStore
from skladito.services.access_resolver import AccessResolver


def is_low_stock(item: Record) -> bool:
    return item["quantity"] <= item["min_quantity"]


@dataclass
class SyncSnapshot:
    containers: list[Record] = field(default_factory=list)
    items: list[Record] = field(default_factory=list)
    categories: list[Record] = field(default_factory=list)


@dataclass
class SearchResult:
    containers: list[Record] = field(default_factory=list)
    items: list[Record] = field(default_factory=list)


class SyncService:
    """Read views for a user: full sync, search and scoped listings.

    Admins see every record. Everyone else sees the containers the access
    resolver grants them and the items stored in those. Categories are shared
    by all authenticated users.
    """

    def __init__(
        self,
        store: RecordStore,
        resolver: AccessResolver | None = None,
        settings: Settings = default_settings,
    ) -> None:
        self.store = store
        self.resolver = resolver or AccessResolver(store)
        self.settings = settings

    def visible_containers(self, user: Record) -> set[str] | None:
        """Ids the user may see, or ``None`` when the user sees everything."""
        if user["is_admin"]:
            return None
        return self.resolver.accessible_containers(user["id"])

    def sync(self, user: Record) -> SyncSnapshot:
        visible = self.visible_containers(user)
        return SyncSnapshot(
            containers=self._containers(visible),
            items=self._items(visible),
            categories=self.store.find_many(CATEGORIES, order_by="order"),
        )

    def list_containers(self, user: Record) -> list[Record]:
        return self._containers(self.visible_containers(user))

    def list_items(self, user: Record, low_stock_only: bool = False) -> list[Record]:
        items = self._items(self.visible_containers(user))
        if low_stock_only:
            items = [item for item in items if is_low_stock(item)]
        return items

    def get_container(self, user: Record, container_id: str) -> Record:
        container = self.store.find_one(CONTAINERS, {"id": container_id})
        if container is None:
            raise NotFound("Container not found")
        if not self.resolver.can_see(user, container_id):
            raise Forbidden("No access to this container")
        return container

    def get_item(self, user: Record, item_id: str) -> Record:
        item = self.store.find_one(ITEMS, {"id": item_id})
        if item is None:
            raise NotFound("Item not found")
        if not self.resolver.can_see(user, item["container"]):
            raise Forbidden("No access to this item")
        return item

    def search(self, user: Record, query: str) -> SearchResult:
        # The query is a raw pattern, not a literal string.
        try:
            pattern = re.compile(query, re.IGNORECASE)
        except re.error as exc:
            raise ValidationError(f"Invalid search pattern: {exc}") from exc

        containers = [c for c in self.store.find_many(CONTAINERS, order_by="created") if pattern.search(c["name"])]
        items = [i for i in self.store.find_many(ITEMS, order_by="created") if pattern.search(i["name"])]

        if self.settings.scope_search_to_access:
            visible = self.visible_containers(user)
            if visible is not None:
                containers = [c for c in containers if c["id"] in visible]
                items = [i for i in items if i["container"] in visible]

        return SearchResult(containers=containers, items=items)

    def _containers(self, visible: set[str] | None) -> list[Record]:
        if visible is None:
            return self.store.find_many(CONTAINERS, order_by="created")
        return self.store.find_many(CONTAINERS, {"id": visible}, order_by="created")

    def _items(self, visible: set[str] | None) -> list[Record]:
        if visible is None:
            return self.store.find_many(ITEMS, order_by="created")
        return self.store.find_many(ITEMS, {"container": visible}, order_by="created")
