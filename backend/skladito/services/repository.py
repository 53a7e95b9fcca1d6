from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from skladito.core.clock import new_id, utcnow
from skladito.core.errors import Conflict, Forbidden, NotFound, ValidationError
from skladito.core.store import (
    CATEGORIES,
    CONTAINER_ACCESS,
    CONTAINERS,
    ITEMS,
    USERS,
    Record,
    RecordStore,
)
from skladito.schemas.auth import UserPatch
from skladito.schemas.category import CategoryCreate, CategoryPatch
from skladito.schemas.container import ContainerCreate, ContainerPatch
from skladito.schemas.item import ItemCreate, ItemPatch
from skladito.services.access_resolver import AccessResolver
from skladito.services.auth_gate import require_admin

logger = logging.getLogger("skladito.repository")


def _reject_cleared(changes: dict[str, Any], required: Iterable[str]) -> None:
    for field in required:
        if field in changes and changes[field] is None:
            raise ValidationError(f"Field '{field}' cannot be cleared")


class EntityRepository:
    """CRUD over containers, items, categories and users.

    Updates take pydantic patch models: only the fields the caller actually
    set are written, and an explicit ``None`` clears a nullable field.
    """

    def __init__(self, store: RecordStore, resolver: AccessResolver | None = None) -> None:
        self.store = store
        self.resolver = resolver or AccessResolver(store)

    # Containers

    def get_container(self, container_id: str) -> Record:
        container = self.store.find_one(CONTAINERS, {"id": container_id})
        if container is None:
            raise NotFound("Container not found")
        return container

    def create_container(self, actor: Record, payload: ContainerCreate) -> Record:
        owner_id = actor["id"]
        if payload.parent is not None:
            parent = self._get_parent(payload.parent)
            self._require_visible(actor, parent["id"])
            owner_id = parent["owner_id"]

        container = {
            "id": new_id("c"),
            "name": payload.name,
            "photo": payload.photo,
            "number": payload.number,
            "parent": payload.parent,
            "owner_id": owner_id,
            "created": utcnow(),
        }
        self.store.insert(CONTAINERS, container)
        logger.info("container %s created by %s", container["id"], actor["id"])
        return container

    def update_container(self, actor: Record, container_id: str, patch: ContainerPatch) -> Record:
        container = self.get_container(container_id)
        self._require_visible(actor, container_id)

        changes = patch.model_dump(exclude_unset=True)
        _reject_cleared(changes, ("name",))
        if "parent" in changes and changes["parent"] != container["parent"]:
            self._check_move(actor, container_id, changes["parent"])

        self.store.update(CONTAINERS, container_id, changes)
        return self.get_container(container_id)

    def delete_container(self, actor: Record, container_id: str) -> None:
        self.get_container(container_id)
        self._require_visible(actor, container_id)

        if self.store.count(CONTAINERS, {"parent": container_id}) > 0:
            raise Conflict("Container has nested containers")
        if self.store.count(ITEMS, {"container": container_id}) > 0:
            raise Conflict("Container has items")

        self.store.delete_one(CONTAINERS, {"id": container_id})
        revoked = self.store.delete_many(CONTAINER_ACCESS, {"container_id": container_id})
        logger.info("container %s deleted by %s, %d access grants removed", container_id, actor["id"], revoked)

    def _get_parent(self, parent_id: str) -> Record:
        parent = self.store.find_one(CONTAINERS, {"id": parent_id})
        if parent is None:
            raise NotFound("Parent container not found")
        return parent

    def _check_move(self, actor: Record, container_id: str, new_parent: str | None) -> None:
        if new_parent is None:
            return
        self._get_parent(new_parent)
        self._require_visible(actor, new_parent)
        if new_parent == container_id or new_parent in self.resolver.descendants(container_id):
            raise Conflict("Container cannot be moved inside itself")

    def _require_visible(self, actor: Record, container_id: str) -> None:
        if not self.resolver.can_see(actor, container_id):
            raise Forbidden("No access to this container")

    # Items

    def get_item(self, item_id: str) -> Record:
        item = self.store.find_one(ITEMS, {"id": item_id})
        if item is None:
            raise NotFound("Item not found")
        return item

    def create_item(self, actor: Record, payload: ItemCreate) -> Record:
        self.get_container(payload.container)
        self._require_visible(actor, payload.container)
        if payload.category is not None:
            self.get_category(payload.category)

        item = {
            "id": new_id("i"),
            "name": payload.name,
            "quantity": payload.quantity,
            "min_quantity": payload.min_quantity,
            "category": payload.category,
            "photo": payload.photo,
            "container": payload.container,
            "created": utcnow(),
        }
        self.store.insert(ITEMS, item)
        logger.info("item %s created in container %s", item["id"], item["container"])
        return item

    def update_item(self, actor: Record, item_id: str, patch: ItemPatch) -> Record:
        item = self.get_item(item_id)
        self._require_visible(actor, item["container"])

        changes = patch.model_dump(exclude_unset=True)
        _reject_cleared(changes, ("name", "quantity", "container"))
        if "min_quantity" in changes and changes["min_quantity"] is None:
            changes["min_quantity"] = 0
        if "container" in changes and changes["container"] != item["container"]:
            self.get_container(changes["container"])
            self._require_visible(actor, changes["container"])
        if changes.get("category") is not None:
            self.get_category(changes["category"])

        self.store.update(ITEMS, item_id, changes)
        return self.get_item(item_id)

    def delete_item(self, actor: Record, item_id: str) -> None:
        item = self.get_item(item_id)
        self._require_visible(actor, item["container"])
        self.store.delete_one(ITEMS, {"id": item_id})
        logger.info("item %s deleted by %s", item_id, actor["id"])

    # Categories

    def list_categories(self) -> list[Record]:
        return self.store.find_many(CATEGORIES, order_by="order")

    def get_category(self, category_id: str) -> Record:
        category = self.store.find_one(CATEGORIES, {"id": category_id})
        if category is None:
            raise NotFound("Category not found")
        return category

    def create_category(self, payload: CategoryCreate) -> Record:
        last = self.store.find_many(CATEGORIES, order_by="-order")
        category = {
            "id": new_id("cat"),
            "name": payload.name,
            "icon": payload.icon,
            "order": last[0]["order"] + 1 if last else 1,
        }
        self.store.insert(CATEGORIES, category)
        return category

    def update_category(self, category_id: str, patch: CategoryPatch) -> Record:
        self.get_category(category_id)
        changes = patch.model_dump(exclude_unset=True)
        _reject_cleared(changes, ("name", "icon"))
        self.store.update(CATEGORIES, category_id, changes)
        return self.get_category(category_id)

    def delete_category(self, actor: Record, category_id: str) -> None:
        require_admin(actor)
        self.get_category(category_id)

        detached = self.store.update_many(ITEMS, {"category": category_id}, {"category": None})
        self.store.delete_one(CATEGORIES, {"id": category_id})
        logger.info("category %s deleted, detached from %d items", category_id, detached)

    # Users

    def list_users(self) -> list[Record]:
        return self.store.find_many(USERS, order_by="created")

    def get_user(self, user_id: str) -> Record:
        user = self.store.find_one(USERS, {"id": user_id})
        if user is None:
            raise NotFound("User not found")
        return user

    def update_user(self, actor: Record, user_id: str, patch: UserPatch) -> Record:
        require_admin(actor)
        self.get_user(user_id)
        changes = patch.model_dump(exclude_unset=True)
        _reject_cleared(changes, ("name", "is_admin"))
        self.store.update(USERS, user_id, changes)
        return self.get_user(user_id)

    def delete_user(self, actor: Record, user_id: str) -> None:
        require_admin(actor)
        if actor["id"] == user_id:
            raise Conflict("Cannot delete yourself")
        self.get_user(user_id)

        self.store.delete_one(USERS, {"id": user_id})
        revoked = self.store.delete_many(CONTAINER_ACCESS, {"user_id": user_id})
        logger.info("user %s deleted by %s, %d access grants removed", user_id, actor["id"], revoked)
