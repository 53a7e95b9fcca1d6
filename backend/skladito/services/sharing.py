from __future__ import annotations

import logging
from typing import Any

from skladito.core.clock import new_id, utcnow
from skladito.core.errors import Conflict, NotFound
from skladito.core.store import CONTAINER_ACCESS, CONTAINERS, USERS, Record, RecordStore
from skladito.services.auth_gate import redact_user, require_owner_or_admin

logger = logging.getLogger("skladito.sharing")


class Sharing:
    """Grants that let a helper see a container they do not own.

    Only the owner of the container or an admin may manage its grants.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def grant_access(self, actor: Record, container_id: str, user_id: str) -> Record:
        container = self._get_managed_container(actor, container_id)

        grantee = self.store.find_one(USERS, {"id": user_id})
        if grantee is None:
            raise NotFound("User not found")
        if grantee["id"] == container["owner_id"]:
            raise Conflict("User already owns this container")
        if self.store.find_one(CONTAINER_ACCESS, {"container_id": container_id, "user_id": user_id}):
            raise Conflict("Access already granted")

        grant = {
            "id": new_id("a"),
            "container_id": container_id,
            "user_id": user_id,
            "created": utcnow(),
        }
        # A concurrent duplicate that slips past the check above is rejected
        # by the unique constraint and surfaces as Conflict from the store.
        self.store.insert(CONTAINER_ACCESS, grant)
        logger.info("access to container %s granted to %s by %s", container_id, user_id, actor["id"])
        return grant

    def revoke_access(self, actor: Record, container_id: str, user_id: str) -> None:
        self._get_managed_container(actor, container_id)
        if not self.store.delete_one(CONTAINER_ACCESS, {"container_id": container_id, "user_id": user_id}):
            raise NotFound("Access grant not found")
        logger.info("access to container %s revoked from %s by %s", container_id, user_id, actor["id"])

    def list_access(self, actor: Record, container_id: str) -> list[dict[str, Any]]:
        self._get_managed_container(actor, container_id)

        grants = self.store.find_many(CONTAINER_ACCESS, {"container_id": container_id}, order_by="created")
        users = {
            user["id"]: redact_user(user)
            for user in self.store.find_many(USERS, {"id": [grant["user_id"] for grant in grants]})
        }
        return [{**grant, "user": users.get(grant["user_id"])} for grant in grants]

    def _get_managed_container(self, actor: Record, container_id: str) -> Record:
        container = self.store.find_one(CONTAINERS, {"id": container_id})
        if container is None:
            raise NotFound("Container not found")
        require_owner_or_admin(actor, container)
        return container
