"""Visibility of containers for regular users.

A user sees every container they own, every container granted to them through
a ``container_access`` row, and every descendant of those at any depth.
Admins see everything and never go through here.
"""
from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Iterable

from skladito.core.store import CONTAINER_ACCESS, CONTAINERS, Record, RecordStore

logger = logging.getLogger("skladito.access")


def build_children_index(containers: Iterable[Record]) -> dict[str, list[str]]:
    children: dict[str, list[str]] = defaultdict(list)
    for container in containers:
        if container["parent"] is not None:
            children[container["parent"]].append(container["id"])
    return children


def collect_descendants(children: dict[str, list[str]], roots: Iterable[str]) -> set[str]:
    """Breadth-first walk from ``roots``; returns the roots plus everything below them.

    Already-visited ids are never expanded again, so a corrupted cyclic
    parent graph still terminates.
    """
    visited: set[str] = set()
    queue = deque(roots)
    while queue:
        container_id = queue.popleft()
        if container_id in visited:
            continue
        visited.add(container_id)
        queue.extend(child for child in children.get(container_id, ()) if child not in visited)
    return visited


class AccessResolver:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def accessible_containers(self, user_id: str) -> set[str]:
        containers = self.store.find_many(CONTAINERS)
        existing = {container["id"] for container in containers}

        roots = {container["id"] for container in containers if container["owner_id"] == user_id}
        granted = {grant["container_id"] for grant in self.store.find_many(CONTAINER_ACCESS, {"user_id": user_id})}
        # Grants can outlive their container when a cascade delete was interrupted.
        roots |= granted & existing

        visible = collect_descendants(build_children_index(containers), roots)
        logger.debug("user %s sees %d of %d containers", user_id, len(visible), len(containers))
        return visible

    def descendants(self, container_id: str) -> set[str]:
        """Every container nested below ``container_id``, excluding itself."""
        children = build_children_index(self.store.find_many(CONTAINERS))
        return collect_descendants(children, children.get(container_id, ())) - {container_id}

    def can_see(self, user: Record, container_id: str) -> bool:
        if user["is_admin"]:
            return True
        return container_id in self.accessible_containers(user["id"])
