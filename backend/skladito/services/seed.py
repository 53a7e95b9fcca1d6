from __future__ import annotations

import logging

from skladito.core.clock import new_id, utcnow
from skladito.core.config import Settings
from skladito.core.store import CATEGORIES, USERS, RecordStore
from skladito.services.auth_gate import CODE_PATTERN, AuthGate

logger = logging.getLogger("skladito.seed")

DEFAULT_CATEGORIES = [
    {"id": "cat1", "name": "Инструменты", "icon": "🔧", "order": 1},
    {"id": "cat2", "name": "Канцелярия", "icon": "📝", "order": 2},
    {"id": "cat3", "name": "Бытовые вещи", "icon": "🏠", "order": 3},
    {"id": "cat4", "name": "Электроника", "icon": "⚡", "order": 4},
    {"id": "cat5", "name": "Одежда", "icon": "👕", "order": 5},
]


def seed_defaults(store: RecordStore, settings: Settings) -> None:
    if store.count(CATEGORIES) == 0:
        for category in DEFAULT_CATEGORIES:
            store.insert(CATEGORIES, dict(category))
        logger.info("default categories created")

    if settings.bootstrap_admin_code is None or store.count(USERS) > 0:
        return
    if not CODE_PATTERN.fullmatch(settings.bootstrap_admin_code):
        raise ValueError("BOOTSTRAP_ADMIN_CODE must be 4 to 6 digits")

    store.insert(
        USERS,
        {
            "id": new_id("u"),
            "name": settings.bootstrap_admin_name,
            "code": AuthGate(store, settings).hash_code(settings.bootstrap_admin_code),
            "is_admin": True,
            "is_active": True,
            "invite_token": None,
            "invite_expires": None,
            "credential_version": 0,
            "created": utcnow(),
        },
    )
    logger.info("bootstrap admin %r created", settings.bootstrap_admin_name)
