"""Caller identity, privilege checks and the invite/activate/login lifecycle.

A user is created inactive by an admin invite, becomes active by redeeming the
invite token with a self-chosen numeric code, and logs in with that code from
then on. Resetting the invite puts the user back to the inactive state and
revokes every credential issued before.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from datetime import timedelta
from typing import Any

from skladito.core.clock import new_id, utcnow
from skladito.core.config import Settings, settings as default_settings
from skladito.core.errors import Conflict, Expired, Forbidden, NotFound, Unauthorized, ValidationError
from skladito.core.store import USERS, Record, RecordStore
from skladito.schemas.auth import InviteCreate

logger = logging.getLogger("skladito.auth")

CODE_PATTERN = re.compile(r"[0-9]{4,6}")
_HIDDEN_USER_FIELDS = ("code", "invite_token")


def redact_user(user: Record) -> dict[str, Any]:
    return {key: value for key, value in user.items() if key not in _HIDDEN_USER_FIELDS}


def require_admin(user: Record) -> None:
    if not user["is_admin"]:
        raise Forbidden("Admin privileges required")


def require_owner_or_admin(user: Record, container: Record) -> None:
    if user["is_admin"] or user["id"] == container["owner_id"]:
        return
    raise Forbidden("Only the container owner or an admin can do this")


class AuthGate:
    def __init__(self, store: RecordStore, settings: Settings = default_settings) -> None:
        self.store = store
        self.settings = settings

    def hash_code(self, code: str) -> str:
        # Deterministic so the digest can be looked up and kept unique.
        key = self.settings.jwt_secret_key.encode("utf-8")
        return hmac.new(key, code.encode("utf-8"), hashlib.sha256).hexdigest()

    def authenticate(self, user_id: str | None, credential_version: int | None = None) -> Record:
        if not user_id:
            raise Unauthorized("Not authenticated")

        user = self.store.find_one(USERS, {"id": user_id})
        if user is None or not user["is_active"]:
            raise Unauthorized("Invalid credentials")
        if credential_version is not None and credential_version != user["credential_version"]:
            raise Unauthorized("Credentials have been revoked")
        return user

    def login(self, code: str) -> Record:
        user = None
        if CODE_PATTERN.fullmatch(code):
            user = self.store.find_one(USERS, {"code": self.hash_code(code), "is_active": True})
        if user is None:
            logger.warning("login rejected")
            raise Unauthorized("Invalid code")

        logger.info("user %s logged in", user["id"])
        return user

    def invite(self, actor: Record, payload: InviteCreate) -> Record:
        require_admin(actor)

        user = {
            "id": new_id("u"),
            "name": payload.name,
            "code": None,
            "is_admin": payload.is_admin,
            "is_active": False,
            "credential_version": 0,
            "created": utcnow(),
            **self._fresh_invite(),
        }
        self.store.insert(USERS, user)
        logger.info("user %s invited by %s", user["id"], actor["id"])
        return user

    def activate(self, invite_token: str, code: str) -> Record:
        if not CODE_PATTERN.fullmatch(code):
            raise ValidationError("Code must be 4 to 6 digits")

        # Only the holder of a live invite learns whether a code is taken.
        user = self.store.find_one(USERS, {"invite_token": invite_token, "is_active": False})
        if user is None:
            raise NotFound("Invite not found")
        if user["invite_expires"] is not None and user["invite_expires"] < utcnow():
            raise Expired("Invite has expired")

        digest = self.hash_code(code)
        if self.store.find_one(USERS, {"code": digest, "is_active": True}) is not None:
            raise Conflict("Code is already in use")

        changes = {"code": digest, "is_active": True, "invite_token": None, "invite_expires": None}
        self.store.update(USERS, user["id"], changes)
        logger.info("user %s activated", user["id"])
        return {**user, **changes}

    def reset_invite(self, actor: Record, user_id: str) -> Record:
        require_admin(actor)
        if actor["id"] == user_id:
            raise Conflict("Cannot reset your own invite")

        user = self.store.find_one(USERS, {"id": user_id})
        if user is None:
            raise NotFound("User not found")

        changes = {
            "code": None,
            "is_active": False,
            "credential_version": user["credential_version"] + 1,
            **self._fresh_invite(),
        }
        self.store.update(USERS, user_id, changes)
        logger.info("invite for user %s reset by %s", user_id, actor["id"])
        return {**user, **changes}

    def _fresh_invite(self) -> dict[str, Any]:
        return {
            "invite_token": secrets.token_urlsafe(24),
            "invite_expires": utcnow() + timedelta(hours=self.settings.invite_ttl_hours),
        }
