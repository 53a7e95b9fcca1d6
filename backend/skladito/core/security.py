from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import InvalidTokenError

from skladito.api.deps import get_store
from skladito.core.config import settings
from skladito.core.errors import Unauthorized
from skladito.core.store import Record, RecordStore
from skladito.services.auth_gate import AuthGate

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user: Record) -> str:
    now = datetime.now(tz=timezone.utc)
    expires = now + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {"sub": user["id"], "ver": user["credential_version"], "iat": now, "exp": expires}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: RecordStore = Depends(get_store),
) -> Record:
    if credentials is None:
        raise Unauthorized("Not authenticated")

    try:
        payload = jwt.decode(credentials.credentials, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except InvalidTokenError as exc:
        raise Unauthorized("Invalid token") from exc

    version = payload.get("ver")
    if not isinstance(version, int):
        raise Unauthorized("Invalid token payload")

    user = AuthGate(store).authenticate(payload.get("sub"), credential_version=version)
    request.state.user_id = user["id"]
    return user
