from fastapi import APIRouter, Depends

from skladito.api.deps import get_auth_gate
from skladito.core.security import create_access_token, get_current_user
from skladito.core.store import Record
from skladito.schemas.auth import ActivateRequest, LoginRequest, TokenResponse, UserRead
from skladito.services.auth_gate import AuthGate, redact_user

router = APIRouter(prefix="/auth", tags=["auth"])


def to_token_response(user: Record) -> TokenResponse:
    return TokenResponse(access_token=create_access_token(user), user=UserRead(**redact_user(user)))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, gate: AuthGate = Depends(get_auth_gate)) -> TokenResponse:
    return to_token_response(gate.login(payload.code))


@router.post("/activate", response_model=TokenResponse)
def activate(payload: ActivateRequest, gate: AuthGate = Depends(get_auth_gate)) -> TokenResponse:
    return to_token_response(gate.activate(payload.invite_token, payload.code))


@router.get("/me", response_model=UserRead)
def get_me(current_user: Record = Depends(get_current_user)) -> UserRead:
    return UserRead(**redact_user(current_user))
