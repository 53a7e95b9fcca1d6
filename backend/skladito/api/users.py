from fastapi import APIRouter, Depends, Response, status

from skladito.api.deps import get_auth_gate, get_repository
from skladito.core.security import get_current_user
from skladito.core.store import Record
from skladito.schemas.auth import InviteCreate, UserInviteRead, UserPatch, UserRead
from skladito.services.auth_gate import AuthGate, redact_user
from skladito.services.repository import EntityRepository

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserRead])
def list_users(
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> list[UserRead]:
    return [UserRead(**redact_user(user)) for user in repository.list_users()]


@router.post("", response_model=UserInviteRead, status_code=status.HTTP_201_CREATED)
def invite_user(
    payload: InviteCreate,
    gate: AuthGate = Depends(get_auth_gate),
    current_user: Record = Depends(get_current_user),
) -> UserInviteRead:
    user = gate.invite(current_user, payload)
    return UserInviteRead(**redact_user(user), invite_token=user["invite_token"])


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    payload: UserPatch,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> UserRead:
    return UserRead(**redact_user(repository.update_user(current_user, user_id, payload)))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Response:
    repository.delete_user(current_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/reset-invite", response_model=UserInviteRead)
def reset_invite(
    user_id: str,
    gate: AuthGate = Depends(get_auth_gate),
    current_user: Record = Depends(get_current_user),
) -> UserInviteRead:
    user = gate.reset_invite(current_user, user_id)
    return UserInviteRead(**redact_user(user), invite_token=user["invite_token"])
