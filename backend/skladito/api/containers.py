from fastapi import APIRouter, Depends, Response, status

from skladito.api.deps import get_repository, get_sharing, get_sync_service
from skladito.core.security import get_current_user
from skladito.core.store import Record
from skladito.schemas.access import AccessGrant, AccessRead
from skladito.schemas.container import ContainerCreate, ContainerPatch, ContainerRead
from skladito.services.repository import EntityRepository
from skladito.services.sharing import Sharing
from skladito.services.sync import SyncService

router = APIRouter(prefix="/containers", tags=["containers"])


@router.get("", response_model=list[ContainerRead])
def list_containers(
    sync: SyncService = Depends(get_sync_service),
    current_user: Record = Depends(get_current_user),
) -> list[Record]:
    return sync.list_containers(current_user)


@router.post("", response_model=ContainerRead, status_code=status.HTTP_201_CREATED)
def create_container(
    payload: ContainerCreate,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Record:
    return repository.create_container(current_user, payload)


@router.get("/{container_id}", response_model=ContainerRead)
def get_container(
    container_id: str,
    sync: SyncService = Depends(get_sync_service),
    current_user: Record = Depends(get_current_user),
) -> Record:
    return sync.get_container(current_user, container_id)


@router.patch("/{container_id}", response_model=ContainerRead)
def update_container(
    container_id: str,
    payload: ContainerPatch,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Record:
    return repository.update_container(current_user, container_id, payload)


@router.delete("/{container_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_container(
    container_id: str,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Response:
    repository.delete_container(current_user, container_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{container_id}/access", response_model=list[AccessRead])
def list_access(
    container_id: str,
    sharing: Sharing = Depends(get_sharing),
    current_user: Record = Depends(get_current_user),
) -> list[Record]:
    return sharing.list_access(current_user, container_id)


@router.post("/{container_id}/access", response_model=AccessRead, status_code=status.HTTP_201_CREATED)
def grant_access(
    container_id: str,
    payload: AccessGrant,
    sharing: Sharing = Depends(get_sharing),
    current_user: Record = Depends(get_current_user),
) -> Record:
    return sharing.grant_access(current_user, container_id, payload.user_id)


@router.delete("/{container_id}/access/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_access(
    container_id: str,
    user_id: str,
    sharing: Sharing = Depends(get_sharing),
    current_user: Record = Depends(get_current_user),
) -> Response:
    sharing.revoke_access(current_user, container_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
