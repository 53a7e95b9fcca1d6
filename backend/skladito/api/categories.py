from fastapi import APIRouter, Depends, Response, status

from skladito.api.deps import get_repository
from skladito.core.security import get_current_user
from skladito.core.store import Record
from skladito.schemas.category import CategoryCreate, CategoryPatch, CategoryRead
from skladito.services.repository import EntityRepository

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryRead])
def list_categories(
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> list[Record]:
    return repository.list_categories()


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Record:
    return repository.create_category(payload)


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: str,
    payload: CategoryPatch,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Record:
    return repository.update_category(category_id, payload)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Response:
    repository.delete_category(current_user, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
