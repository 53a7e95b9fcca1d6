from fastapi import APIRouter, Depends, Query, Response, status

from skladito.api.deps import get_repository, get_sync_service
from skladito.core.security import get_current_user
from skladito.core.store import Record
from skladito.schemas.item import ItemCreate, ItemPatch, ItemRead, LowStockAlertResponse
from skladito.services.repository import EntityRepository
from skladito.services.sync import SyncService, is_low_stock

router = APIRouter(prefix="/items", tags=["items"])


def to_item_read(item: Record) -> ItemRead:
    return ItemRead(**item, is_low_stock=is_low_stock(item))


@router.get("", response_model=list[ItemRead])
def list_items(
    low_stock_only: bool = Query(default=False),
    sync: SyncService = Depends(get_sync_service),
    current_user: Record = Depends(get_current_user),
) -> list[ItemRead]:
    return [to_item_read(item) for item in sync.list_items(current_user, low_stock_only=low_stock_only)]


@router.get("/alerts/low-stock", response_model=LowStockAlertResponse)
def get_low_stock_alerts(
    sync: SyncService = Depends(get_sync_service),
    current_user: Record = Depends(get_current_user),
) -> LowStockAlertResponse:
    items = [to_item_read(item) for item in sync.list_items(current_user, low_stock_only=True)]
    return LowStockAlertResponse(count=len(items), items=items)


@router.post("", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: ItemCreate,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> ItemRead:
    return to_item_read(repository.create_item(current_user, payload))


@router.get("/{item_id}", response_model=ItemRead)
def get_item(
    item_id: str,
    sync: SyncService = Depends(get_sync_service),
    current_user: Record = Depends(get_current_user),
) -> ItemRead:
    return to_item_read(sync.get_item(current_user, item_id))


@router.patch("/{item_id}", response_model=ItemRead)
def update_item(
    item_id: str,
    payload: ItemPatch,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> ItemRead:
    return to_item_read(repository.update_item(current_user, item_id, payload))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: str,
    repository: EntityRepository = Depends(get_repository),
    current_user: Record = Depends(get_current_user),
) -> Response:
    repository.delete_item(current_user, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
