from fastapi import APIRouter, Depends, Query

from skladito.api.deps import get_sync_service
from skladito.api.items import to_item_read
from skladito.core.security import get_current_user
from skladito.core.store import Record
from skladito.schemas.sync import SearchResponse, SyncResponse
from skladito.services.sync import SyncService

router = APIRouter(tags=["sync"])


@router.get("/sync", response_model=SyncResponse)
def sync_all(
    sync: SyncService = Depends(get_sync_service),
    current_user: Record = Depends(get_current_user),
) -> SyncResponse:
    snapshot = sync.sync(current_user)
    return SyncResponse(
        containers=snapshot.containers,
        items=[to_item_read(item) for item in snapshot.items],
        categories=snapshot.categories,
    )


@router.get("/search", response_model=SearchResponse)
def search(
    q: str = Query(default="", max_length=200),
    sync: SyncService = Depends(get_sync_service),
    current_user: Record = Depends(get_current_user),
) -> SearchResponse:
    result = sync.search(current_user, q)
    return SearchResponse(
        containers=result.containers,
        items=[to_item_read(item) for item in result.items],
    )
