from fastapi import Depends
from sqlalchemy.orm import Session

from skladito.core.database import get_db
from skladito.core.store import RecordStore, SqlRecordStore
from skladito.services.auth_gate import AuthGate
from skladito.services.repository import EntityRepository
from skladito.services.sharing import Sharing
from skladito.services.sync import SyncService


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return SqlRecordStore(db)


def get_repository(store: RecordStore = Depends(get_store)) -> EntityRepository:
    return EntityRepository(store)


def get_auth_gate(store: RecordStore = Depends(get_store)) -> AuthGate:
    return AuthGate(store)


def get_sharing(store: RecordStore = Depends(get_store)) -> Sharing:
    return Sharing(store)


def get_sync_service(store: RecordStore = Depends(get_store)) -> SyncService:
    return SyncService(store)
