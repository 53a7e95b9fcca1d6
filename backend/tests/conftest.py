from collections.abc import Callable, Generator
from typing import Any

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skladito.core.clock import new_id, utcnow
from skladito.core.database import Base
from skladito.core.store import CONTAINER_ACCESS, USERS, Record, SqlRecordStore
from skladito.schemas.container import ContainerCreate
from skladito.services.auth_gate import AuthGate
from skladito.services.repository import EntityRepository


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(engine: Engine) -> Generator[SqlRecordStore, None, None]:
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield SqlRecordStore(session)
    finally:
        session.close()


@pytest.fixture
def repository(store: SqlRecordStore) -> EntityRepository:
    return EntityRepository(store)


@pytest.fixture
def make_user(store: SqlRecordStore) -> Callable[..., Record]:
    def _make_user(name: str, *, is_admin: bool = False, code: str | None = None, is_active: bool = True) -> Record:
        user: dict[str, Any] = {
            "id": new_id("u"),
            "name": name,
            "code": AuthGate(store).hash_code(code) if code else None,
            "is_admin": is_admin,
            "is_active": is_active,
            "invite_token": None,
            "invite_expires": None,
            "credential_version": 0,
            "created": utcnow(),
        }
        store.insert(USERS, user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user: Callable[..., Record]) -> Record:
    return make_user("u_admin", is_admin=True, code="0000")


@pytest.fixture
def make_container(repository: EntityRepository) -> Callable[..., Record]:
    def _make_container(owner: Record, name: str, parent: Record | None = None) -> Record:
        payload = ContainerCreate(name=name, parent=parent["id"] if parent else None)
        return repository.create_container(owner, payload)

    return _make_container


@pytest.fixture
def grant(store: SqlRecordStore) -> Callable[[Record, Record], None]:
    def _grant(container: Record, user: Record) -> None:
        store.insert(
            CONTAINER_ACCESS,
            {"id": new_id("a"), "container_id": container["id"], "user_id": user["id"], "created": utcnow()},
        )

    return _grant
