"""Record store used by the warehouse core.

Services talk to a :class:`RecordStore`: a schemaless-looking collection of
records keyed by string id. :class:`SqlRecordStore` backs it with one table
per kind through a SQLAlchemy session, committing every write on its own so a
single record write is atomic and nothing spans records.
"""
from __future__ import annotations

import logging
from collections.abc import Collection, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol

from sqlalchemy import delete, func, inspect, select, update
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from skladito.core.database import Base
from skladito.core.errors import Conflict, StoreError, StoreUnavailable
from skladito.models import Category, Container, ContainerAccess, Item, User

logger = logging.getLogger("skladito.store")

CONTAINERS = "containers"
ITEMS = "items"
CATEGORIES = "categories"
USERS = "users"
CONTAINER_ACCESS = "container_access"

Record = dict[str, Any]
Filter = Mapping[str, Any]

_MODELS: dict[str, type[Base]] = {
    CONTAINERS: Container,
    ITEMS: Item,
    CATEGORIES: Category,
    USERS: User,
    CONTAINER_ACCESS: ContainerAccess,
}


class RecordStore(Protocol):
    def find_many(self, kind: str, filter: Filter | None = None, *, order_by: str | None = None) -> list[Record]: ...

    def find_one(self, kind: str, filter: Filter) -> Record | None: ...

    def insert(self, kind: str, record: Record) -> None: ...

    def update(self, kind: str, record_id: str, fields: Mapping[str, Any]) -> int: ...

    def update_many(self, kind: str, filter: Filter, fields: Mapping[str, Any]) -> int: ...

    def delete_one(self, kind: str, filter: Filter) -> bool: ...

    def delete_many(self, kind: str, filter: Filter) -> int: ...

    def count(self, kind: str, filter: Filter | None = None) -> int: ...


class SqlRecordStore:
    """:class:`RecordStore` over a SQLAlchemy session.

    Filters are equality maps. A list, tuple or set value matches any of its
    members and ``None`` matches SQL NULL. ``order_by`` takes a field name,
    prefixed with ``-`` for descending order. Ties are broken by ``id``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_many(self, kind: str, filter: Filter | None = None, *, order_by: str | None = None) -> list[Record]:
        model = _model_for(kind)
        statement = select(model).where(*_criteria(model, filter))
        if order_by:
            column = getattr(model, order_by.lstrip("-"))
            statement = statement.order_by(column.desc() if order_by.startswith("-") else column.asc())
            if order_by.lstrip("-") != "id":
                statement = statement.order_by(model.id.asc())
        with self._translate_errors(kind):
            rows = self._session.scalars(statement).all()
        return [_to_record(row) for row in rows]

    def find_one(self, kind: str, filter: Filter) -> Record | None:
        model = _model_for(kind)
        statement = select(model).where(*_criteria(model, filter)).limit(1)
        with self._translate_errors(kind):
            row = self._session.scalars(statement).first()
        return _to_record(row) if row is not None else None

    def insert(self, kind: str, record: Record) -> None:
        model = _model_for(kind)
        with self._translate_errors(kind):
            self._session.add(model(**record))
            self._session.commit()

    def update(self, kind: str, record_id: str, fields: Mapping[str, Any]) -> int:
        return self.update_many(kind, {"id": record_id}, fields)

    def update_many(self, kind: str, filter: Filter, fields: Mapping[str, Any]) -> int:
        if not fields:
            return self.count(kind, filter)
        model = _model_for(kind)
        statement = (
            update(model)
            .where(*_criteria(model, filter))
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        with self._translate_errors(kind):
            result = self._session.execute(statement)
            self._session.commit()
        return result.rowcount

    def delete_one(self, kind: str, filter: Filter) -> bool:
        model = _model_for(kind)
        with self._translate_errors(kind):
            row = self._session.scalars(select(model).where(*_criteria(model, filter)).limit(1)).first()
            if row is None:
                return False
            self._session.delete(row)
            self._session.commit()
        return True

    def delete_many(self, kind: str, filter: Filter) -> int:
        model = _model_for(kind)
        statement = delete(model).where(*_criteria(model, filter)).execution_options(synchronize_session=False)
        with self._translate_errors(kind):
            result = self._session.execute(statement)
            self._session.commit()
        return result.rowcount

    def count(self, kind: str, filter: Filter | None = None) -> int:
        model = _model_for(kind)
        statement = select(func.count()).select_from(model).where(*_criteria(model, filter))
        with self._translate_errors(kind):
            return self._session.execute(statement).scalar_one()

    @contextmanager
    def _translate_errors(self, kind: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            self._session.rollback()
            logger.warning("integrity violation on %s: %s", kind, exc.orig)
            raise Conflict(f"Record conflicts with an existing {kind} record") from exc
        except OperationalError as exc:
            self._session.rollback()
            logger.error("record store unavailable while accessing %s: %s", kind, exc.orig)
            raise StoreUnavailable("Record store is unavailable") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception("record store failure on %s", kind)
            raise StoreError("Record store failure") from exc


def _model_for(kind: str) -> type[Base]:
    try:
        return _MODELS[kind]
    except KeyError as exc:
        raise ValueError(f"Unknown record kind: {kind}") from exc


def _criteria(model: type[Base], filter: Filter | None) -> list[Any]:
    clauses = []
    for field, value in (filter or {}).items():
        column = getattr(model, field)
        if value is None:
            clauses.append(column.is_(None))
        elif isinstance(value, Collection) and not isinstance(value, str):
            clauses.append(column.in_(list(value)))
        else:
            clauses.append(column == value)
    return clauses


def _to_record(row: Base) -> Record:
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}
