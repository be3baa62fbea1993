"""Boundary operations against the persistent store.

Every core component talks to the database through :class:`Store`, which
exposes the six operations the core relies on (select-all-with-filter,
select-by-id, insert, update-by-filter, delete-by-filter and
upsert-on-conflict-key) plus a row count. Any SQLAlchemy failure is rolled
back and re-raised as :class:`PersistenceError`; nothing is retried.

Writes invalidate the per-user read-through cache for the table they touch.
"""
from typing import Any, Dict, List, Optional, Sequence, Type
import logging

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select, func

from exceptions import PersistenceError
from utils.cache import QueryCache, query_cache

logger = logging.getLogger(__name__)


def kind_of(model: Type[SQLModel]) -> str:
    return model.__tablename__


class Store:
    def __init__(self, session: Session, cache: Optional[QueryCache] = None):
        self.session = session
        self.cache = cache if cache is not None else query_cache

    def _fail(self, operation: str, model: Type[SQLModel], error: SQLAlchemyError) -> PersistenceError:
        self.session.rollback()
        logger.error(f"Store {operation} on {kind_of(model)} failed: {error}")
        return PersistenceError(f"Could not {operation} {kind_of(model)}")

    def _written(self, model: Type[SQLModel]) -> None:
        self.cache.invalidate(kind_of(model))

    # ---------- reads ----------

    def select_all(
        self,
        model: Type[SQLModel],
        *filters,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
    ) -> List[Any]:
        statement = select(model).where(*filters)
        if order_by:
            statement = statement.order_by(*order_by)
        if limit is not None:
            statement = statement.limit(limit)
        return self.select_rows(model, statement)

    def select_rows(self, model: Type[SQLModel], statement) -> List[Any]:
        """Run a prepared select (joins included) against the store"""
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise self._fail("read", model, e) from e

    def select_by_id(self, model: Type[SQLModel], record_id: Any) -> Optional[Any]:
        """Returns None when no row has this id"""
        try:
            return self.session.get(model, record_id)
        except SQLAlchemyError as e:
            raise self._fail("read", model, e) from e

    def count(self, model: Type[SQLModel], *filters) -> int:
        try:
            return self.session.exec(
                select(func.count()).select_from(model).where(*filters)
            ).one()
        except SQLAlchemyError as e:
            raise self._fail("count", model, e) from e

    # ---------- writes ----------

    def insert(self, record: SQLModel) -> SQLModel:
        model = type(record)
        try:
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        except SQLAlchemyError as e:
            raise self._fail("insert", model, e) from e
        self._written(model)
        return record

    def update_where(self, model: Type[SQLModel], filters: Sequence[Any], values: Dict[str, Any]) -> int:
        """Returns the number of rows changed"""
        statement = update(model).where(*filters).values(**values)
        try:
            result = self.session.connection().execute(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("update", model, e) from e
        self._written(model)
        return result.rowcount

    def delete_where(self, model: Type[SQLModel], filters: Sequence[Any]) -> int:
        """Returns the number of rows removed; zero is not an error"""
        statement = delete(model).where(*filters)
        try:
            result = self.session.connection().execute(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", model, e) from e
        self._written(model)
        return result.rowcount

    def upsert(
        self,
        model: Type[SQLModel],
        values: Dict[str, Any],
        conflict_keys: Sequence[str],
        update_set: Dict[str, Any],
    ) -> None:
        """Insert `values`, or apply `update_set` to the row sharing `conflict_keys`"""
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise PersistenceError(f"Upsert is not supported on {dialect}")

        statement = insert(model).values(**values).on_conflict_do_update(
            index_elements=list(conflict_keys),
            set_=update_set,
        )
        try:
            self.session.connection().execute(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("upsert", model, e) from e
        self._written(model)
