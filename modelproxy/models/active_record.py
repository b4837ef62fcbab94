"""Active Record Mixin - dual-convention CRUD operations for declarative models.

Invariants:
    - Every operation accepts a trailing (error, value) callback or returns an awaitable
    - Type-level operations are classmethods; record-level operations are methods
    - Record-level operations locate their row by primary key on every call; save()
      writes only the fields set on the record and leaves the others as stored
    - find_by_id returns None for a missing id; record-level operations raise
      RecordNotFoundError when their row is gone
    - Unknown field names raise ValueError before any write

Design Decisions:
    - One DataSource per model class via attach_to(): models sharing a store share it
    - Each operation opens and closes its own session; returned records are detached
"""

import logging
from typing import Any

from sqlalchemy import delete, func, select

from modelproxy.core.errors import RecordNotFoundError
from modelproxy.infrastructure.database import DataSource
from modelproxy.infrastructure.sqlalchemy_schema import SqlAlchemySchemaReporter
from modelproxy.services.invocation_adapter import operation

logger = logging.getLogger(__name__)

_schema = SqlAlchemySchemaReporter()


class ActiveRecord:
    """Mixin adding CRUD operations to a mapped model. Combine with Base."""

    __datasource__ = None

    # ─── Wiring ──────────────────────────────────────────────────

    @classmethod
    def attach_to(cls, datasource: DataSource) -> None:
        cls.__datasource__ = datasource

    @classmethod
    def _datasource(cls) -> DataSource:
        if cls.__datasource__ is None:
            raise RuntimeError(f"{cls.__name__} is not attached to a data source")
        return cls.__datasource__

    @classmethod
    def _check_fields(cls, values: dict[str, Any]) -> None:
        unknown = set(values) - _schema.field_names(cls)
        if unknown:
            raise ValueError(
                f"{cls.__name__} has no field(s): {', '.join(sorted(unknown))}",
            )

    def _identity(self) -> Any:
        keys = _schema.primary_key(type(self))
        values = tuple(getattr(self, key, None) for key in keys)
        return values[0] if len(values) == 1 else values

    def _absorb(self, row: "ActiveRecord") -> None:
        for key in _schema.field_names(type(self)):
            setattr(self, key, getattr(row, key))

    def to_dict(self) -> dict[str, Any]:
        return _schema.record_fields(self) or {}

    # ─── Type-level Operations ───────────────────────────────────

    @classmethod
    @operation
    async def create(cls, data: dict | None = None, **fields: Any):
        """Insert a record and return it with generated values loaded."""
        values = {**(data or {}), **fields}
        cls._check_fields(values)
        record = cls(**values)
        async with cls._datasource().session() as db:
            db.add(record)
            await db.commit()
            await db.refresh(record)
        logger.debug(f"Created {cls.__name__} {record._identity()!r}")
        return record

    @classmethod
    @operation
    async def find(cls, where: dict | None = None, limit: int | None = None):
        """Records matching equality filters, ordered by primary key."""
        where = where or {}
        cls._check_fields(where)
        stmt = select(cls).filter_by(**where)
        for key in _schema.primary_key(cls):
            stmt = stmt.order_by(getattr(cls, key))
        if limit is not None:
            stmt = stmt.limit(limit)
        async with cls._datasource().session() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    @classmethod
    @operation
    async def find_by_id(cls, record_id: Any):
        async with cls._datasource().session() as db:
            return await db.get(cls, record_id)

    @classmethod
    @operation
    async def count(cls, where: dict | None = None):
        where = where or {}
        cls._check_fields(where)
        stmt = select(func.count()).select_from(cls).filter_by(**where)
        async with cls._datasource().session() as db:
            return (await db.execute(stmt)).scalar_one()

    @classmethod
    @operation
    async def destroy_by_id(cls, record_id: Any):
        """Delete by primary key; returns the number of rows removed (0 or 1)."""
        (key,) = _schema.primary_key(cls)
        stmt = delete(cls).where(getattr(cls, key) == record_id)
        async with cls._datasource().session() as db:
            result = await db.execute(stmt)
            await db.commit()
            return result.rowcount

    # ─── Record-level Operations ─────────────────────────────────

    @operation
    async def update_attributes(self, data: dict | None = None, **fields: Any):
        """Apply values to the stored row sharing this record's identifier."""
        values = {**(data or {}), **fields}
        model = type(self)
        model._check_fields(values)
        record_id = self._identity()
        async with model._datasource().session() as db:
            row = await db.get(model, record_id)
            if row is None:
                raise RecordNotFoundError(model.__name__, record_id)
            for key, value in values.items():
                setattr(row, key, value)
            await db.commit()
            await db.refresh(row)
        self._absorb(row)
        return self

    @operation
    async def save(self):
        """Insert or overwrite the stored row with this record's field values."""
        model = type(self)
        async with model._datasource().session() as db:
            row = await db.merge(self)
            await db.commit()
            await db.refresh(row)
        self._absorb(row)
        return self

    @operation
    async def reload(self):
        model = type(self)
        record_id = self._identity()
        async with model._datasource().session() as db:
            row = await db.get(model, record_id, populate_existing=True)
            if row is None:
                raise RecordNotFoundError(model.__name__, record_id)
        self._absorb(row)
        return self

    @operation
    async def destroy(self):
        model = type(self)
        record_id = self._identity()
        async with model._datasource().session() as db:
            row = await db.get(model, record_id)
            if row is None:
                raise RecordNotFoundError(model.__name__, record_id)
            await db.delete(row)
            await db.commit()
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.to_dict()!r}>"
