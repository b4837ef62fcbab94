"""SQLAlchemy Schema Reporter - declared fields and identifiers of mapped models.

Invariants:
    - Declared fields are the mapper's column attribute keys (relationships excluded)
    - record_fields() returns None for anything that is not a mapped instance
    - Never reads or copies ORM bookkeeping state (_sa_instance_state)
"""

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Mapper


class SqlAlchemySchemaReporter:
    """SchemaReporter backed by SQLAlchemy mapper inspection."""

    def field_names(self, model: type) -> frozenset[str]:
        return frozenset(attr.key for attr in _mapper(model).column_attrs)

    def primary_key(self, model: type) -> tuple[str, ...]:
        mapper = _mapper(model)
        return tuple(
            mapper.get_property_by_column(column).key
            for column in mapper.primary_key
        )

    def record_fields(self, record: Any) -> dict[str, Any] | None:
        if isinstance(record, type):
            return None
        state = inspect(record, raiseerr=False)
        if state is None or not hasattr(state, "mapper"):
            return None
        # Unloaded (expired or deferred) attributes are skipped, not lazy-loaded.
        return {
            attr.key: getattr(record, attr.key)
            for attr in state.mapper.column_attrs
            if attr.key not in state.unloaded
        }


def _mapper(model: type) -> Mapper:
    try:
        return inspect(model)
    except NoInspectionAvailable as e:
        raise TypeError(f"{model!r} is not a mapped model class") from e
