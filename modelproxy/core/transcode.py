"""Result Transcoder - reshape internal-model results so they present as the public model.

Invariants:
    - Lists and tuples map element-wise: same order, same length, same container kind
    - A structured record becomes a NEW instance of the target model, never of the source
    - strict=True copies only fields named in the schema view; strict=False copies all
    - None and primitives pass through unchanged
    - The raw value is never mutated

Design Decisions:
    - Record extraction is pluggable (extract=...): core stays free of ORM imports, the
      SQLAlchemy schema reporter supplies record_fields for mapped instances
    - Target built as target() + setattr per field: accepts fields the public model does
      not declare (non-strict) without tripping declarative constructors
"""

import dataclasses
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import BaseModel

from modelproxy.core.domain_types import SchemaView

FieldExtractor = Callable[[Any], dict[str, Any] | None]


def transcode(
    raw: Any,
    target: type,
    schema: SchemaView | frozenset[str] | None = None,
    strict: bool = False,
    extract: FieldExtractor | None = None,
) -> Any:
    """Convert raw (record, sequence or primitive) into target-model shape."""
    if strict and schema is None:
        raise ValueError("strict transcoding requires a schema view")
    if isinstance(raw, list):
        return [_transcode_one(item, target, schema, strict, extract) for item in raw]
    if isinstance(raw, tuple):
        return tuple(_transcode_one(item, target, schema, strict, extract) for item in raw)
    return _transcode_one(raw, target, schema, strict, extract)


def _transcode_one(
    raw: Any, target: type, schema, strict: bool, extract: FieldExtractor | None,
) -> Any:
    fields = record_fields(raw, extract)
    if fields is None:
        return raw
    if strict:
        fields = {k: v for k, v in fields.items() if k in schema}
    shaped = target()
    for key, value in fields.items():
        setattr(shaped, key, value)
    return shaped


def record_fields(raw: Any, extract: FieldExtractor | None = None) -> dict[str, Any] | None:
    """Field dict of a structured record, or None for primitives and unknown objects."""
    if raw is None or isinstance(raw, (str, bytes, bytearray, int, float, complex)):
        return None
    if extract is not None:
        fields = extract(raw)
        if fields is not None:
            return dict(fields)
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    if dataclasses.is_dataclass(raw) and not isinstance(raw, type):
        return {f.name: getattr(raw, f.name) for f in dataclasses.fields(raw)}
    return None
