"""Collaborator Protocols - contracts between the proxy layer and the model layer.

Invariants:
    - Proxy code never imports a concrete model layer: dependency arrows point inward
    - Model lookup is a plain callable: name -> model class, or None when unknown
    - Schema reporters are read-only: they describe models, never mutate them

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Implementations provided by infrastructure/ and services/ via injection
"""

from typing import Any, Callable, Protocol

ModelLookup = Callable[[str], Any]


class SchemaReporter(Protocol):
    """Contract for describing a model's declared fields and identifier."""
    def field_names(self, model: type) -> frozenset[str]: ...
    def primary_key(self, model: type) -> tuple[str, ...]: ...
    def record_fields(self, record: Any) -> dict[str, Any] | None: ...


class TypeRegistry(Protocol):
    """Contract for a name -> model registry that fires a boot signal."""
    def lookup(self, name: str) -> Any: ...
    def on_boot(self, hook: Callable[["TypeRegistry"], None]) -> None: ...
