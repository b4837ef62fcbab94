"""Domain Types - proxy configuration, operation descriptors and resolution outcomes.

Invariants:
    - ProxyConfig and OperationDescriptor are frozen: immutable once built
    - "prototype.<name>" parses to RECORD scope; a bare "<name>" parses to TYPE scope
    - ResolvedProxy exists only for configs whose internal model name resolved at boot;
      every other config yields a ResolutionFailure (never a partial state)
    - SchemaView is read-only: a frozenset of declared public field names

Design Decisions:
    - Descriptors parsed once at registration, never at call time
    - str Enums: states and scopes log as plain strings
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NewType

RECORD_PREFIX = "prototype."


# ─── Value Types ─────────────────────────────────────────────────

SchemaView = NewType("SchemaView", frozenset)


# ─── Enums ───────────────────────────────────────────────────────

class OperationScope(str, Enum):
    """Where a proxied operation lives on the public model."""
    TYPE = "type"
    RECORD = "record"


class ProxyState(str, Enum):
    """Per-config lifecycle: REGISTERED -> RESOLVED -> ACTIVE, or UNRESOLVED -> FAILING."""
    REGISTERED = "registered"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    ACTIVE = "active"
    FAILING = "failing"


# ─── Configuration ───────────────────────────────────────────────

@dataclass(frozen=True)
class OperationDescriptor:
    """One proxied operation: its scope and its name on both models."""
    scope: OperationScope
    name: str

    @classmethod
    def parse(cls, path: str) -> "OperationDescriptor":
        """Parse "name" or "prototype.name" into a descriptor."""
        if path.startswith(RECORD_PREFIX):
            scope, name = OperationScope.RECORD, path[len(RECORD_PREFIX):]
        else:
            scope, name = OperationScope.TYPE, path
        if not name.isidentifier():
            raise ValueError(f"invalid proxy method path: {path!r}")
        return cls(scope, name)

    @property
    def path(self) -> str:
        if self.scope is OperationScope.RECORD:
            return f"{RECORD_PREFIX}{self.name}"
        return self.name


@dataclass(frozen=True)
class ProxyConfig:
    """Binding of one public model to one internal model name."""
    public_type: type
    internal_type_name: str
    operations: tuple[OperationDescriptor, ...] = ()
    strict: bool = False

    @property
    def public_type_name(self) -> str:
        return self.public_type.__name__


# ─── Resolution Outcomes ─────────────────────────────────────────

@dataclass(frozen=True)
class ResolvedProxy:
    """Config whose internal model resolved at boot. Consulted at call time."""
    config: ProxyConfig
    internal_type: Any


@dataclass(frozen=True)
class ResolutionFailure:
    """Config that cannot be proxied: target name not found at boot, or not bindable."""
    config: ProxyConfig
    reason: str | None = None

    @property
    def missing_name(self) -> str:
        return self.config.internal_type_name
