"""Proxy Registry - two-phase registration and resolution of proxy configurations.

Invariants:
    - register() never fails and never resolves: it stores the config and returns a handle
    - finalize(lookup) resolves every stored config exactly once per call, in registration
      order, to either a ResolvedProxy or a ResolutionFailure (never a partial state)
    - Failed resolutions are never retried implicitly
    - Handles follow REGISTERED -> RESOLVED -> ACTIVE or REGISTERED -> UNRESOLVED -> FAILING;
      a RESOLVED config that cannot be bound goes to FAILING instead
    - bind() only touches RESOLVED and UNRESOLVED handles: a repeated bind() is a no-op
    - Configs registered after finalize stay REGISTERED and are logged

Design Decisions:
    - One ProxyContext per process (or per test) passed explicitly; reset() for isolation
    - attach(registry) ties finalize + bind to the model registry's boot signal
"""

import logging
from dataclasses import dataclass

from modelproxy.core.domain_types import (
    ProxyConfig, ProxyState, ResolutionFailure, ResolvedProxy,
)
from modelproxy.core.model_protocols import ModelLookup, SchemaReporter, TypeRegistry
from modelproxy.infrastructure.sqlalchemy_schema import SqlAlchemySchemaReporter
from modelproxy.schemas.proxy_options import ProxyOptions
from modelproxy.services import method_binder

logger = logging.getLogger(__name__)

Outcome = ResolvedProxy | ResolutionFailure


@dataclass
class ProxyHandle:
    """Registry-owned record of one config and its lifecycle state."""
    config: ProxyConfig
    state: ProxyState = ProxyState.REGISTERED
    outcome: Outcome | None = None


class ProxyContext:
    """Holds proxy configurations from composition time until process end."""

    def __init__(self, reporter: SchemaReporter | None = None):
        self._reporter = reporter or SqlAlchemySchemaReporter()
        self._handles: list[ProxyHandle] = []
        self._finalized = False

    @property
    def handles(self) -> tuple[ProxyHandle, ...]:
        return tuple(self._handles)

    def handles_for(self, public_type: type) -> list[ProxyHandle]:
        return [h for h in self._handles if h.config.public_type is public_type]

    def register(self, config: ProxyConfig) -> ProxyHandle:
        handle = ProxyHandle(config)
        self._handles.append(handle)
        if self._finalized:
            logger.warning(
                f"Proxy for {config.public_type_name} registered after finalize; "
                "it will not be resolved",
                extra={"public_type": config.public_type_name},
            )
        return handle

    def proxy(
        self,
        public_type: type | None = None,
        *,
        proxy_for: str,
        proxy_methods: tuple[str, ...] | list[str] = (),
        strict: bool = False,
    ):
        """Register public_type as a proxy for the model named proxy_for.

        Called without public_type, returns a class decorator.
        """
        options = ProxyOptions(
            proxy_for=proxy_for, proxy_methods=proxy_methods, strict=strict,
        )

        def decorate(cls: type) -> type:
            self.register(options.to_config(cls))
            return cls

        if public_type is None:
            return decorate
        return decorate(public_type)

    def finalize(self, lookup: ModelLookup) -> list[Outcome]:
        """Resolve every stored internal model name through lookup."""
        if self._finalized:
            logger.warning("Proxy registry finalized more than once")
        self._finalized = True
        outcomes: list[Outcome] = []
        for handle in self._handles:
            config = handle.config
            internal = lookup(config.internal_type_name)
            if internal is None:
                handle.outcome = ResolutionFailure(config)
                handle.state = ProxyState.UNRESOLVED
                logger.error(
                    f"Proxy target {config.internal_type_name!r} for "
                    f"{config.public_type_name} could not be resolved",
                    extra={
                        "public_type": config.public_type_name,
                        "internal_type": config.internal_type_name,
                        "error_code": "PROXY_TARGET_UNRESOLVED",
                    },
                )
            else:
                handle.outcome = ResolvedProxy(config, internal)
                handle.state = ProxyState.RESOLVED
            outcomes.append(handle.outcome)
        return outcomes

    def bind(self) -> None:
        """Install wrappers for every freshly finalized config, in registration order.

        Handles already ACTIVE or FAILING are left as bound. A config the schema
        reporter cannot bind becomes FAILING on its own; the others still bind.
        """
        for handle in self._handles:
            if handle.state not in (ProxyState.RESOLVED, ProxyState.UNRESOLVED):
                continue
            try:
                handle.state = method_binder.bind(handle.outcome, self._reporter)
            except (TypeError, ValueError) as e:
                config = handle.config
                logger.error(
                    f"Proxy for {config.public_type_name} could not be bound: {e}",
                    extra={
                        "public_type": config.public_type_name,
                        "internal_type": config.internal_type_name,
                        "error_code": "PROXY_BIND_FAILED",
                    },
                )
                handle.outcome = ResolutionFailure(config, reason=str(e))
                handle.state = method_binder.bind(handle.outcome, self._reporter)

    def boot(self, lookup: ModelLookup) -> list[Outcome]:
        outcomes = self.finalize(lookup)
        self.bind()
        return outcomes

    def attach(self, registry: TypeRegistry) -> None:
        """Run boot(registry.lookup) when the registry fires its boot signal."""
        registry.on_boot(lambda booted: self.boot(booted.lookup))

    def reset(self) -> None:
        """Forget every config. Installed wrappers stay on their classes."""
        self._handles.clear()
        self._finalized = False
