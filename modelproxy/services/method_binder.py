"""Method Binder - install forwarding operations on public models.

Invariants:
    - TYPE operations become static attributes of the public model (shadowing any existing one)
    - RECORD operations become methods; they forward to a fresh reference of the internal
      model addressed by the public record's primary-key values, never to a held internal
      object. The reference also carries the record's loaded values for internal fields
    - Internal operations are looked up by name at call time, not at bind time
    - Results pass through transcode(); failures skip shaping and surface unchanged
    - Bindings installed in declared order: a later descriptor with the same name wins
    - A ResolutionFailure installs stubs that fail every call with ConfigurationError
    - Record-level forwarding needs public and internal primary keys of equal arity;
      bind() raises ValueError otherwise, before installing anything

Design Decisions:
    - Schema view read once per binding, and only for strict configs
    - Wrappers carry __proxy_target__ ("Internal.path") for introspection
"""

import functools
import logging
from typing import Any, Callable

from modelproxy.core.domain_types import (
    OperationDescriptor, OperationScope, ProxyState,
    ResolutionFailure, ResolvedProxy, SchemaView,
)
from modelproxy.core.errors import ConfigurationError, ErrorContext
from modelproxy.core.model_protocols import SchemaReporter
from modelproxy.core.transcode import transcode
from modelproxy.services.invocation_adapter import invoke

logger = logging.getLogger(__name__)


def bind(
    outcome: ResolvedProxy | ResolutionFailure, reporter: SchemaReporter,
) -> ProxyState:
    """Install forwarding operations (or failing stubs) for one resolution outcome."""
    if isinstance(outcome, ResolutionFailure):
        for descriptor in outcome.config.operations:
            _install(outcome.config.public_type, descriptor, _failing_stub(outcome, descriptor))
        return ProxyState.FAILING

    config = outcome.config
    shape = _shaper(outcome, reporter)
    if any(d.scope is OperationScope.RECORD for d in config.operations):
        _check_key_arity(outcome, reporter)
    for descriptor in config.operations:
        if descriptor.scope is OperationScope.RECORD:
            wrapper = _record_forwarder(outcome, descriptor, shape, reporter)
        else:
            wrapper = _type_forwarder(outcome, descriptor, shape)
        _install(config.public_type, descriptor, wrapper)
        logger.info(
            f"Proxied {config.public_type_name}.{descriptor.path} -> "
            f"{config.internal_type_name}.{descriptor.path}",
            extra=_log_extra(outcome, descriptor),
        )
    return ProxyState.ACTIVE


def _shaper(resolved: ResolvedProxy, reporter: SchemaReporter) -> Callable[[Any], Any]:
    config = resolved.config
    schema = None
    if config.strict:
        schema = SchemaView(reporter.field_names(config.public_type))
    return functools.partial(
        transcode,
        target=config.public_type,
        schema=schema,
        strict=config.strict,
        extract=reporter.record_fields,
    )


def _type_forwarder(
    resolved: ResolvedProxy, descriptor: OperationDescriptor, shape: Callable,
) -> Callable:
    internal, name = resolved.internal_type, descriptor.name

    def call(*args: Any, **kwargs: Any) -> Any:
        return getattr(internal, name)(*args, **kwargs)

    def forward(*args: Any, **kwargs: Any):
        logger.debug(
            f"Forwarding {descriptor.path} to {resolved.config.internal_type_name}",
            extra=_log_extra(resolved, descriptor),
        )
        return invoke(call, args, kwargs, transform=shape)

    return _label(forward, resolved, descriptor)


def _record_forwarder(
    resolved: ResolvedProxy,
    descriptor: OperationDescriptor,
    shape: Callable,
    reporter: SchemaReporter,
) -> Callable:
    internal, name = resolved.internal_type, descriptor.name
    public = resolved.config.public_type

    def forward(record: Any, *args: Any, **kwargs: Any):
        def call(*call_args: Any, **call_kwargs: Any) -> Any:
            reference = internal_reference(record, public, internal, reporter)
            return getattr(reference, name)(*call_args, **call_kwargs)

        logger.debug(
            f"Forwarding {descriptor.path} to {resolved.config.internal_type_name}",
            extra=_log_extra(resolved, descriptor),
        )
        return invoke(call, args, kwargs, transform=shape)

    return _label(forward, resolved, descriptor)


def internal_reference(
    record: Any, public: type, internal: type, reporter: SchemaReporter,
) -> Any:
    """Internal-model instance addressed by the public record's identifier.

    Carries the identifier plus the public record's loaded values for fields the
    internal model declares, so record-level writes see the values set on the record.
    """
    declared = reporter.field_names(internal)
    loaded = {
        key: value for key, value in vars(record).items()
        if not key.startswith("_")
    }
    loaded.update(reporter.record_fields(record) or {})
    reference = internal()
    for key, value in loaded.items():
        if key in declared:
            setattr(reference, key, value)
    values = [getattr(record, key, None) for key in reporter.primary_key(public)]
    for key, value in zip(reporter.primary_key(internal), values, strict=True):
        setattr(reference, key, value)
    return reference


def _check_key_arity(resolved: ResolvedProxy, reporter: SchemaReporter) -> None:
    public_key = reporter.primary_key(resolved.config.public_type)
    internal_key = reporter.primary_key(resolved.internal_type)
    if len(public_key) != len(internal_key):
        raise ValueError(
            f"primary key {public_key!r} of {resolved.config.public_type_name} does not "
            f"match {internal_key!r} of {resolved.config.internal_type_name}",
        )


def _failing_stub(failure: ResolutionFailure, descriptor: OperationDescriptor) -> Callable:
    config = failure.config

    def fail(*args: Any, **kwargs: Any) -> Any:
        raise ConfigurationError(
            failure.missing_name,
            context=ErrorContext(
                public_type=config.public_type_name,
                internal_type=failure.missing_name,
                operation=descriptor.path,
            ),
            reason=failure.reason,
        )

    def stub(*args: Any, **kwargs: Any):
        return invoke(fail, args, kwargs)

    return _label(stub, failure, descriptor)


def _install(public: type, descriptor: OperationDescriptor, wrapper: Callable) -> None:
    if descriptor.scope is OperationScope.TYPE:
        setattr(public, descriptor.name, staticmethod(wrapper))
    else:
        setattr(public, descriptor.name, wrapper)


def _label(
    wrapper: Callable,
    outcome: ResolvedProxy | ResolutionFailure,
    descriptor: OperationDescriptor,
) -> Callable:
    config = outcome.config
    wrapper.__name__ = descriptor.name
    wrapper.__qualname__ = f"{config.public_type.__qualname__}.{descriptor.name}"
    wrapper.__doc__ = f"Proxied to {config.internal_type_name}.{descriptor.path}."
    wrapper.__proxy_target__ = f"{config.internal_type_name}.{descriptor.path}"
    return wrapper


def _log_extra(outcome: ResolvedProxy | ResolutionFailure, descriptor: OperationDescriptor) -> dict:
    return {
        "public_type": outcome.config.public_type_name,
        "internal_type": outcome.config.internal_type_name,
        "operation": descriptor.name,
        "scope": descriptor.scope.value,
    }
