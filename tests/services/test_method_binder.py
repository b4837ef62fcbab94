"""Method Binder - verifies forwarding wrappers on plain (non-ORM) model classes.

Tests cover:
    - TYPE operations installed on the public class, shadowing existing ones
    - RECORD operations forward by identifier to a fresh internal reference that also
      carries the record's values for fields the internal model declares
    - Record-level bindings need primary keys of equal arity on both models
    - Internal operations resolved by name at call time
    - Strict and non-strict shaping of forwarded results
    - Later descriptors for the same name overwrite earlier ones
    - ResolutionFailure stubs fail with ConfigurationError in both conventions

Design Decisions:
    - In-memory internal model with a class-level dict store keyed by id: the binder is
      exercised without a database through the FieldsReporter fixture
"""

import pytest

from modelproxy.core.domain_types import (
    OperationDescriptor, ProxyConfig, ProxyState, ResolutionFailure, ResolvedProxy,
)
from modelproxy.core.errors import ConfigurationError
from modelproxy.services.invocation_adapter import operation
from modelproxy.services.method_binder import bind, internal_reference


def make_models():
    class Internal:
        FIELDS = ("id", "secret", "prop")
        store: dict = {}
        references: list = []

        def __init__(self, **values):
            for k, v in values.items():
                setattr(self, k, v)
            Internal.references.append(self)

        @classmethod
        @operation
        async def find_by_id(cls, record_id):
            row = cls.store.get(record_id)
            return cls(**row) if row else None

        @classmethod
        @operation
        async def find(cls):
            return [cls(**row) for _, row in sorted(cls.store.items())]

        @classmethod
        async def fail(cls):
            raise LookupError("Error from the internal model")

        @operation
        async def update_attributes(self, data):
            self.store[self.id].update(data)
            for k, v in self.store[self.id].items():
                setattr(self, k, v)
            return self

    class Public:
        FIELDS = ("id", "prop")

        def __init__(self, **values):
            for k, v in values.items():
                setattr(self, k, v)

        @staticmethod
        def find_by_id(record_id):
            return "original"

    Internal.store = {1: {"id": 1, "secret": "x", "prop": "hello"}}
    return Internal, Public


def resolved(public, internal, *paths, strict=False):
    ops = tuple(OperationDescriptor.parse(p) for p in paths)
    return ResolvedProxy(ProxyConfig(public, "Internal", ops, strict), internal)


async def test_type_operation_shadows_existing(reporter):
    Internal, Public = make_models()
    assert Public.find_by_id(1) == "original"

    state = bind(resolved(Public, Internal, "find_by_id"), reporter)

    assert state is ProxyState.ACTIVE
    result = await Public.find_by_id(1)
    assert isinstance(result, Public)
    assert result.prop == "hello"
    assert result.secret == "x"


async def test_strict_type_operation_filters_fields(reporter):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "find_by_id", strict=True), reporter)

    result = await Public.find_by_id(1)
    assert result.prop == "hello"
    assert not hasattr(result, "secret")


async def test_missing_record_passes_through_as_none(reporter):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "find_by_id"), reporter)
    assert await Public.find_by_id(99) is None


async def test_sequence_results_keep_order(reporter):
    Internal, Public = make_models()
    Internal.store[2] = {"id": 2, "secret": "y", "prop": "second"}
    bind(resolved(Public, Internal, "find", strict=True), reporter)

    results = await Public.find()
    assert [r.prop for r in results] == ["hello", "second"]
    assert all(isinstance(r, Public) for r in results)


async def test_record_operation_forwards_by_identifier(reporter):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "prototype.update_attributes"), reporter)

    public_record = Public(id=1)
    Internal.references.clear()
    updated = await public_record.update_attributes({"prop": "goodbye"})

    assert Internal.store[1]["prop"] == "goodbye"
    assert isinstance(updated, Public)
    assert updated.prop == "goodbye"
    (reference,) = Internal.references
    assert vars(reference)["id"] == 1


async def test_record_operation_callback_convention(reporter, callback_result):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "prototype.update_attributes", strict=True), reporter)

    cb, future = callback_result()
    await Public(id=1).update_attributes({"prop": "hi"}, cb)
    error, value = await future
    assert error is None
    assert value.prop == "hi"
    assert not hasattr(value, "secret")


async def test_internal_reference_carries_identifier_and_loaded_fields(reporter):
    Internal, Public = make_models()
    reference = internal_reference(Public(id=1, prop="p"), Public, Internal, reporter)
    assert isinstance(reference, Internal)
    assert vars(reference) == {"id": 1, "prop": "p"}


async def test_internal_reference_skips_fields_internal_does_not_declare(reporter):
    Internal, Public = make_models()
    record = Public(id=1, prop="p", extra="dropped", _private="dropped")
    reference = internal_reference(record, Public, Internal, reporter)
    assert vars(reference) == {"id": 1, "prop": "p"}


async def test_internal_reference_maps_keys_positionally(reporter):
    class KeyedReporter(type(reporter)):
        def primary_key(self, model):
            return ("ref",) if model.__name__ == "Internal" else ("id",)

    Internal, Public = make_models()
    Internal.FIELDS = ("ref", "prop")
    reference = internal_reference(Public(id=3, prop="p"), Public, Internal, KeyedReporter())
    assert vars(reference) == {"prop": "p", "ref": 3}


async def test_record_operation_sees_values_set_on_record(reporter):
    Internal, Public = make_models()

    @operation
    async def persist(self):
        self.store[self.id] = {**self.store.get(self.id, {}), **vars(self)}
        return self

    Internal.persist = persist
    bind(resolved(Public, Internal, "prototype.persist", strict=True), reporter)

    await Public(id=1, prop="changed").persist()
    assert Internal.store[1] == {"id": 1, "secret": "x", "prop": "changed"}

    await Public(id=7, prop="fresh").persist()
    assert Internal.store[7] == {"id": 7, "prop": "fresh"}


def test_mismatched_key_arity_rejected_before_install(reporter):
    class CompositeReporter(type(reporter)):
        def primary_key(self, model):
            return ("id", "prop") if model.__name__ == "Internal" else ("id",)

    Internal, Public = make_models()
    with pytest.raises(ValueError, match="primary key"):
        bind(resolved(Public, Internal, "prototype.update_attributes"), CompositeReporter())
    assert not hasattr(Public, "update_attributes")


async def test_mismatched_key_arity_allowed_for_type_operations(reporter):
    class CompositeReporter(type(reporter)):
        def primary_key(self, model):
            return ("id", "prop") if model.__name__ == "Internal" else ("id",)

    Internal, Public = make_models()
    state = bind(resolved(Public, Internal, "find_by_id"), CompositeReporter())
    assert state is ProxyState.ACTIVE
    assert (await Public.find_by_id(1)).prop == "hello"


async def test_operation_resolved_at_call_time(reporter):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "added_later"), reporter)

    async def added_later():
        return 7

    Internal.added_later = staticmethod(added_later)
    assert await Public.added_later() == 7


async def test_missing_operation_fails_at_call_time(reporter):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "no_such_method"), reporter)
    with pytest.raises(AttributeError):
        await Public.no_such_method()


async def test_forwarded_error_identical_in_both_conventions(reporter, callback_result):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "fail"), reporter)

    with pytest.raises(LookupError) as info:
        await Public.fail()

    cb, future = callback_result()
    await Public.fail(cb)
    error, value = await future

    assert type(error) is LookupError
    assert str(error) == str(info.value) == "Error from the internal model"
    assert value is None


async def test_later_descriptor_for_same_name_wins(reporter):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "prototype.find_by_id", "find_by_id"), reporter)
    assert isinstance(Public.__dict__["find_by_id"], staticmethod)


def test_wrappers_are_labelled(reporter):
    Internal, Public = make_models()
    bind(resolved(Public, Internal, "find_by_id", "prototype.update_attributes"), reporter)
    assert Public.find_by_id.__proxy_target__ == "Internal.find_by_id"
    assert Public.update_attributes.__proxy_target__ == "Internal.prototype.update_attributes"
    assert Public.update_attributes.__name__ == "update_attributes"


async def test_unresolved_config_installs_failing_stubs(reporter, callback_result):
    _, Public = make_models()
    ops = tuple(OperationDescriptor.parse(p) for p in ("find_by_id", "prototype.reload"))
    failure = ResolutionFailure(ProxyConfig(Public, "Ghost", ops))

    assert bind(failure, reporter) is ProxyState.FAILING

    with pytest.raises(ConfigurationError) as info:
        await Public.find_by_id(1)
    assert info.value.context.operation == "find_by_id"

    cb, future = callback_result()
    await Public(id=1).reload(cb)
    error, value = await future
    assert isinstance(error, ConfigurationError)
    assert error.internal_type_name == "Ghost"
    assert value is None


async def test_failing_stubs_fail_every_call(reporter):
    _, Public = make_models()
    ops = (OperationDescriptor.parse("find_by_id"),)
    bind(ResolutionFailure(ProxyConfig(Public, "Ghost", ops)), reporter)
    for _ in range(3):
        with pytest.raises(ConfigurationError):
            await Public.find_by_id(1)


async def test_failing_stub_reports_bind_reason(reporter):
    _, Public = make_models()
    ops = (OperationDescriptor.parse("find_by_id"),)
    bind(ResolutionFailure(ProxyConfig(Public, "Internal", ops), reason="no schema"), reporter)
    with pytest.raises(ConfigurationError, match="could not be bound: no schema") as info:
        await Public.find_by_id(1)
    assert info.value.reason == "no schema"
