"""Service test fixtures - proxy context, model registry and callback capture."""

import asyncio

import pytest

from modelproxy.services.model_registry import ModelRegistry
from modelproxy.services.proxy_registry import ProxyContext


@pytest.fixture
def context():
    ctx = ProxyContext()
    yield ctx
    ctx.reset()


@pytest.fixture
def registry(context):
    """Model registry whose boot signal finalizes and binds `context`."""
    reg = ModelRegistry()
    context.attach(reg)
    return reg


@pytest.fixture
def callback_result():
    """Returns (callback, future): the future resolves to the (error, value) pair."""
    def make():
        future = asyncio.get_running_loop().create_future()

        def callback(error, value):
            future.set_result((error, value))

        return callback, future

    return make


class FieldsReporter:
    """SchemaReporter for plain classes: fields from a FIELDS class attribute, key "id"."""

    def field_names(self, model):
        return frozenset(getattr(model, "FIELDS", ()))

    def primary_key(self, model):
        return ("id",)

    def record_fields(self, record):
        if isinstance(record, type) or not hasattr(type(record), "FIELDS"):
            return None
        return {k: getattr(record, k) for k in type(record).FIELDS if hasattr(record, k)}


@pytest.fixture
def reporter():
    return FieldsReporter()
