"""SQLAlchemy Schema Reporter - verifies field, key and record extraction."""

import pytest

from modelproxy.infrastructure.sqlalchemy_schema import SqlAlchemySchemaReporter

reporter = SqlAlchemySchemaReporter()


async def test_field_names_are_column_keys(models):
    assert reporter.field_names(models.Internal) == {"id", "secret", "prop"}
    assert reporter.field_names(models.StrictExternal) == {"id", "prop"}


async def test_primary_key(models):
    assert reporter.primary_key(models.Internal) == ("id",)


def test_unmapped_class_rejected():
    with pytest.raises(TypeError):
        reporter.field_names(dict)


async def test_record_fields_skip_unloaded_and_bookkeeping(models):
    record = models.Internal()
    record.id = 3
    assert reporter.record_fields(record) == {"id": 3}


async def test_record_fields_none_for_non_records(models):
    assert reporter.record_fields({"id": 1}) is None
    assert reporter.record_fields(models.Internal) is None
    assert reporter.record_fields(5) is None
