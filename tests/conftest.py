"""Root conftest - shared test configuration and backing-store fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every test gets its own declarative base, so model classes (and the proxy
      wrappers installed on them) never leak between tests
"""

import os
from types import SimpleNamespace

import pytest
from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from modelproxy.infrastructure.database import DataSource
from modelproxy.models.active_record import ActiveRecord

os.environ.setdefault("MODELPROXY_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def datasource():
    ds = DataSource("sqlite+aiosqlite:///:memory:")
    yield ds
    await ds.dispose()


@pytest.fixture
async def models(datasource):
    """Internal model plus two public models, tables created and attached.

    - Internal: id, secret, prop
    - External: id only (non-strict public view)
    - StrictExternal: id, prop (strict public view)
    """
    class TestBase(DeclarativeBase):
        pass

    class Internal(ActiveRecord, TestBase):
        __tablename__ = "internal"
        id: Mapped[int] = mapped_column(Integer, primary_key=True)
        secret: Mapped[str | None] = mapped_column(String(100), nullable=True)
        prop: Mapped[str | None] = mapped_column(String(100), nullable=True)

    class External(ActiveRecord, TestBase):
        __tablename__ = "external"
        id: Mapped[int] = mapped_column(Integer, primary_key=True)

    class StrictExternal(ActiveRecord, TestBase):
        __tablename__ = "strict_external"
        id: Mapped[int] = mapped_column(Integer, primary_key=True)
        prop: Mapped[str | None] = mapped_column(String(100), nullable=True)

    await datasource.create_all(TestBase.metadata)
    for model in (Internal, External, StrictExternal):
        model.attach_to(datasource)
    return SimpleNamespace(
        Internal=Internal, External=External, StrictExternal=StrictExternal,
    )
