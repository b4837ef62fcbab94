"""SQLAlchemy Declarative Base - shared base class for ORM models.

Invariants:
    - Bundled and test models inherit from Base
    - Base is the single source of truth for table metadata

Design Decisions:
    - Separate file for Base: avoids circular imports between models
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ModelProxy ORM models."""
    pass
