"""Infrastructure Layer - async SQLAlchemy data source, schema reporting and logging.

Invariants:
    - Only layer that imports SQLAlchemy engine/session machinery
"""
