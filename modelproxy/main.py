"""ModelProxy Runtime - startup/shutdown lifecycle for a host application.

Invariants:
    - Settings read once through get_settings() unless passed explicitly
    - Logging configured from settings before anything else logs
    - The data source is disposed on exit, also when the body raises

Design Decisions:
    - asynccontextmanager lifespan: the host enters it around its own lifetime
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from modelproxy.config import Settings, get_settings
from modelproxy.infrastructure.database import DataSource, create_datasource
from modelproxy.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(settings: Settings | None = None) -> AsyncIterator[DataSource]:
    """Configure logging and open the backing store; yields the DataSource."""
    settings = settings or get_settings()
    handler = setup_logging(settings.log_level, settings.log_format)
    datasource = create_datasource(settings)
    logger.info("ModelProxy started")
    try:
        yield datasource
    finally:
        await datasource.dispose()
        logger.info("ModelProxy shutting down")
        logging.root.removeHandler(handler)
