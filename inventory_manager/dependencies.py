from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from inventory_manager.core.config import Settings, settings as default_settings
from inventory_manager.logging_config import setup_logging
from inventory_manager.services.catalog_store import CatalogStore
from inventory_manager.services.error_handler import ErrorHandler


def get_catalog_store(settings: Optional[Settings] = None) -> CatalogStore:
    return CatalogStore(settings or default_settings)


def get_error_handler(settings: Optional[Settings] = None) -> ErrorHandler:
    settings = settings or default_settings
    return ErrorHandler(debug=settings.DEBUG)


@asynccontextmanager
async def lifespan(settings: Optional[Settings] = None, configure_logging: bool = True) -> AsyncIterator[CatalogStore]:
    """Open the catalog for the life of the process and close it on the way out."""
    settings = settings or default_settings
    if configure_logging:
        setup_logging(settings.LOG_FILE, level=settings.LOG_LEVEL)

    store = get_catalog_store(settings)
    await store.init()
    await store.ensure_default_category()
    try:
        yield store
    finally:
        await store.close()
