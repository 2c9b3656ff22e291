import pytest

from inventory_manager.core.config import Settings
from inventory_manager.schemas.product import ProductCreate
from inventory_manager.services.catalog_store import CatalogStore


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}",
        "LOG_FILE": str(tmp_path / "logs" / "app.log"),
    }
    values.update(overrides)
    return Settings(**values)


def make_product(**overrides) -> ProductCreate:
    values = {
        "name": "Widget",
        "category": "Tools",
        "price": 100.0,
    }
    values.update(overrides)
    return ProductCreate(**values)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "inventory.db"


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
async def store(settings):
    catalog = CatalogStore(settings)
    await catalog.init()
    yield catalog
    await catalog.close()
