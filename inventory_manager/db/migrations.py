"""
Schema creation and in-place upgrades for the local catalog database.

There is no version table: every step is safe to run on each start. Columns
that older installations lack are added by inspecting the live table, and the
gallery backfill only runs while product_images is still empty.
"""
import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession
from sqlalchemy.future import select

from inventory_manager.crud.image_repository import ImageRepository
from inventory_manager.db.session import Base
from inventory_manager.models import Category, Product, ProductImage
from inventory_manager.services.utils import utc_now

logger = logging.getLogger(__name__)

CATALOG_TABLES = [Product.__table__, Category.__table__, ProductImage.__table__]

# Columns added to products after the first release, with their DDL
PRODUCT_ADDED_COLUMNS = (
    ("imageUri", "TEXT"),
    ("gstSlab", "REAL"),
    ("quantity", "INTEGER DEFAULT 0"),
)


def create_tables(connection: Connection) -> None:
    Base.metadata.create_all(connection, tables=CATALOG_TABLES, checkfirst=True)
    logger.info("schema_tables_ready", extra={"tables": [t.name for t in CATALOG_TABLES]})


def add_missing_product_columns(connection: Connection) -> list[str]:
    existing = {column["name"] for column in inspect(connection).get_columns("products")}

    added = []
    for name, ddl in PRODUCT_ADDED_COLUMNS:
        if name in existing:
            continue
        connection.execute(text(f"ALTER TABLE products ADD COLUMN {name} {ddl}"))
        added.append(name)
        logger.info("schema_column_added", extra={"table": "products", "column": name})

    return added


def create_indexes(connection: Connection) -> None:
    for table in CATALOG_TABLES:
        for index in table.indexes:
            index.create(connection, checkfirst=True)
    logger.info("schema_indexes_ready")


def apply_schema(connection: Connection) -> None:
    create_tables(connection)
    add_missing_product_columns(connection)
    create_indexes(connection)


async def run_schema_migrations(connection: AsyncConnection) -> None:
    await connection.run_sync(apply_schema)


async def migrate_legacy_images(session: AsyncSession) -> int:
    """
    Copy the single-image column of older rows into product_images.

    Runs only while product_images is empty. Each product with a non-empty
    imageUri gets one primary image at display order 0.

    Returns:
        int: number of image rows created
    """
    images = ImageRepository(session)
    if await images.count_all() > 0:
        logger.info("legacy_image_migration_skipped", extra={"reason": "product_images not empty"})
        return 0

    stmt = select(Product.id, Product.image_uri).where(
        Product.image_uri.is_not(None),
        Product.image_uri != "",
    )
    rows = (await session.execute(stmt)).all()

    now = utc_now()
    for product_id, image_uri in rows:
        await images.create(product_id, image_uri, display_order=0, is_primary=True, now=now)

    logger.info("legacy_image_migration_done", extra={"migrated": len(rows)})
    return len(rows)
