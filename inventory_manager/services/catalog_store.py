"""
The catalog store: the single owner of the local database.

One CatalogStore is built at process start and shared by reference. Every
public operation runs in its own session and transaction, so multi-statement
sequences (gallery replacement, primary reassignment) commit or roll back as
a whole.

Products keep a denormalized ``imageUri`` that mirrors their primary image.
Every path that touches images goes through ``_replace_gallery`` or
``_assign_primary`` (or clears the mirror explicitly) to keep it in step.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from inventory_manager.core.config import Settings, settings as default_settings
from inventory_manager.core.exceptions import (
    InvalidGstSlabError,
    InvalidImageUriError,
    NotFoundError,
    NotInitializedError,
)
from inventory_manager.crud.category_repository import CategoryRepository
from inventory_manager.crud.image_repository import ImageRepository
from inventory_manager.crud.product_repository import ProductRepository
from inventory_manager.db.migrations import migrate_legacy_images, run_schema_migrations
from inventory_manager.db.session import create_engine, create_session_factory
from inventory_manager.models import Product, ProductImage
from inventory_manager.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate, CategoryWithCount
from inventory_manager.schemas.product import (
    ProductCreate,
    ProductImageOut,
    ProductOut,
    ProductUpdate,
    SortOption,
)
from inventory_manager.services.pricing import GST_SLABS, is_valid_gst_slab
from inventory_manager.services.utils import clean_image_uris, utc_now

logger = logging.getLogger(__name__)

# Fields the store derives itself and never takes from the caller on write
DERIVED_PRODUCT_FIELDS = {"id", "images", "image_uri"}


def to_product_out(product: Product, gallery: Optional[List[ProductImage]] = None) -> ProductOut:
    out = ProductOut.model_validate(product)
    if gallery is None:
        return out

    uris = [image.image_uri for image in gallery]
    update = {"images": uris}
    if out.image_uri is None and uris:
        update["image_uri"] = uris[0]
    return out.model_copy(update=update)


class CatalogStore:
    def __init__(self, settings: Settings = default_settings):
        self.settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def initialized(self) -> bool:
        return self._session_factory is not None

    async def init(self) -> None:
        if self.initialized:
            return

        engine = create_engine(self.settings.DATABASE_URL, echo=self.settings.SQL_ECHO)
        try:
            async with engine.begin() as connection:
                await run_schema_migrations(connection)
        except Exception:
            logger.exception("database_init_failed")
            await engine.dispose()
            raise

        session_factory = create_session_factory(engine)

        # The catalog is usable without the gallery backfill, so its failure is not fatal
        try:
            async with session_factory() as session, session.begin():
                await migrate_legacy_images(session)
        except Exception:
            logger.exception("legacy_image_migration_failed")

        self._engine = engine
        self._session_factory = session_factory
        logger.info("database_initialized", extra={"database_url": self.settings.DATABASE_URL})

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            raise NotInitializedError()
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    def _check_gst_slab(self, gst_slab: Optional[float]) -> None:
        if self.settings.ENFORCE_GST_SLABS and not is_valid_gst_slab(gst_slab):
            raise InvalidGstSlabError(gst_slab, GST_SLABS)

    # Gallery bookkeeping, always inside the caller's transaction

    async def _replace_gallery(self, session: AsyncSession, product_id: int, uris: List[str]) -> None:
        uris = clean_image_uris(uris)
        images = ImageRepository(session)
        products = ProductRepository(session)

        await images.delete_for_product(product_id)
        if not uris:
            await products.set_image_uri(product_id, None)
            return

        now = utc_now()
        for position, uri in enumerate(uris):
            await images.create(product_id, uri, display_order=position, is_primary=position == 0, now=now)
        await products.set_image_uri(product_id, uris[0])

    async def _assign_primary(self, session: AsyncSession, image: ProductImage) -> None:
        images = ImageRepository(session)
        await images.clear_primary(image.product_id)
        await images.mark_primary(image.id)
        await ProductRepository(session).set_image_uri(image.product_id, image.image_uri)

    # Products

    async def add_product(self, product: ProductCreate) -> int:
        self._check_gst_slab(product.gst_slab)
        values = product.model_dump(exclude=DERIVED_PRODUCT_FIELDS)

        async with self._transaction() as session:
            created = await ProductRepository(session).create(values, utc_now())
            product_id = created.id

            # An explicit list wins, even when empty; a lone image_uri seeds a one-image gallery
            if product.images is not None:
                gallery = product.images
            else:
                gallery = [product.image_uri] if product.image_uri else []
            await self._replace_gallery(session, product_id, gallery)

        logger.info("product_added", extra={"product_id": product_id, "images": len(product.images or [])})
        return product_id

    async def update_product(self, product: ProductUpdate) -> None:
        self._check_gst_slab(product.gst_slab)
        values = product.model_dump(exclude=DERIVED_PRODUCT_FIELDS)

        async with self._transaction() as session:
            if not await ProductRepository(session).update(product.id, values, utc_now()):
                raise NotFoundError("Product", product.id)
            # None means "not sent": the gallery and its mirror stay as they are
            if product.images is not None:
                await self._replace_gallery(session, product.id, product.images)

        logger.info("product_updated", extra={"product_id": product.id})

    async def delete_product(self, product_id: int) -> None:
        async with self._transaction() as session:
            # Explicit even though the foreign key cascades
            await ImageRepository(session).delete_for_product(product_id)
            if not await ProductRepository(session).delete(product_id):
                raise NotFoundError("Product", product_id)

        logger.info("product_deleted", extra={"product_id": product_id})

    async def get_product(self, product_id: int) -> Optional[ProductOut]:
        async with self._transaction() as session:
            product = await ProductRepository(session).get_by_id(product_id)
            if product is None:
                return None
            gallery = await ImageRepository(session).list_for_product(product_id)
            return to_product_out(product, gallery)

    async def get_all_products(self) -> List[ProductOut]:
        async with self._transaction() as session:
            rows = await ProductRepository(session).list_all()
            return [to_product_out(p) for p in rows]

    async def get_products_by_category(self, category: str) -> List[ProductOut]:
        async with self._transaction() as session:
            rows = await ProductRepository(session).list_by_category(category)
            return [to_product_out(p) for p in rows]

    async def search_products(self, query: str) -> List[ProductOut]:
        async with self._transaction() as session:
            rows = await ProductRepository(session).search(query)
            return [to_product_out(p) for p in rows]

    async def search_products_page(self, query: str, limit: Optional[int] = None, offset: int = 0) -> List[ProductOut]:
        limit = self.settings.PAGE_SIZE if limit is None else limit
        async with self._transaction() as session:
            rows = await ProductRepository(session).search(query, limit=limit, offset=offset)
            return [to_product_out(p) for p in rows]

    async def count_search_results(self, query: str) -> int:
        async with self._transaction() as session:
            return await ProductRepository(session).count_search(query)

    async def get_products_page(self, limit: Optional[int] = None, offset: int = 0) -> List[ProductOut]:
        limit = self.settings.PAGE_SIZE if limit is None else limit
        async with self._transaction() as session:
            rows = await ProductRepository(session).list_page(limit, offset)
            return [to_product_out(p) for p in rows]

    async def get_total_product_count(self) -> int:
        async with self._transaction() as session:
            return await ProductRepository(session).count()

    async def get_sorted_products(
        self,
        option: SortOption = SortOption.NAME_ASC,
        query: Optional[str] = None,
    ) -> List[ProductOut]:
        async with self._transaction() as session:
            rows = await ProductRepository(session).list_sorted(option, query)
            return [to_product_out(p) for p in rows]

    # Product images

    async def get_images(self, product_id: int) -> List[ProductImageOut]:
        async with self._transaction() as session:
            rows = await ImageRepository(session).list_for_product(product_id)
            return [ProductImageOut.model_validate(image) for image in rows]

    async def add_image(self, product_id: int, image_uri: str, is_primary: bool = False) -> int:
        if not clean_image_uris([image_uri]):
            raise InvalidImageUriError(image_uri)

        async with self._transaction() as session:
            products = ProductRepository(session)
            images = ImageRepository(session)

            if await products.get_by_id(product_id) is None:
                raise NotFoundError("Product", product_id)

            current_max = await images.max_display_order(product_id)
            display_order = 0 if current_max is None else current_max + 1

            if is_primary:
                await images.clear_primary(product_id)
            image = await images.create(product_id, image_uri, display_order, is_primary, utc_now())
            if is_primary:
                await products.set_image_uri(product_id, image_uri)
            image_id = image.id

        logger.info("image_added", extra={"product_id": product_id, "image_id": image_id, "primary": is_primary})
        return image_id

    async def delete_image(self, image_id: int) -> None:
        async with self._transaction() as session:
            images = ImageRepository(session)
            image = await images.get_by_id(image_id)
            if image is None:
                raise NotFoundError("ProductImage", image_id)

            product_id, was_primary = image.product_id, image.is_primary
            await images.delete(image_id)

            successor = await images.first_by_display_order(product_id)
            if successor is None:
                await ProductRepository(session).set_image_uri(product_id, None)
            elif was_primary:
                await self._assign_primary(session, successor)

        logger.info("image_deleted", extra={"product_id": product_id, "image_id": image_id})

    async def reorder_image(self, image_id: int, display_order: int) -> None:
        # Siblings are not renumbered; callers send a consistent ordering
        async with self._transaction() as session:
            images = ImageRepository(session)
            if await images.get_by_id(image_id) is None:
                raise NotFoundError("ProductImage", image_id)
            await images.set_display_order(image_id, display_order)

    async def set_primary_image(self, product_id: int, image_id: int) -> None:
        async with self._transaction() as session:
            image = await ImageRepository(session).get_by_id(image_id)
            if image is None or image.product_id != product_id:
                raise NotFoundError("ProductImage", image_id)
            await self._assign_primary(session, image)

        logger.info("primary_image_set", extra={"product_id": product_id, "image_id": image_id})

    # Categories

    async def add_category(self, category: CategoryCreate) -> int:
        async with self._transaction() as session:
            created = await CategoryRepository(session).create(category.model_dump(), utc_now())
            category_id = created.id

        logger.info("category_added", extra={"category_id": category_id, "category_name": category.name})
        return category_id

    async def update_category(self, category: CategoryUpdate) -> None:
        async with self._transaction() as session:
            if not await CategoryRepository(session).update(category.id, {"name": category.name}, utc_now()):
                raise NotFoundError("Category", category.id)

    async def delete_category(self, category_id: int) -> None:
        # Products keep their category string
        async with self._transaction() as session:
            if not await CategoryRepository(session).delete(category_id):
                raise NotFoundError("Category", category_id)

    async def get_category(self, category_id: int) -> Optional[CategoryOut]:
        async with self._transaction() as session:
            category = await CategoryRepository(session).get_by_id(category_id)
            return CategoryOut.model_validate(category) if category else None

    async def get_all_categories(self) -> List[CategoryOut]:
        async with self._transaction() as session:
            rows = await CategoryRepository(session).list_all()
            return [CategoryOut.model_validate(c) for c in rows]

    async def get_categories_with_product_count(self) -> List[CategoryWithCount]:
        async with self._transaction() as session:
            rows = await CategoryRepository(session).list_with_product_count()
            return [
                CategoryWithCount(**CategoryOut.model_validate(category).model_dump(), count=count)
                for category, count in rows
            ]

    async def ensure_default_category(self, name: Optional[str] = None) -> bool:
        """Create the fallback category unless one with that name (any case) exists."""
        name = name or self.settings.DEFAULT_CATEGORY
        async with self._transaction() as session:
            categories = CategoryRepository(session)
            if await categories.get_by_name_ci(name) is not None:
                return False
            await categories.create({"name": name}, utc_now())

        logger.info("default_category_created", extra={"category_name": name})
        return True
