# inventory_manager/crud/image_repository.py
from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from inventory_manager.models import ProductImage
from inventory_manager.crud.base import AbstractImageRepository

GALLERY_ORDER = (ProductImage.display_order.asc(), ProductImage.id.asc())


class ImageRepository(AbstractImageRepository[ProductImage]):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, image_id: int) -> ProductImage | None:
        result = await self.db.execute(select(ProductImage).where(ProductImage.id == image_id))
        return result.scalar_one_or_none()

    async def list_for_product(self, product_id: int) -> list[ProductImage]:
        stmt = select(ProductImage).where(ProductImage.product_id == product_id).order_by(*GALLERY_ORDER)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def create(
        self,
        product_id: int,
        image_uri: str,
        display_order: int,
        is_primary: bool,
        now: str,
    ) -> ProductImage:
        image = ProductImage(
            product_id=product_id,
            image_uri=image_uri,
            display_order=display_order,
            is_primary=is_primary,
            created_at=now,
        )
        self.db.add(image)
        await self.db.flush()
        return image

    async def delete(self, image_id: int) -> bool:
        result = await self.db.execute(delete(ProductImage).where(ProductImage.id == image_id))
        return result.rowcount > 0

    async def delete_for_product(self, product_id: int) -> int:
        result = await self.db.execute(delete(ProductImage).where(ProductImage.product_id == product_id))
        return result.rowcount

    async def max_display_order(self, product_id: int) -> int | None:
        stmt = select(func.max(ProductImage.display_order)).where(ProductImage.product_id == product_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def clear_primary(self, product_id: int) -> None:
        stmt = (
            update(ProductImage)
            .where(ProductImage.product_id == product_id)
            .values({ProductImage.is_primary: False})
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)

    async def mark_primary(self, image_id: int) -> None:
        stmt = (
            update(ProductImage)
            .where(ProductImage.id == image_id)
            .values({ProductImage.is_primary: True})
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)

    async def set_display_order(self, image_id: int, display_order: int) -> None:
        stmt = (
            update(ProductImage)
            .where(ProductImage.id == image_id)
            .values({ProductImage.display_order: display_order})
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)

    async def first_by_display_order(self, product_id: int) -> ProductImage | None:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(*GALLERY_ORDER)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def count_all(self) -> int:
        result = await self.db.execute(select(func.count(ProductImage.id)))
        return result.scalar_one()
