# inventory_manager/crud/product_repository.py
from typing import Optional
from sqlalchemy import delete, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from inventory_manager.models import Product
from inventory_manager.crud.base import AbstractProductRepository
from inventory_manager.schemas.product import SortOption

RECENT_FIRST = (Product.updated_at.desc(), Product.id.desc())

SORT_ORDERS = {
    SortOption.NAME_ASC: (func.lower(Product.name).asc(), Product.id.asc()),
    SortOption.NAME_DESC: (func.lower(Product.name).desc(), Product.id.desc()),
    SortOption.PRICE_ASC: (Product.price.asc(), Product.id.asc()),
    SortOption.PRICE_DESC: (Product.price.desc(), Product.id.desc()),
    SortOption.CATEGORY: (func.lower(Product.category).asc(), func.lower(Product.name).asc()),
    SortOption.DISCOUNT: RECENT_FIRST,
}


def matches_query(query: str):
    """Case-insensitive substring match on name, category and details."""
    return or_(
        Product.name.icontains(query, autoescape=True),
        Product.category.icontains(query, autoescape=True),
        Product.details.icontains(query, autoescape=True),
    )


class ProductRepository(AbstractProductRepository[Product]):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, product_id: int) -> Product | None:
        result = await self.db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def create(self, values: dict, now: str) -> Product:
        product = Product(**values, created_at=now, updated_at=now)
        self.db.add(product)
        await self.db.flush()
        return product

    async def update(self, product_id: int, values: dict, now: str) -> bool:
        columns = {getattr(Product, key): value for key, value in values.items()}
        columns[Product.updated_at] = now
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(columns)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount > 0

    async def delete(self, product_id: int) -> bool:
        result = await self.db.execute(delete(Product).where(Product.id == product_id))
        return result.rowcount > 0

    async def set_image_uri(self, product_id: int, image_uri: str | None) -> None:
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values({Product.image_uri: image_uri})
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)

    async def list_all(self) -> list[Product]:
        result = await self.db.execute(select(Product).order_by(*RECENT_FIRST))
        return result.scalars().all()

    async def list_by_category(self, category: str) -> list[Product]:
        stmt = select(Product).where(Product.category == category).order_by(*RECENT_FIRST)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def search(self, query: str, limit: Optional[int] = None, offset: int = 0) -> list[Product]:
        stmt = select(Product).where(matches_query(query)).order_by(*RECENT_FIRST)
        if limit is not None:
            stmt = stmt.limit(limit).offset(offset)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count_search(self, query: str) -> int:
        result = await self.db.execute(select(func.count(Product.id)).where(matches_query(query)))
        return result.scalar_one()

    async def list_page(self, limit: int, offset: int) -> list[Product]:
        stmt = select(Product).order_by(*RECENT_FIRST).limit(limit).offset(offset)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Product.id)))
        return result.scalar_one()

    async def list_sorted(self, option: SortOption, query: Optional[str] = None) -> list[Product]:
        stmt = select(Product)
        if option == SortOption.DISCOUNT:
            stmt = stmt.where(
                Product.discount_price.is_not(None),
                Product.discount_price > 0,
                Product.discount_price < Product.price,
            )
        if query:
            stmt = stmt.where(matches_query(query))
        result = await self.db.execute(stmt.order_by(*SORT_ORDERS[option]))
        return result.scalars().all()
