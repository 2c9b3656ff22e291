# inventory_manager/crud/category_repository.py
from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from inventory_manager.models import Category, Product
from inventory_manager.crud.base import AbstractCategoryRepository


class CategoryRepository(AbstractCategoryRepository[Category]):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, category_id: int) -> Category | None:
        result = await self.db.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def get_by_name_ci(self, name: str) -> Category | None:
        stmt = select(Category).where(func.lower(Category.name) == name.lower())
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create(self, values: dict, now: str) -> Category:
        category = Category(**values, created_at=now, updated_at=now)
        self.db.add(category)
        await self.db.flush()
        return category

    async def update(self, category_id: int, values: dict, now: str) -> bool:
        columns = {getattr(Category, key): value for key, value in values.items()}
        columns[Category.updated_at] = now
        stmt = (
            update(Category)
            .where(Category.id == category_id)
            .values(columns)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount > 0

    async def delete(self, category_id: int) -> bool:
        result = await self.db.execute(delete(Category).where(Category.id == category_id))
        return result.rowcount > 0

    async def list_all(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return result.scalars().all()

    async def list_with_product_count(self) -> list[tuple[Category, int]]:
        # Products reference categories by name only, so join on the string
        stmt = (
            select(Category, func.count(Product.id).label("count"))
            .outerjoin(Product, Product.category == Category.name)
            .group_by(Category.id)
            .order_by(Category.name)
        )
        result = await self.db.execute(stmt)
        return [(category, count) for category, count in result.all()]
