# inventory_manager/crud/base.py
from abc import ABC, abstractmethod
from typing import Generic, Optional, Sequence, TypeVar

T = TypeVar("T")

class AbstractRepository(ABC, Generic[T]):
    @abstractmethod
    async def get_by_id(self, entity_id: int) -> T | None: ...

    @abstractmethod
    async def create(self, values: dict, now: str) -> T: ...

    @abstractmethod
    async def update(self, entity_id: int, values: dict, now: str) -> bool: ...

    @abstractmethod
    async def delete(self, entity_id: int) -> bool: ...


class AbstractProductRepository(AbstractRepository[T]):
    @abstractmethod
    async def list_all(self) -> list[T]: ...

    @abstractmethod
    async def list_by_category(self, category: str) -> list[T]: ...

    @abstractmethod
    async def search(self, query: str, limit: Optional[int] = None, offset: int = 0) -> list[T]: ...

    @abstractmethod
    async def count_search(self, query: str) -> int: ...

    @abstractmethod
    async def list_page(self, limit: int, offset: int) -> list[T]: ...

    @abstractmethod
    async def count(self) -> int: ...

    @abstractmethod
    async def set_image_uri(self, product_id: int, image_uri: str | None) -> None: ...


class AbstractCategoryRepository(AbstractRepository[T]):
    @abstractmethod
    async def list_all(self) -> list[T]: ...

    @abstractmethod
    async def list_with_product_count(self) -> Sequence[tuple[T, int]]: ...

    @abstractmethod
    async def get_by_name_ci(self, name: str) -> T | None: ...


class AbstractImageRepository(ABC, Generic[T]):
    @abstractmethod
    async def get_by_id(self, image_id: int) -> T | None: ...

    @abstractmethod
    async def list_for_product(self, product_id: int) -> list[T]: ...

    @abstractmethod
    async def create(self, product_id: int, image_uri: str, display_order: int, is_primary: bool, now: str) -> T: ...

    @abstractmethod
    async def delete(self, image_id: int) -> bool: ...

    @abstractmethod
    async def delete_for_product(self, product_id: int) -> int: ...

    @abstractmethod
    async def max_display_order(self, product_id: int) -> int | None: ...

    @abstractmethod
    async def clear_primary(self, product_id: int) -> None: ...

    @abstractmethod
    async def mark_primary(self, image_id: int) -> None: ...

    @abstractmethod
    async def set_display_order(self, image_id: int, display_order: int) -> None: ...

    @abstractmethod
    async def first_by_display_order(self, product_id: int) -> T | None: ...

    @abstractmethod
    async def count_all(self) -> int: ...
