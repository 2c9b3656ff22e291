from inventory_manager.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate, CategoryWithCount
from inventory_manager.schemas.pricing import PriceCalculation
from inventory_manager.schemas.product import (
    ProductCreate,
    ProductImageOut,
    ProductOut,
    ProductUpdate,
    SortOption,
)

__all__ = [
    'CategoryCreate', 'CategoryOut', 'CategoryUpdate', 'CategoryWithCount',
    'PriceCalculation',
    'ProductCreate', 'ProductImageOut', 'ProductOut', 'ProductUpdate', 'SortOption',
]
