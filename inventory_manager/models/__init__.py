from inventory_manager.models.product import Product
from inventory_manager.models.category import Category
from inventory_manager.models.product_image import ProductImage

__all__ = ['Product', 'Category', 'ProductImage']
