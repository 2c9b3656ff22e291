from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SortOption(str, Enum):
    NAME_ASC = "nameAsc"
    NAME_DESC = "nameDesc"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"
    CATEGORY = "category"
    DISCOUNT = "discount"  # filter: only products sold below their price


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: str
    price: float = Field(..., gt=0)
    discount_price: Optional[float] = Field(None, ge=0)
    gst_slab: Optional[float] = None
    quantity: int = Field(0, ge=0)
    details: Optional[str] = None
    image_uri: Optional[str] = None
    # None leaves the stored gallery alone on update; [] clears it
    images: Optional[List[str]] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Product name is required")
        return value

    @model_validator(mode="after")
    def discount_below_price(self):
        if self.discount_price is not None and self.discount_price >= self.price:
            raise ValueError("Discount price must be less than regular price")
        return self


class ProductUpdate(ProductCreate):
    id: int


class ProductOut(BaseModel):
    id: int
    name: str
    category: str
    price: float
    discount_price: Optional[float] = None
    gst_slab: Optional[float] = None
    quantity: Optional[int] = 0
    details: Optional[str] = None
    image_uri: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductImageOut(BaseModel):
    id: int
    product_id: int
    image_uri: str
    display_order: int
    is_primary: bool
    created_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
