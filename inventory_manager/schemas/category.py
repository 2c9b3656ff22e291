from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)


class CategoryUpdate(CategoryCreate):
    id: int


class CategoryOut(BaseModel):
    id: int
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryWithCount(CategoryOut):
    count: int = 0
