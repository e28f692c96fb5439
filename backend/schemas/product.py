# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared base attributes for POS products
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    barcode: Optional[str] = None
    sell_price: float = Field(ge=0, allow_inf_nan=False)
    purchase_price: float = Field(default=0, ge=0, allow_inf_nan=False)
    stock_qty: int = Field(default=0, ge=0)
    reorder_level: Optional[int] = Field(default=None, ge=0)


# Schema for creating a new product
class ProductCreate(ProductBase):
    pass


# Full product representation including ID
class ProductOut(ProductBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Paginated response for product listings
class ProductListPage(ORMBase):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int


# Partial product edit. Stock is changed through sales, purchases and adjustments only.
class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    sku: Optional[str] = Field(default=None, min_length=1)
    barcode: Optional[str] = None
    sell_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    purchase_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    reorder_level: Optional[int] = Field(default=None, ge=0)
