# schemas/purchase.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Literal
from datetime import datetime

# Input schema for a single purchased product
class PurchaseItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)
    purchase_price: float = Field(ge=0, allow_inf_nan=False)

# Input schema for recording a purchase
class PurchaseCreate(BaseModel):
    supplier_name: str = Field(min_length=1)
    status: Literal["received", "pending"] = "received"
    notes: str = ""
    items: List[PurchaseItemCreate]

class PurchaseItemOut(BaseModel):
    product_id: int
    product_name: str
    product_sku: str
    purchase_price: float
    quantity: int
    total_amount: float

class PurchaseOut(BaseModel):
    id: int
    supplier_name: str
    invoice_number: str
    status: str
    items: List[PurchaseItemOut]
    total_items: int
    total_quantity: int
    total_amount: float
    notes: str
    purchase_date: datetime
    received_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class PurchaseListPage(BaseModel):
    items: List[PurchaseOut]
    total: int
    page: int
    page_size: int
