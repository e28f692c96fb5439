# schemas/adjustment.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Literal
from datetime import datetime

# Input schema for one adjusted product
class AdjustmentItemCreate(BaseModel):
    product_id: int
    adjustment_type: Literal["increase", "decrease"]
    quantity: int = Field(gt=0)

# Input schema for a stock adjustment
class AdjustmentCreate(BaseModel):
    reason: str = Field(min_length=1)
    notes: str = ""
    items: List[AdjustmentItemCreate]

class AdjustmentItemOut(BaseModel):
    product_id: int
    product_name: str
    product_sku: str
    adjustment_type: str
    quantity: int
    previous_stock: int
    new_stock: int

class AdjustmentOut(BaseModel):
    id: int
    adjustment_number: str
    reason: str
    notes: str
    user_id: Optional[int] = None
    items: List[AdjustmentItemOut]
    total_items: int
    total_increase: int
    total_decrease: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class AdjustmentListPage(BaseModel):
    items: List[AdjustmentOut]
    total: int
    page: int
    page_size: int
