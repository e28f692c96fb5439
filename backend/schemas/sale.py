# schemas/sale.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Literal
from datetime import datetime

from schemas.cart import CartLineSchema, CartOut

PaymentMethodName = Literal["Cash", "Card", "Transfer"]

# Input schema for committing a sale
class SaleCreate(BaseModel):
    customer_name: str = "Walk-in Customer"
    customer_id: Optional[int] = None
    payment_method: PaymentMethodName = "Cash"
    notes: str = ""
    lines: List[CartLineSchema]

# Frozen copy of a cart line inside a sale
class SaleItemOut(BaseModel):
    product_id: int
    product_name: str
    product_sku: str
    sell_price: float
    quantity: int
    total_amount: float

# Output schema for a committed sale
class SaleOut(BaseModel):
    id: int
    admin_id: int
    customer_name: str
    customer_id: str
    invoice_number: str
    payment_method: str
    items: List[SaleItemOut]
    total_items: int
    total_quantity: int
    total_amount: float
    notes: str
    sale_date: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

# Paginated response wrapper for sale lists
class SaleListPage(BaseModel):
    items: List[SaleOut]
    total: int
    page: int
    page_size: int

# Response after a successful commit: the sale, an emptied cart and where to go next
class SaleCommitResponse(BaseModel):
    sale: SaleOut
    message: str
    cart: CartOut
    redirect_to: str
    redirect_after_ms: int

# Current submission state for the calling user
class SubmissionStateOut(BaseModel):
    status: Literal["idle", "submitting", "succeeded", "failed"]
    invoice_number: Optional[str] = None
    sale_id: Optional[int] = None
    reason: Optional[str] = None

# Current value of an invoice counter
class CounterOut(BaseModel):
    type: Literal["sale", "purchase", "adjustment"]
    count: int
    next_invoice_number: str
