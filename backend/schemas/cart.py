from pydantic import BaseModel, Field
from typing import List, Optional, Literal

# One line of a client-held cart
class CartLineSchema(BaseModel):
    id: str
    product_id: int
    product_name: str = ""
    product_sku: str = ""
    product_barcode: Optional[str] = None
    sell_price: float = Field(ge=0, allow_inf_nan=False)
    quantity: int = Field(ge=1)
    total_amount: float = Field(default=0, allow_inf_nan=False)
    current_stock_qty: int = Field(ge=0)

# Cart totals derived from the lines
class CartTotals(BaseModel):
    total_items: int
    total_quantity: int
    total_amount: float

# Request schema: the cart as the client currently holds it
class CartState(BaseModel):
    lines: List[CartLineSchema] = []

# Request schema for adding one unit of a product
class CartAddItem(CartState):
    product_id: int

# Request schema for editing a line
class CartUpdateItem(CartState):
    line_id: str
    field: Literal["quantity", "sell_price"]
    value: float = Field(allow_inf_nan=False)

# Request schema for removing a line
class CartRemoveItem(CartState):
    line_id: str

# Response schema for the whole cart
class CartOut(BaseModel):
    lines: List[CartLineSchema]
    totals: CartTotals
