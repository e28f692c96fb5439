# backend/schemas/customer.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime


# Input schema for a new customer
class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class CustomerOut(CustomerCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CustomerListPage(BaseModel):
    items: List[CustomerOut]
    total: int
    page: int
    page_size: int
