# backend/models/sale.py
import enum
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, JSON
from database import Base

# Payment methods accepted at the till
class PaymentMethod(str, enum.Enum):
    CASH = "Cash"
    CARD = "Card"
    TRANSFER = "Transfer"

# A committed point-of-sale transaction. Written once; items is a frozen
# snapshot of the cart lines (price and quantity at the time of sale).
class PosSale(Base):
    __tablename__ = "pos_sales"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    customer_name = Column(String, nullable=False)
    customer_id = Column(String, nullable=False)
    invoice_number = Column(String(32), nullable=False, index=True)
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)

    items = Column(JSON, nullable=False)
    total_items = Column(Integer, nullable=False)
    total_quantity = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    notes = Column(String, nullable=False, default="")

    sale_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
