# backend/models/purchase.py
import enum
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, JSON
from database import Base

class PurchaseStatus(str, enum.Enum):
    RECEIVED = "received"
    PENDING = "pending"

# Stock bought from a supplier. Only received purchases move stock.
class PosPurchase(Base):
    __tablename__ = "pos_purchases"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    supplier_name = Column(String, nullable=False)
    invoice_number = Column(String(32), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=PurchaseStatus.RECEIVED.value)

    items = Column(JSON, nullable=False)
    total_items = Column(Integer, nullable=False)
    total_quantity = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    notes = Column(String, nullable=False, default="")

    purchase_date = Column(DateTime(timezone=True), nullable=False)
    received_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
