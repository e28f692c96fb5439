# backend/models/adjustment.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from database import Base

# Manual stock correction outside sales and purchases (count corrections, damage, theft ...).
# items holds one entry per product with the stock level before and after.
class StockAdjustment(Base):
    __tablename__ = "stock_adjustments"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    adjustment_number = Column(String(32), nullable=False, index=True)
    reason = Column(String, nullable=False)
    notes = Column(String, nullable=False, default="")

    items = Column(JSON, nullable=False)
    total_items = Column(Integer, nullable=False)
    total_increase = Column(Integer, nullable=False, default=0)
    total_decrease = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", foreign_keys=[user_id])
