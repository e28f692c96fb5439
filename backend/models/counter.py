# backend/models/counter.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint, func
from database import Base

# Per-tenant monotonic counter, one row per invoice type ("sale" / "purchase")
class InvoiceCounter(Base):
    __tablename__ = "invoice_counters"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("admin_id", "type", name="uq_invoice_counter_admin_type"),
    )
