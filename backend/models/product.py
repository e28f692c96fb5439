# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, CheckConstraint, UniqueConstraint, func
from database import Base

# Model PosProduct
# A product in a tenant's point-of-sale catalogue. Sales decrement stock_qty,
# received purchases increment it. Stock can never go below zero.
class PosProduct(Base):
    __tablename__ = "pos_products"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String, nullable=False, index=True)
    sku = Column(String, nullable=False, index=True)
    barcode = Column(String, nullable=True, index=True)

    purchase_price = Column(Float, CheckConstraint("purchase_price >= 0"), nullable=False, default=0)
    sell_price = Column(Float, CheckConstraint("sell_price >= 0"), nullable=False)

    stock_qty = Column(Integer, CheckConstraint("stock_qty >= 0"), nullable=False, default=0)
    reorder_level = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("admin_id", "sku", name="uq_pos_product_admin_sku"),
    )
