# backend/models/customer.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from database import Base

# A known customer of a tenant, offered in the sale form's customer dropdown
class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
