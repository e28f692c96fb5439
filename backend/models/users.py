# backend/models/users.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database import Base

# Represents a user account. ADMIN users own a tenant; staff point at their admin.
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)

    # Tenant owner for staff accounts (NULL for the admin itself)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    admin = relationship("User", remote_side=[id])

    @property
    def tenant_id(self) -> int:
        return self.admin_id or self.id
