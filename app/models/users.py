import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from app.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


# =====================================================
# BUYERS
# =====================================================

class User(Base):
    """Buyer account, created through OTP verification at checkout."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    phone = Column(String(15), unique=True, nullable=False)
    name = Column(String(255))
    email = Column(String(255))
    password = Column(String(255))  # bcrypt hash, null for OTP-only accounts
    address = Column(Text)
    city = Column(String(100))
    pincode = Column(String(10))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


# =====================================================
# INFLUENCERS
# =====================================================

class Influencer(Base):
    __tablename__ = "influencers"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    phone = Column(String(15), unique=True, nullable=False)
    email = Column(String(255))
    password = Column(String(255))

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


# =====================================================
# ADMINS
# =====================================================

class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    username = Column(String(100))  # legacy logins
    phone = Column(String(15), unique=True, nullable=False)
    email = Column(String(255))
    password = Column(String(255))

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
