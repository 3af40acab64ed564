# backend/models/profile.py
from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, func
from database import Base

ROLE_USER = "user"
ROLE_SUPERADMIN = "superadmin"
ROLES = (ROLE_USER, ROLE_SUPERADMIN)

# Represents an authenticated actor: login credentials plus the role that
# decides data visibility (own rows vs. all rows) and admin affordances
class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, CheckConstraint("role IN ('user', 'superadmin')"), nullable=False, default=ROLE_USER)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
