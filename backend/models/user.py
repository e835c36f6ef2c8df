"""Admin user model definitions."""

from sqlalchemy import Column, Integer, String
from backend.database import Base


class AdminUser(Base):
    """Represents a back-office administrator."""
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    name = Column(String)
    hashed_password = Column(String)
