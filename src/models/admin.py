"""Administrator database model.

This module defines the Admin database model using SQLAlchemy.
"""

from sqlalchemy import Column, String
from .base import Base


class AdminModel(Base):
    """Administrator (story reviewer) database model."""

    __tablename__ = "admins"

    admin_id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    email = Column(String, nullable=True)
    created_at = Column(String, nullable=False)  # ISO format string
