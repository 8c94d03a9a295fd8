"""Story database models.

This module defines the Story and StoryAttachment database models using
SQLAlchemy.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .base import Base


class StoryModel(Base):
    """Submitted story database model."""

    __tablename__ = "stories"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    school = Column(String, nullable=False)
    location = Column(String, nullable=False)
    graduation = Column(String, nullable=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    story = Column(Text, nullable=False)

    status = Column(String, nullable=False, default="pending", index=True)  # 'pending', 'approved' or 'rejected'
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(String, nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejected_by = Column(String, nullable=True)

    attachments = relationship(
        "StoryAttachmentModel",
        back_populates="story",
        order_by="StoryAttachmentModel.position",
        cascade="all, delete-orphan",
    )


class StoryAttachmentModel(Base):
    """File uploaded along with a story."""

    __tablename__ = "story_attachments"

    id = Column(Integer, primary_key=True, index=True)
    story_id = Column(String, ForeignKey("stories.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    original_name = Column(String, nullable=False)
    filename = Column(String, unique=True, nullable=False)  # generated storage name
    mimetype = Column(String, nullable=False)
    size = Column(Integer, nullable=False)

    story = relationship("StoryModel", back_populates="attachments")
