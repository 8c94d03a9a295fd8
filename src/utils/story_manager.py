"""Story persistence.

This module owns the stories and story_attachments tables. Every other
component reads and mutates stories through StoryManager.
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import STORY_STATUSES
from core.exceptions import StoryNotFoundError, ValidationError
from models.story import StoryAttachmentModel, StoryModel

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["name", "email", "school", "location", "type", "title", "story"]

# Columns update_story is allowed to touch
UPDATABLE_FIELDS = {
    "status",
    "rejection_reason",
    "approved_at",
    "approved_by",
    "rejected_at",
    "rejected_by",
}


class StoryManager:
    """Manages story persistence operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize StoryManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def create_story(
        self,
        fields: Dict[str, Optional[str]],
        attachments: Optional[List[dict]] = None,
        created_at: Optional[datetime] = None,
    ) -> StoryModel:
        """Insert a new pending story.

        Args:
            fields: Story fields (name, email, school, location, graduation,
                type, title, story).
            attachments: Descriptors of stored files, each with original_name,
                filename, mimetype and size. Order is preserved.
            created_at: Creation time; defaults to now.

        Returns:
            The persisted StoryModel.

        Raises:
            ValidationError: If any required field is missing or blank.
        """
        missing = [
            name for name in REQUIRED_FIELDS
            if not (fields.get(name) or "").strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        model = StoryModel(
            id=uuid.uuid4().hex,
            name=fields["name"],
            email=fields["email"],
            school=fields["school"],
            location=fields["location"],
            graduation=fields.get("graduation"),
            type=fields["type"],
            title=fields["title"],
            story=fields["story"],
            status="pending",
            created_at=created_at or datetime.now(pytz.utc),
        )
        for position, attachment in enumerate(attachments or []):
            model.attachments.append(
                StoryAttachmentModel(
                    position=position,
                    original_name=attachment["original_name"],
                    filename=attachment["filename"],
                    mimetype=attachment["mimetype"],
                    size=attachment["size"],
                )
            )

        try:
            self.db.add(model)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(model)
        logger.info("Created story: %s (%d attachments)", model.id, len(model.attachments))
        return model

    def get_story_by_id(self, story_id: str) -> StoryModel:
        """Get a story by ID.

        Raises:
            StoryNotFoundError: If no story has this ID.
        """
        model = self.db.query(StoryModel).filter(StoryModel.id == story_id).first()
        if not model:
            raise StoryNotFoundError(story_id)
        return model

    def list_stories(
        self, status: Optional[str] = None, limit: Optional[int] = None
    ) -> List[StoryModel]:
        """List stories newest first.

        Args:
            status: Optional status filter.
            limit: Optional maximum number of results.

        Returns:
            List of StoryModel instances ordered by creation time, descending.

        Raises:
            ValidationError: If status is not a known story status.
        """
        query = self.db.query(StoryModel)
        if status:
            if status not in STORY_STATUSES:
                raise ValidationError(
                    f"Invalid status: {status}. Must be one of {', '.join(STORY_STATUSES)}."
                )
            query = query.filter(StoryModel.status == status)
        query = query.order_by(StoryModel.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update_story(self, story_id: str, **changes) -> StoryModel:
        """Update review columns of a story.

        Raises:
            StoryNotFoundError: If no story has this ID.
            ValueError: If a column outside the review columns is given.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update story fields: {', '.join(sorted(unknown))}")

        model = self.get_story_by_id(story_id)
        for key, value in changes.items():
            setattr(model, key, value)
        self.db.commit()
        self.db.refresh(model)
        return model

    def delete_story(self, story_id: str) -> List[str]:
        """Delete a story and its attachment rows.

        Returns:
            Storage filenames of the deleted story's attachments.

        Raises:
            StoryNotFoundError: If no story has this ID.
        """
        model = self.get_story_by_id(story_id)
        filenames = [a.filename for a in model.attachments]
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted story: %s", story_id)
        return filenames

    def count_by_status(self) -> Dict[str, int]:
        """Count stories per status, including statuses with no stories."""
        counts = {status: 0 for status in STORY_STATUSES}
        rows = (
            self.db.query(StoryModel.status, func.count(StoryModel.id))
            .group_by(StoryModel.status)
            .all()
        )
        for status, count in rows:
            counts[status] = count
        return counts
