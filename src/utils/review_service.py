"""Story review workflow.

Listing, approving, rejecting and deleting stories. A story starts pending
and can move to approved or rejected exactly once; both are final.
"""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from fastapi import BackgroundTasks

from config import ADMIN_STORIES_LIMIT, APPROVED_STORIES_LIMIT
from core.exceptions import InvalidStatusTransitionError
from schemas.admin import Admin
from schemas.story import PublicStory, Story, StoryStats
from utils.converters import model_to_public_story, model_to_story
from utils.notifier import Notifier, schedule_notification
from utils.story_manager import StoryManager
from utils.upload_storage import UploadStorage

logger = logging.getLogger(__name__)


class ReviewService:
    """Moderation operations on submitted stories."""

    def __init__(
        self,
        story_manager: StoryManager,
        storage: UploadStorage,
        notifier: Notifier,
    ):
        self.story_manager = story_manager
        self.storage = storage
        self.notifier = notifier

    def list_approved(self) -> List[PublicStory]:
        """Public list of approved stories, newest first."""
        models = self.story_manager.list_stories(
            status="approved", limit=APPROVED_STORIES_LIMIT
        )
        return [model_to_public_story(m) for m in models]

    def list_all(self, status: Optional[str] = None) -> List[Story]:
        """Stories for the moderation queue, optionally filtered by status."""
        models = self.story_manager.list_stories(
            status=status or None, limit=ADMIN_STORIES_LIMIT
        )
        return [model_to_story(m) for m in models]

    def get_story(self, story_id: str) -> Story:
        return model_to_story(self.story_manager.get_story_by_id(story_id))

    def _require_pending(self, story_id: str, target_status: str) -> None:
        model = self.story_manager.get_story_by_id(story_id)
        if model.status != "pending":
            raise InvalidStatusTransitionError(story_id, model.status, target_status)

    def approve(
        self,
        story_id: str,
        admin: Admin,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Story:
        """Approve a pending story and notify its submitter.

        Raises:
            StoryNotFoundError: If the story does not exist.
            InvalidStatusTransitionError: If the story is not pending.
        """
        self._require_pending(story_id, "approved")
        model = self.story_manager.update_story(
            story_id,
            status="approved",
            approved_at=datetime.now(pytz.utc),
            approved_by=admin.username,
        )
        story = model_to_story(model)
        logger.info("Story %s approved by %s", story_id, admin.username)

        schedule_notification(background_tasks, self.notifier.notify_story_approved, story)
        return story

    def reject(
        self,
        story_id: str,
        admin: Admin,
        reason: Optional[str] = None,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Story:
        """Reject a pending story and notify its submitter.

        The reason is stored exactly as given; an empty string counts as no
        reason.

        Raises:
            StoryNotFoundError: If the story does not exist.
            InvalidStatusTransitionError: If the story is not pending.
        """
        self._require_pending(story_id, "rejected")
        if reason == "":
            reason = None
        model = self.story_manager.update_story(
            story_id,
            status="rejected",
            rejection_reason=reason,
            rejected_at=datetime.now(pytz.utc),
            rejected_by=admin.username,
        )
        story = model_to_story(model)
        logger.info("Story %s rejected by %s", story_id, admin.username)

        schedule_notification(background_tasks, self.notifier.notify_story_rejected, story)
        return story

    def delete(self, story_id: str) -> None:
        """Delete a story and its attachment files.

        Raises:
            StoryNotFoundError: If the story does not exist.
        """
        filenames = self.story_manager.delete_story(story_id)
        removed = self.storage.delete_files(filenames)
        logger.info(
            "Removed %d of %d attachment file(s) for story %s",
            removed, len(filenames), story_id,
        )

    def stats(self) -> StoryStats:
        counts = self.story_manager.count_by_status()
        return StoryStats(total=sum(counts.values()), **counts)
