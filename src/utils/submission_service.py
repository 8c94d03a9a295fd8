"""Story submission workflow.

Validates a visitor's submission, stores its attachments, persists the story
as pending and schedules the "submission received" notifications.
"""

import logging
from typing import Dict, List, Optional

import pydantic
from fastapi import BackgroundTasks

from core.exceptions import ValidationError
from schemas.story import Story, StorySubmission
from utils.converters import model_to_story
from utils.notifier import Notifier, schedule_notification
from utils.story_manager import StoryManager
from utils.upload_storage import IncomingFile, UploadStorage

logger = logging.getLogger(__name__)


def parse_submission(fields: Dict[str, Optional[str]]) -> StorySubmission:
    """Validate raw form fields against the submission contract.

    Raises:
        ValidationError: Naming every missing or malformed field.
    """
    try:
        return StorySubmission(**fields)
    except pydantic.ValidationError as e:
        missing, invalid = [], []
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "body"
            value = fields.get(field)
            if value is None or not str(value).strip() or "required" in error["msg"]:
                missing.append(field)
            else:
                invalid.append(field)
        parts = []
        if missing:
            parts.append(f"Missing required fields: {', '.join(missing)}")
        if invalid:
            parts.append(f"Invalid fields: {', '.join(invalid)}")
        raise ValidationError("; ".join(parts)) from e


class SubmissionService:
    """Accepts new story submissions."""

    def __init__(
        self,
        story_manager: StoryManager,
        storage: UploadStorage,
        notifier: Notifier,
    ):
        self.story_manager = story_manager
        self.storage = storage
        self.notifier = notifier

    def submit(
        self,
        fields: Dict[str, Optional[str]],
        files: Optional[List[IncomingFile]] = None,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Story:
        """Submit a new story.

        Nothing is written when the fields or any attachment are rejected.
        Files written for a submission whose record then fails to persist are
        removed again.

        Args:
            fields: Raw submission fields.
            files: Uploaded attachments (0 to MAX_FILES_PER_STORY).
            background_tasks: Where to schedule notifications. When None they
                are sent before returning.

        Returns:
            The persisted pending Story.

        Raises:
            ValidationError: If a required field is missing or malformed, or
                there are too many files.
            UnsupportedFileTypeError: If an attachment type is not accepted.
            FileTooLargeError: If an attachment is too large.
        """
        submission = parse_submission(fields)
        files = [f for f in (files or []) if f.filename or f.content]

        attachments = self.storage.save(files)

        try:
            model = self.story_manager.create_story(
                submission.model_dump(), attachments=attachments
            )
        except Exception:
            self.storage.delete_files(a["filename"] for a in attachments)
            raise

        story = model_to_story(model)
        logger.info(
            "Story submitted: %s (%s) by %s", story.id, story.title, story.name
        )

        schedule_notification(background_tasks, self.notifier.notify_submission_received, story)
        schedule_notification(background_tasks, self.notifier.notify_admin_new_submission, story)
        return story
