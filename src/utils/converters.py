"""Conversions between database models and API schemas."""

from datetime import datetime
from typing import Optional

import pytz

from config import get_upload_url
from models.admin import AdminModel
from models.story import StoryAttachmentModel, StoryModel
from schemas.admin import Admin
from schemas.story import PublicStory, Story, StoryAttachment


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; they were stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=pytz.utc)
    return value


def model_to_attachment(model: StoryAttachmentModel) -> StoryAttachment:
    return StoryAttachment(
        original_name=model.original_name,
        filename=model.filename,
        path=get_upload_url(model.filename),
        mimetype=model.mimetype,
        size=model.size,
    )


def model_to_story(model: StoryModel) -> Story:
    return Story(
        id=model.id,
        name=model.name,
        email=model.email,
        school=model.school,
        location=model.location,
        graduation=model.graduation,
        type=model.type,
        title=model.title,
        story=model.story,
        files=[model_to_attachment(a) for a in model.attachments],
        status=model.status,
        rejection_reason=model.rejection_reason,
        created_at=_aware(model.created_at),
        approved_at=_aware(model.approved_at),
        approved_by=model.approved_by,
        rejected_at=_aware(model.rejected_at),
        rejected_by=model.rejected_by,
    )


def model_to_public_story(model: StoryModel) -> PublicStory:
    return PublicStory(
        id=model.id,
        name=model.name,
        school=model.school,
        location=model.location,
        graduation=model.graduation,
        type=model.type,
        title=model.title,
        story=model.story,
        files=[model_to_attachment(a) for a in model.attachments],
        status=model.status,
        created_at=_aware(model.created_at),
        approved_at=_aware(model.approved_at),
    )


def admin_to_model(admin: Admin) -> AdminModel:
    return AdminModel(
        admin_id=admin.admin_id,
        username=admin.username,
        password_hash=admin.password_hash,
        email=admin.email,
        created_at=admin.created_at,
    )


def model_to_admin(model: AdminModel) -> Admin:
    return Admin(
        admin_id=model.admin_id,
        username=model.username,
        password_hash=model.password_hash,
        email=model.email,
        created_at=model.created_at,
    )
