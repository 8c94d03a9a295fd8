"""Story schema definitions.

This module defines the submission input contract and the Story data models
returned by the API. API payloads use camelCase keys.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

StoryStatus = Literal["pending", "approved", "rejected"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StorySubmission(BaseModel):
    """Fields a visitor provides when submitting a story."""

    name: str = Field(description="Submitter's name.")
    email: EmailStr = Field(description="Submitter's email, used for notifications.")
    school: str = Field(description="School the submitter attended.")
    location: str = Field(description="Where the submitter lives or the story takes place.")
    graduation: Optional[str] = Field(
        default=None,
        description="Graduation year or cohort, e.g. 'Class of 1998'.",
    )
    type: str = Field(description="Narrative category, e.g. 'memoir'.")
    title: str = Field(description="Title of the story.")
    story: str = Field(description="Body text of the story.")

    @field_validator("name", "school", "location", "type", "title", "story", mode="before")
    @classmethod
    def _require_text(cls, value):
        if value is None:
            raise ValueError("field required")
        value = str(value).strip()
        if not value:
            raise ValueError("field required")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("graduation", mode="before")
    @classmethod
    def _blank_graduation(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class StoryAttachment(CamelModel):
    """Descriptor of a file attached to a story."""

    original_name: str = Field(description="File name as uploaded.")
    filename: str = Field(description="Generated storage name.")
    path: str = Field(description="Public URL path of the stored file.")
    mimetype: str = Field(description="Detected media type.")
    size: int = Field(description="Size in bytes.")


class PublicStory(CamelModel):
    """A story as shown on the public feed, without contact or review details."""

    id: str
    name: str
    school: str
    location: str
    graduation: Optional[str] = None
    type: str
    title: str
    story: str
    files: List[StoryAttachment] = Field(default_factory=list)

    status: StoryStatus = "pending"
    created_at: datetime
    approved_at: Optional[datetime] = None


class Story(PublicStory):
    """Full story record for administrators."""

    email: str
    rejection_reason: Optional[str] = None
    approved_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejected_by: Optional[str] = None


class SubmitStoryResponse(CamelModel):
    message: str
    story_id: str


class RejectStoryRequest(BaseModel):
    reason: Optional[str] = Field(
        default=None,
        description="Why the story was rejected; included in the notification.",
    )


class MessageResponse(BaseModel):
    message: str


class StoryStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
