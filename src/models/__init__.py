from .admin import AdminModel
from .story import StoryAttachmentModel, StoryModel

__all__ = ["AdminModel", "StoryAttachmentModel", "StoryModel"]
