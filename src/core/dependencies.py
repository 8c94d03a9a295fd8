"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes,
following Google Python Style Guide and FastAPI best practices.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import admin_manager
from utils import auth_manager
from utils import notifier
from utils import review_service
from utils import story_manager
from utils import submission_service
from utils import upload_storage

# Singleton for Notifier (holds the Jinja2 environment)
_notifier_instance: notifier.Notifier = None


def get_story_manager(db: Session = Depends(get_db)) -> story_manager.StoryManager:
    """Get StoryManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        StoryManager instance.
    """
    return story_manager.StoryManager(db)


def get_admin_manager(db: Session = Depends(get_db)) -> admin_manager.AdminManager:
    """Get AdminManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        AdminManager instance.
    """
    return admin_manager.AdminManager(db)


def get_upload_storage() -> upload_storage.UploadStorage:
    return upload_storage.UploadStorage()


def get_notifier() -> notifier.Notifier:
    """Get Notifier singleton instance.

    Returns:
        Notifier instance (singleton).
    """
    global _notifier_instance
    if _notifier_instance is None:
        _notifier_instance = notifier.Notifier.from_config()
    return _notifier_instance


def get_auth_manager(
    admins: admin_manager.AdminManager = Depends(get_admin_manager),
) -> auth_manager.AuthManager:
    return auth_manager.AuthManager(admins)


def get_submission_service(
    stories: story_manager.StoryManager = Depends(get_story_manager),
    storage: upload_storage.UploadStorage = Depends(get_upload_storage),
    mailer: notifier.Notifier = Depends(get_notifier),
) -> submission_service.SubmissionService:
    return submission_service.SubmissionService(stories, storage, mailer)


def get_review_service(
    stories: story_manager.StoryManager = Depends(get_story_manager),
    storage: upload_storage.UploadStorage = Depends(get_upload_storage),
    mailer: notifier.Notifier = Depends(get_notifier),
) -> review_service.ReviewService:
    return review_service.ReviewService(stories, storage, mailer)


# Type aliases for dependency injection
AuthManagerDep = Annotated[
    auth_manager.AuthManager, Depends(get_auth_manager)
]
SubmissionServiceDep = Annotated[
    submission_service.SubmissionService, Depends(get_submission_service)
]
ReviewServiceDep = Annotated[
    review_service.ReviewService, Depends(get_review_service)
]
