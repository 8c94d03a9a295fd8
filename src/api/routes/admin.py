"""Admin routes for reviewing submitted stories.

Every route here requires a bearer token from /api/admin/login.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query, status

from api.routes.auth import get_current_admin
from core.dependencies import ReviewServiceDep
from core.exceptions import InvalidStatusTransitionError, StoryNotFoundError, ValidationError
from schemas.admin import Admin
from schemas.story import MessageResponse, RejectStoryRequest, Story, StoryStats

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


def _not_found(e: StoryNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/stats", response_model=StoryStats, summary="Story counts by status")
def get_stats(review_service: ReviewServiceDep) -> StoryStats:
    return review_service.stats()


@router.get("/stories", response_model=List[Story], summary="List stories")
def list_stories(
    review_service: ReviewServiceDep,
    status_filter: Optional[str] = Query(
        None, alias="status", description="pending, approved or rejected"
    ),
) -> List[Story]:
    """List stories newest first, at most 100, optionally filtered by status."""
    try:
        return review_service.list_all(status_filter)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/stories/{story_id}", response_model=Story, summary="Get a story")
def get_story(story_id: str, review_service: ReviewServiceDep) -> Story:
    try:
        return review_service.get_story(story_id)
    except StoryNotFoundError as e:
        raise _not_found(e)


@router.post(
    "/stories/{story_id}/approve",
    response_model=MessageResponse,
    summary="Approve a story",
)
def approve_story(
    story_id: str,
    review_service: ReviewServiceDep,
    background_tasks: BackgroundTasks,
    current_admin: Admin = Depends(get_current_admin),
) -> MessageResponse:
    """Approve a pending story and notify its submitter.

    Raises:
        HTTPException: 404 if the story does not exist, 409 if it is not pending.
    """
    try:
        story = review_service.approve(story_id, current_admin, background_tasks)
    except StoryNotFoundError as e:
        raise _not_found(e)
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return MessageResponse(message=f"Story '{story.title}' approved")


@router.post(
    "/stories/{story_id}/reject",
    response_model=MessageResponse,
    summary="Reject a story",
)
def reject_story(
    story_id: str,
    review_service: ReviewServiceDep,
    background_tasks: BackgroundTasks,
    req: Optional[RejectStoryRequest] = Body(None),
    current_admin: Admin = Depends(get_current_admin),
) -> MessageResponse:
    """Reject a pending story; the optional reason is passed on to the submitter.

    Raises:
        HTTPException: 404 if the story does not exist, 409 if it is not pending.
    """
    reason = req.reason if req else None
    try:
        story = review_service.reject(
            story_id, current_admin, reason=reason, background_tasks=background_tasks
        )
    except StoryNotFoundError as e:
        raise _not_found(e)
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return MessageResponse(message=f"Story '{story.title}' rejected")


@router.delete("/stories/{story_id}", response_model=MessageResponse, summary="Delete a story")
def delete_story(
    story_id: str,
    review_service: ReviewServiceDep,
    current_admin: Admin = Depends(get_current_admin),
) -> MessageResponse:
    """Delete a story and its attachment files."""
    try:
        review_service.delete(story_id)
    except StoryNotFoundError as e:
        raise _not_found(e)
    logger.info("Story %s deleted by %s", story_id, current_admin.username)
    return MessageResponse(message="Story deleted")
