"""Public story routes: submission and the approved-stories feed."""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, BackgroundTasks, File, Form, HTTPException, UploadFile, status

from core.dependencies import ReviewServiceDep, SubmissionServiceDep
from core.exceptions import FileTooLargeError, UnsupportedFileTypeError, ValidationError
from schemas.story import PublicStory, SubmitStoryResponse
from utils.upload_storage import IncomingFile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stories", tags=["Stories"])


@router.post(
    "",
    response_model=SubmitStoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a story",
)
async def submit_story(
    submission_service: SubmissionServiceDep,
    background_tasks: BackgroundTasks,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    school: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    graduation: Optional[str] = Form(None),
    story_type: Optional[str] = Form(None, alias="type", description="Narrative category"),
    title: Optional[str] = Form(None),
    story: Optional[str] = Form(None),
    files: Optional[List[Union[UploadFile, str]]] = File(
        None, description="Up to 5 attachments"
    ),
) -> SubmitStoryResponse:
    """Submit a new story for review.

    Required fields are checked by the submission workflow so that every
    missing field is reported in one message.

    Raises:
        HTTPException: 400 for missing/invalid fields or too many files,
            413 for oversized files, 415 for unsupported file types.
    """
    fields = {
        "name": name,
        "email": email,
        "school": school,
        "location": location,
        "graduation": graduation,
        "type": story_type,
        "title": title,
        "story": story,
    }
    incoming = []
    for upload in files or []:
        # Browsers send an unused file input as an empty string part
        if isinstance(upload, str):
            continue
        incoming.append(
            IncomingFile(
                filename=upload.filename or "",
                content_type=upload.content_type,
                content=await upload.read(),
            )
        )

    try:
        created = submission_service.submit(fields, incoming, background_tasks)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UnsupportedFileTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(e)
        )
    except FileTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e)
        )

    return SubmitStoryResponse(
        message="Story submitted successfully!", story_id=created.id
    )


@router.get("/approved", response_model=List[PublicStory], summary="List approved stories")
def list_approved_stories(review_service: ReviewServiceDep) -> List[PublicStory]:
    """Approved stories, newest first, at most 50."""
    stories = review_service.list_approved()
    logger.debug("Sending %d approved stories", len(stories))
    return stories
