"""
Review workflow tests: the pending -> approved / rejected state machine,
listing, deletion and stats.

Run with: pytest tests/test_review_service.py -v
"""

from unittest.mock import patch

import pytest

from conftest import VALID_FIELDS, RecordingNotifier, make_file
from core.exceptions import InvalidStatusTransitionError, StoryNotFoundError, ValidationError
from utils.review_service import ReviewService


@pytest.fixture
def pending(submission_service, notifier):
    story = submission_service.submit(dict(VALID_FIELDS))
    notifier.sent.clear()
    return story


class TestApprove:
    def test_sets_status_time_and_approver(self, review_service, pending, admin, notifier):
        story = review_service.approve(pending.id, admin)

        assert story.status == "approved"
        assert story.approved_by == admin.username
        assert story.approved_at >= story.created_at
        assert [m["to"] for m in notifier.sent] == ["a@x.com"]

    def test_second_approval_is_a_conflict(self, review_service, pending, admin):
        review_service.approve(pending.id, admin)

        with pytest.raises(InvalidStatusTransitionError):
            review_service.approve(pending.id, admin)
        assert review_service.get_story(pending.id).status == "approved"

    def test_rejected_story_cannot_be_approved(self, review_service, pending, admin):
        review_service.reject(pending.id, admin, reason="No")

        with pytest.raises(InvalidStatusTransitionError):
            review_service.approve(pending.id, admin)
        story = review_service.get_story(pending.id)
        assert story.status == "rejected"
        assert story.approved_at is None

    def test_unknown_story(self, review_service, admin):
        with pytest.raises(StoryNotFoundError):
            review_service.approve("missing", admin)

    def test_notification_failure_does_not_undo_approval(self, story_manager, storage, pending, admin):
        service = ReviewService(story_manager, storage, RecordingNotifier(fail=True))

        assert service.approve(pending.id, admin).status == "approved"


class TestReject:
    def test_reason_is_stored_verbatim(self, review_service, pending, admin, notifier):
        reason = "  Please add more detail about the campus.  "
        story = review_service.reject(pending.id, admin, reason=reason)

        assert story.status == "rejected"
        assert story.rejection_reason == reason
        assert story.rejected_by == admin.username
        assert "Please add more detail" in notifier.sent[0]["body"]

    @pytest.mark.parametrize("reason", [None, ""])
    def test_missing_reason_is_stored_as_absent(self, review_service, pending, admin, reason):
        story = review_service.reject(pending.id, admin, reason=reason)
        assert story.status == "rejected"
        assert story.rejection_reason is None

    def test_whitespace_reason_is_kept(self, review_service, pending, admin):
        story = review_service.reject(pending.id, admin, reason="   ")
        assert story.rejection_reason == "   "

    def test_approved_story_cannot_be_rejected(self, review_service, pending, admin):
        review_service.approve(pending.id, admin)
        with pytest.raises(InvalidStatusTransitionError):
            review_service.reject(pending.id, admin)


class TestListing:
    def test_pending_story_is_not_public(self, review_service, pending, admin):
        assert review_service.list_approved() == []

        review_service.approve(pending.id, admin)
        assert [s.id for s in review_service.list_approved()] == [pending.id]

    def test_list_all_filters_by_status(self, review_service, submission_service, admin):
        first = submission_service.submit(dict(VALID_FIELDS))
        second = submission_service.submit(dict(VALID_FIELDS))
        review_service.approve(first.id, admin)

        assert [s.id for s in review_service.list_all("pending")] == [second.id]
        assert [s.id for s in review_service.list_all("approved")] == [first.id]
        assert len(review_service.list_all()) == 2
        assert len(review_service.list_all("")) == 2

    def test_list_all_rejects_unknown_status(self, review_service):
        with pytest.raises(ValidationError):
            review_service.list_all("archived")

    def test_public_list_is_capped(self, review_service, submission_service, admin):
        for _ in range(3):
            story = submission_service.submit(dict(VALID_FIELDS))
            review_service.approve(story.id, admin)

        with patch("utils.review_service.APPROVED_STORIES_LIMIT", 2):
            assert len(review_service.list_approved()) == 2

    def test_stats(self, review_service, submission_service, admin):
        stories = [submission_service.submit(dict(VALID_FIELDS)) for _ in range(4)]
        review_service.approve(stories[0].id, admin)
        review_service.reject(stories[1].id, admin)

        stats = review_service.stats()
        assert stats.model_dump() == {"total": 4, "pending": 2, "approved": 1, "rejected": 1}


class TestDelete:
    def test_removes_record_and_files(self, review_service, submission_service, upload_dir):
        story = submission_service.submit(dict(VALID_FIELDS), [make_file(), make_file(name="b.png", content_type="image/png")])

        review_service.delete(story.id)

        with pytest.raises(StoryNotFoundError):
            review_service.get_story(story.id)
        assert review_service.list_all() == []
        assert list(upload_dir.iterdir()) == []

    def test_missing_file_on_disk_is_tolerated(self, review_service, submission_service, upload_dir):
        story = submission_service.submit(dict(VALID_FIELDS), [make_file()])
        (upload_dir / story.files[0].filename).unlink()

        review_service.delete(story.id)

        with pytest.raises(StoryNotFoundError):
            review_service.get_story(story.id)

    def test_unknown_story(self, review_service):
        with pytest.raises(StoryNotFoundError):
            review_service.delete("missing")
