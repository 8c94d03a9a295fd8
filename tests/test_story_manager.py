"""
StoryManager persistence tests.

Run with: pytest tests/test_story_manager.py -v
"""

from datetime import datetime, timedelta

import pytest
import pytz

from conftest import VALID_FIELDS
from core.exceptions import StoryNotFoundError, ValidationError
from models.story import StoryModel

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=pytz.utc)


def create(story_manager, minutes=0, **overrides):
    fields = {**VALID_FIELDS, **overrides}
    return story_manager.create_story(fields, created_at=BASE_TIME + timedelta(minutes=minutes))


class TestCreateStory:
    def test_new_story_is_pending_with_fresh_id(self, story_manager):
        first = create(story_manager)
        second = create(story_manager)

        assert first.status == "pending"
        assert first.id and second.id and first.id != second.id
        assert first.approved_at is None
        assert first.approved_by is None
        assert first.rejection_reason is None

    @pytest.mark.parametrize("field", ["name", "email", "school", "location", "type", "title", "story"])
    def test_missing_required_field_is_not_persisted(self, story_manager, db_session, field):
        with pytest.raises(ValidationError, match=field):
            create(story_manager, **{field: "   "})

        assert db_session.query(StoryModel).count() == 0

    def test_graduation_is_optional(self, story_manager):
        story = create(story_manager, graduation=None)
        assert story.graduation is None

    def test_attachments_keep_their_order(self, story_manager):
        attachments = [
            {"original_name": f"f{i}.png", "filename": f"stored{i}.png", "mimetype": "image/png", "size": i}
            for i in range(3)
        ]
        story = story_manager.create_story(dict(VALID_FIELDS), attachments=attachments)

        assert [a.original_name for a in story.attachments] == ["f0.png", "f1.png", "f2.png"]
        assert [a.position for a in story.attachments] == [0, 1, 2]


class TestQueries:
    def test_get_unknown_story_raises(self, story_manager):
        with pytest.raises(StoryNotFoundError):
            story_manager.get_story_by_id("missing")

    def test_list_is_newest_first(self, story_manager):
        old = create(story_manager, minutes=0, title="old")
        new = create(story_manager, minutes=10, title="new")
        middle = create(story_manager, minutes=5, title="middle")

        ids = [s.id for s in story_manager.list_stories()]
        assert ids == [new.id, middle.id, old.id]

    def test_list_filters_by_status_and_caps(self, story_manager):
        for i in range(4):
            create(story_manager, minutes=i)
        approved = create(story_manager, minutes=10)
        story_manager.update_story(approved.id, status="approved")

        pending = story_manager.list_stories(status="pending")
        assert len(pending) == 4
        assert all(s.status == "pending" for s in pending)
        assert [s.id for s in story_manager.list_stories(status="approved")] == [approved.id]
        assert len(story_manager.list_stories(limit=2)) == 2

    def test_list_rejects_unknown_status(self, story_manager):
        with pytest.raises(ValidationError):
            story_manager.list_stories(status="archived")

    def test_count_by_status_includes_empty_statuses(self, story_manager):
        create(story_manager)
        rejected = create(story_manager)
        story_manager.update_story(rejected.id, status="rejected")

        assert story_manager.count_by_status() == {"pending": 1, "approved": 0, "rejected": 1}


class TestMutations:
    def test_update_only_touches_review_columns(self, story_manager):
        story = create(story_manager)
        with pytest.raises(ValueError):
            story_manager.update_story(story.id, title="changed")

    def test_delete_returns_attachment_filenames(self, story_manager, db_session):
        attachments = [
            {"original_name": "a.pdf", "filename": "abc.pdf", "mimetype": "application/pdf", "size": 10}
        ]
        story = story_manager.create_story(dict(VALID_FIELDS), attachments=attachments)

        assert story_manager.delete_story(story.id) == ["abc.pdf"]
        with pytest.raises(StoryNotFoundError):
            story_manager.get_story_by_id(story.id)

    def test_delete_unknown_story_raises(self, story_manager):
        with pytest.raises(StoryNotFoundError):
            story_manager.delete_story("missing")
