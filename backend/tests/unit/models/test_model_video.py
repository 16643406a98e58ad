"""Tests for Video and WatchHistoryEntry models."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from tests.factories.user import UserFactory
from tests.factories.video import VideoFactory, WatchHistoryEntryFactory
from vidtube.models.video import Video


class TestVideo:
    def test_defaults(self, session):
        video = Video(
            video_file_url="https://media.test/v.mp4",
            thumbnail_url="https://media.test/t.jpg",
            title="Untitled",
        )
        session.add(video)
        session.flush()
        session.refresh(video)
        assert video.views == 0
        assert video.is_published is True
        assert video.description == ""
        assert video.duration == 0.0
        assert video.owner_id is None

    def test_owner_relationship(self, session):
        owner = UserFactory(username="maker")
        video = VideoFactory(owner=owner)
        session.flush()
        assert video.owner_id == owner.id
        assert video in owner.videos


class TestWatchHistoryEntry:
    def test_position_unique_per_user(self, session):
        user = UserFactory()
        WatchHistoryEntryFactory(user=user, position=0)
        with pytest.raises(IntegrityError):
            WatchHistoryEntryFactory(user=user, position=0)

    def test_same_position_allowed_for_different_users(self, session):
        WatchHistoryEntryFactory(position=0)
        WatchHistoryEntryFactory(position=0)
        session.flush()

    def test_history_ordered_by_position(self, session):
        user = UserFactory()
        later = WatchHistoryEntryFactory(user=user, position=5)
        earlier = WatchHistoryEntryFactory(user=user, position=1)
        session.flush()
        session.expire(user, ["watch_history"])
        assert [e.id for e in user.watch_history] == [earlier.id, later.id]
