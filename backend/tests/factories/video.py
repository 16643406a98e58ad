"""Factory Boy definitions for videos and watch history entries."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from vidtube.models.video import Video, WatchHistoryEntry


class VideoFactory(BaseFactory):
    """Create published videos owned by a fresh channel."""

    class Meta:
        model = Video

    id = None
    owner = factory.SubFactory(UserFactory)
    video_file_url = factory.Sequence(lambda n: f"https://media.test/videos/{n}.mp4")
    thumbnail_url = factory.Sequence(lambda n: f"https://media.test/thumbs/{n}.jpg")
    title = factory.Sequence(lambda n: f"Video {n}")
    description = factory.Faker("sentence")
    duration = 120.5
    views = 0
    is_published = True


class WatchHistoryEntryFactory(BaseFactory):
    """Attach a video to a user's history at an explicit position."""

    class Meta:
        model = WatchHistoryEntry

    id = None
    user = factory.SubFactory(UserFactory)
    video = factory.SubFactory(VideoFactory)
    position = factory.Sequence(lambda n: n)
