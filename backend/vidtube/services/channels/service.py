"""
ChannelService
==============

Read-only aggregations over users, subscriptions and videos:
- Channel profile with subscription counts and the viewer's subscription state
- Watch history with each video's owner
"""

from __future__ import annotations

from vidtube.services._shared.base import BaseService
from vidtube.services._shared.errors import BadRequestError, NotFoundError
from vidtube.services.channels.dto import (
    ChannelProfileOut,
    VideoOwnerOut,
    WatchHistoryItemOut,
)


class ChannelService(BaseService):
    """Application service building channel-facing read models."""

    def get_channel_profile(self, username: str | None, viewer_id: int | None = None) -> ChannelProfileOut:
        """
        Resolve a channel by username for ``viewer_id``.

        :param username: Channel handle; matched case-insensitively.
        :param viewer_id: Authenticated viewer, or ``None`` for anonymous.
        :raises BadRequestError: When ``username`` is blank.
        :raises NotFoundError: When no such channel exists.
        """
        if not username or not username.strip():
            raise BadRequestError("username is missing")

        with self.ro_uow() as uow:
            row = uow.users.channel_profile(username, viewer_id=viewer_id)

        if row is None:
            raise NotFoundError("channel does not exist")

        return ChannelProfileOut(
            full_name=row.full_name,
            username=row.username,
            subscribers_count=int(row.subscribers_count or 0),
            channels_subscribed_to_count=int(row.channels_subscribed_to_count or 0),
            is_subscribed=bool(row.is_subscribed),
            avatar_url=row.avatar_url,
            cover_image_url=row.cover_image_url,
            email=row.email,
        )

    def get_watch_history(self, viewer_id: int) -> list[WatchHistoryItemOut]:
        """
        Return the viewer's watch history in stored order.

        :raises NotFoundError: When the viewer does not exist.
        """
        with self.ro_uow() as uow:
            if uow.users.get(viewer_id) is None:
                raise NotFoundError("User does not exist")

            items: list[WatchHistoryItemOut] = []
            for video, owner in uow.users.watch_history(viewer_id):
                items.append(
                    WatchHistoryItemOut(
                        id=video.id,
                        video_file_url=video.video_file_url,
                        thumbnail_url=video.thumbnail_url,
                        title=video.title,
                        description=video.description,
                        duration=float(video.duration),
                        views=int(video.views),
                        is_published=bool(video.is_published),
                        owner=(
                            VideoOwnerOut(
                                full_name=owner.full_name,
                                username=owner.username,
                                avatar_url=owner.avatar_url,
                            )
                            if owner is not None
                            else None
                        ),
                        created_at=video.created_at,
                        updated_at=video.updated_at,
                    )
                )
            return items
