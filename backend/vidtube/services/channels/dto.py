"""
DTOs for ChannelService.

Read models computed per request; none of them is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """
    Public view of a channel as seen by a (possibly anonymous) viewer.

    :param full_name: Display name of the channel owner.
    :param username: Channel handle.
    :param subscribers_count: Distinct users subscribed to the channel.
    :param channels_subscribed_to_count: Distinct channels the owner follows.
    :param is_subscribed: Whether the viewer follows the channel.
    :param avatar_url: Avatar URL.
    :param cover_image_url: Cover image URL, if any.
    :param email: Contact email.
    """

    full_name: str
    username: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    avatar_url: str
    cover_image_url: str | None
    email: str


@dataclass(frozen=True, slots=True)
class VideoOwnerOut:
    """Owner projection nested in watch history items."""

    full_name: str
    username: str
    avatar_url: str


@dataclass(frozen=True, slots=True)
class WatchHistoryItemOut:
    """A watched video with its owner flattened to a single object."""

    id: int
    video_file_url: str
    thumbnail_url: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner: VideoOwnerOut | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
