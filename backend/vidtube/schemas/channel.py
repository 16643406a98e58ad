"""Channel read-model schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class ChannelProfileSchema(Schema):
    """Channel profile as seen by the requesting viewer."""

    full_name = fields.String(data_key="fullName")
    username = fields.String()
    subscribers_count = fields.Integer(data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(data_key="channelsSubscribedToCount")
    is_subscribed = fields.Boolean(data_key="isSubscribed")
    avatar_url = fields.String(data_key="avatar")
    cover_image_url = fields.String(data_key="coverImage", allow_none=True)
    email = fields.Email()


class VideoOwnerSchema(Schema):
    full_name = fields.String(data_key="fullName")
    username = fields.String()
    avatar_url = fields.String(data_key="avatar")


class WatchHistoryItemSchema(Schema):
    """A watched video with its owner flattened to a single object."""

    id = fields.Integer()
    video_file_url = fields.String(data_key="videoFile")
    thumbnail_url = fields.String(data_key="thumbnail")
    title = fields.String()
    description = fields.String()
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean(data_key="isPublished")
    owner = fields.Nested(VideoOwnerSchema, allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
