"""Subscription edge repository."""

from __future__ import annotations

from sqlalchemy import delete, distinct, func, select

from vidtube.models.subscription import Subscription
from vidtube.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Persistence helpers for ``subscriber -> channel`` edges."""

    model = Subscription

    def subscribe(self, *, subscriber_id: int, channel_id: int) -> Subscription:
        """Insert an edge. Duplicates are tolerated by the counting queries."""
        return self.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))

    def unsubscribe(self, *, subscriber_id: int, channel_id: int) -> int:
        """Remove every edge between the pair.

        :returns: Number of deleted rows.
        """
        stmt = delete(Subscription).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def is_subscribed(self, *, subscriber_id: int, channel_id: int) -> bool:
        return self.exists(subscriber_id=subscriber_id, channel_id=channel_id)

    def count_subscribers(self, channel_id: int) -> int:
        stmt = select(func.count(distinct(Subscription.subscriber_id))).where(
            Subscription.channel_id == channel_id
        )
        return int(self.session.execute(stmt).scalar_one())

    def count_subscriptions(self, subscriber_id: int) -> int:
        stmt = select(func.count(distinct(Subscription.channel_id))).where(
            Subscription.subscriber_id == subscriber_id
        )
        return int(self.session.execute(stmt).scalar_one())
