"""Unit tests for SubscriptionRepository."""

import pytest

from tests.factories.user import UserFactory
from vidtube.repositories.subscription import SubscriptionRepository


class TestSubscriptionRepository:
    @pytest.fixture()
    def repo(self):
        return SubscriptionRepository()

    def test_subscribe_and_check(self, repo, session):
        fan, channel = UserFactory(), UserFactory()
        session.flush()

        edge = repo.subscribe(subscriber_id=fan.id, channel_id=channel.id)

        assert edge.id is not None
        assert repo.is_subscribed(subscriber_id=fan.id, channel_id=channel.id)
        # Edges are directed
        assert not repo.is_subscribed(subscriber_id=channel.id, channel_id=fan.id)

    def test_counts_are_distinct(self, repo, session):
        fan, channel = UserFactory(), UserFactory()
        session.flush()
        repo.subscribe(subscriber_id=fan.id, channel_id=channel.id)
        repo.subscribe(subscriber_id=fan.id, channel_id=channel.id)

        assert repo.count_subscribers(channel.id) == 1
        assert repo.count_subscriptions(fan.id) == 1
        assert repo.count_subscribers(fan.id) == 0

    def test_unsubscribe_removes_all_edges(self, repo, session):
        fan, channel = UserFactory(), UserFactory()
        session.flush()
        repo.subscribe(subscriber_id=fan.id, channel_id=channel.id)
        repo.subscribe(subscriber_id=fan.id, channel_id=channel.id)

        assert repo.unsubscribe(subscriber_id=fan.id, channel_id=channel.id) == 2
        assert not repo.is_subscribed(subscriber_id=fan.id, channel_id=channel.id)
        assert repo.unsubscribe(subscriber_id=fan.id, channel_id=channel.id) == 0
