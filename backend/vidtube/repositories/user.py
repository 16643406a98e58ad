"""User repository: lookups, atomic token columns and channel read models."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Row, distinct, func, literal, or_, select, update
from sqlalchemy.orm import aliased

from vidtube.models.subscription import Subscription
from vidtube.models.user import User
from vidtube.models.video import Video, WatchHistoryEntry
from vidtube.repositories.base import BaseRepository


def _norm(value: str) -> str:
    return value.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER issues or verifies JWTs; it only stores the refresh token string
    handed over by the service and compares it atomically on rotation.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _filterable_fields(self):
        """Whitelist fields safe for equality filters."""
        return {
            "email": User.email,
            "username": User.username,
        }

    def _updatable_fields(self):
        """Publicly allowed updatable fields (not including password or tokens)."""
        return {"email", "full_name", "avatar_url", "cover_image_url"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> User | None:
        """Fetch the user matching either identifier.

        :returns: First match or ``None`` when neither identifier is given.
        """
        clauses = []
        if username:
            clauses.append(User.username == _norm(username))
        if email:
            clauses.append(User.email == _norm(email))
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id).limit(1)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username_or_email(self, *, username: str, email: str) -> bool:
        """Return ``True`` when either identifier is already taken."""
        stmt = select(User.id).where(
            or_(User.username == _norm(username), User.email == _norm(email))
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    def exists_by_email(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another user already uses ``email``."""
        stmt = select(User.id).where(User.email == _norm(email))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user_id: int, new_password: str) -> None:
        """Re-hash and store a new password.

        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if not user:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password  # invokes setter → hash
        self.flush()

    # ---------------------------- Refresh token column ----------------------------

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Overwrite the stored refresh token with a single-column UPDATE.

        :returns: ``True`` if the user row exists.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session="fetch")
        )
        return bool(self.session.execute(stmt).rowcount)

    def clear_refresh_token(self, user_id: int) -> bool:
        """Unset the stored refresh token. Idempotent."""
        return self.set_refresh_token(user_id, None)

    def compare_and_set_refresh_token(self, user_id: int, *, expected: str, new: str) -> bool:
        """Swap ``expected`` for ``new`` only if ``expected`` is still stored.

        A single conditional UPDATE; when two callers race with the same
        ``expected`` value exactly one of them sees an affected row.

        :returns: ``True`` if the swap happened.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
            .execution_options(synchronize_session="fetch")
        )
        return self.session.execute(stmt).rowcount == 1

    # ---------------------------- Watch history ----------------------------

    def append_to_watch_history(self, user_id: int, video_id: int) -> WatchHistoryEntry:
        """Append ``video_id`` at the end of the user's watch history."""
        next_position = self.session.execute(
            select(func.coalesce(func.max(WatchHistoryEntry.position), -1) + 1).where(
                WatchHistoryEntry.user_id == user_id
            )
        ).scalar_one()
        entry = WatchHistoryEntry(user_id=user_id, video_id=video_id, position=int(next_position))
        self.session.add(entry)
        self.flush()
        return entry

    def watch_history(self, user_id: int) -> list[Row[Any]]:
        """Return ``(Video, owner)`` rows in stored order.

        Entries pointing at a missing video are dropped by the inner join;
        ``owner`` is ``None`` for videos without an owner.
        """
        owner = aliased(User, name="owner")
        stmt = (
            select(Video, owner)
            .select_from(WatchHistoryEntry)
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .outerjoin(owner, owner.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == user_id)
            .order_by(WatchHistoryEntry.position.asc(), WatchHistoryEntry.id.asc())
        )
        return list(self.session.execute(stmt).all())

    # ---------------------------- Channel profile ----------------------------

    def channel_profile(self, username: str, *, viewer_id: int | None = None) -> Row[Any] | None:
        """Resolve a channel and its subscription aggregates in one statement.

        Counts use DISTINCT ids so duplicated edges are not double counted.
        ``is_subscribed`` is false for anonymous viewers.
        """
        subscribers_count = (
            select(func.count(distinct(Subscription.subscriber_id)))
            .where(Subscription.channel_id == User.id)
            .scalar_subquery()
        )
        channels_subscribed_to_count = (
            select(func.count(distinct(Subscription.channel_id)))
            .where(Subscription.subscriber_id == User.id)
            .scalar_subquery()
        )
        if viewer_id is None:
            is_subscribed: Any = literal(False)
        else:
            is_subscribed = (
                select(Subscription.id)
                .where(Subscription.channel_id == User.id, Subscription.subscriber_id == viewer_id)
                .exists()
            )

        stmt = select(
            User.full_name,
            User.username,
            subscribers_count.label("subscribers_count"),
            channels_subscribed_to_count.label("channels_subscribed_to_count"),
            is_subscribed.label("is_subscribed"),
            User.avatar_url,
            User.cover_image_url,
            User.email,
        ).where(User.username == _norm(username))
        return self.session.execute(stmt).first()
