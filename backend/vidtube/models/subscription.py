"""Directed "subscriber follows channel" edges."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Subscription(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Edge from ``subscriber`` to ``channel``; both ends are users.

    There is no uniqueness constraint on the pair. Counting queries use
    DISTINCT ids so a duplicated edge never inflates a count.
    """

    __tablename__ = "subscriptions"

    subscriber_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    channel_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    subscriber: Mapped[User] = relationship(foreign_keys=[subscriber_id])
    channel: Mapped[User] = relationship(foreign_keys=[channel_id])
