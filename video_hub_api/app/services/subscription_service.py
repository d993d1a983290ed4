"""
Business logic for channel subscriptions.

A subscription is a single ``subscriptions`` row linking the
subscriber to the channel; that row is what both the channel's
``subscribed_by`` list and the subscriber's ``subscribed_channels``
list are read from, so the two sides cannot drift apart.  The
channel's ``subscribers`` counter is updated in the same transaction
as the row, which keeps ``subscribers`` equal to the number of
followers even when several requests arrive at once.
"""

import logging
from typing import List

from video_hub_api.app.core.db import get_connection, transaction, utc_now
from video_hub_api.app.core.errors import ConflictError, InvalidRequestError, NotFoundError
from video_hub_api.app.schemas.user import SubscriptionResult, UserRead
from video_hub_api.app.services.user_service import UserService

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Subscribe/unsubscribe and the subscriber's channel list."""

    @classmethod
    async def subscribe(cls, subscriber_id: str, channel_id: str) -> SubscriptionResult:
        """Make ``subscriber_id`` follow ``channel_id``.

        Raises ``NotFoundError`` if either account is missing,
        ``InvalidRequestError`` for a self-subscription and
        ``ConflictError`` if the subscription already exists.
        """
        if subscriber_id == channel_id:
            raise InvalidRequestError("You cannot subscribe to your own channel")
        with transaction() as cursor:
            channel = cursor.execute("SELECT id FROM users WHERE id = ?", (channel_id,)).fetchone()
            if not channel:
                raise NotFoundError("Channel not found")
            subscriber = cursor.execute("SELECT id FROM users WHERE id = ?", (subscriber_id,)).fetchone()
            if not subscriber:
                raise NotFoundError("User not found")
            existing = cursor.execute(
                "SELECT 1 FROM subscriptions WHERE subscriber_id = ? AND channel_id = ?",
                (subscriber_id, channel_id),
            ).fetchone()
            if existing:
                raise ConflictError("You are already subscribed to this channel")
            now = utc_now()
            cursor.execute(
                "INSERT INTO subscriptions (subscriber_id, channel_id, created_at) VALUES (?, ?, ?)",
                (subscriber_id, channel_id, now),
            )
            cursor.execute(
                "UPDATE users SET subscribers = subscribers + 1, updated_at = ? WHERE id = ?",
                (now, channel_id),
            )
            count = cursor.execute(
                "SELECT subscribers FROM users WHERE id = ?", (channel_id,)
            ).fetchone()["subscribers"]
        logger.info("Channel %s subscribed to %s (%d subscribers)", subscriber_id, channel_id, count)
        return SubscriptionResult(msg="Channel Subscribed", channel_id=channel_id, subscribers=count)

    @classmethod
    async def unsubscribe(cls, subscriber_id: str, channel_id: str) -> SubscriptionResult:
        """Remove the subscription of ``subscriber_id`` to ``channel_id``.

        Raises ``NotFoundError`` if the channel is missing and
        ``ConflictError`` if there is no subscription to remove.
        """
        with transaction() as cursor:
            channel = cursor.execute("SELECT id FROM users WHERE id = ?", (channel_id,)).fetchone()
            if not channel:
                raise NotFoundError("Channel not found")
            deleted = cursor.execute(
                "DELETE FROM subscriptions WHERE subscriber_id = ? AND channel_id = ?",
                (subscriber_id, channel_id),
            ).rowcount
            if not deleted:
                raise ConflictError("You are not subscribed to this channel")
            cursor.execute(
                "UPDATE users SET subscribers = subscribers - 1, updated_at = ? WHERE id = ?",
                (utc_now(), channel_id),
            )
            count = cursor.execute(
                "SELECT subscribers FROM users WHERE id = ?", (channel_id,)
            ).fetchone()["subscribers"]
        logger.info("Channel %s unsubscribed from %s (%d subscribers)", subscriber_id, channel_id, count)
        return SubscriptionResult(msg="Channel Unsubscribed", channel_id=channel_id, subscribers=count)

    @classmethod
    async def list_subscribed_channels(cls, subscriber_id: str) -> List[UserRead]:
        """Return the channels ``subscriber_id`` follows, oldest subscription first."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not UserService.load_row(cursor, subscriber_id):
                raise NotFoundError("User not found")
            rows = cursor.execute(
                """
                SELECT u.id, u.channel_name, u.email, u.phone, u.password, u.logo_url, u.logo_id,
                       u.subscribers, u.created_at
                FROM subscriptions s JOIN users u ON u.id = s.channel_id
                WHERE s.subscriber_id = ?
                ORDER BY s.created_at
                """,
                (subscriber_id,),
            ).fetchall()
            return [UserService.to_read(cursor, row) for row in rows]
        finally:
            conn.close()
