"""
Business logic for likes and dislikes.

Each (account, video) pair has at most one row in ``video_reactions``
holding either ``like`` or ``dislike``; the ``likes`` and ``dislikes``
counters on the video are adjusted in the same transaction as the row.
A repeated identical reaction is rejected rather than ignored, so a
client that double-submits finds out about it.
"""

import logging

from video_hub_api.app.core.db import transaction, utc_now
from video_hub_api.app.core.errors import ConflictError, NotFoundError
from video_hub_api.app.schemas.video import ReactionResult

logger = logging.getLogger(__name__)

LIKE = "like"
DISLIKE = "dislike"

# reaction -> counter column on ``videos``
_COUNTERS = {LIKE: "likes", DISLIKE: "dislikes"}
_OPPOSITE = {LIKE: DISLIKE, DISLIKE: LIKE}
_DUPLICATE_MESSAGES = {
    LIKE: "You have already liked this video.",
    DISLIKE: "You have already disliked this video.",
}
_SUCCESS_MESSAGES = {LIKE: "Video Liked", DISLIKE: "Video disliked"}


class ReactionService:
    """Service maintaining per-channel reactions and the video counters."""

    @classmethod
    async def like(cls, user_id: str, video_id: str) -> ReactionResult:
        return await cls.react(user_id, video_id, LIKE)

    @classmethod
    async def dislike(cls, user_id: str, video_id: str) -> ReactionResult:
        return await cls.react(user_id, video_id, DISLIKE)

    @classmethod
    async def react(cls, user_id: str, video_id: str, reaction: str) -> ReactionResult:
        """Set ``reaction`` for ``user_id`` on ``video_id``.

        Raises ``NotFoundError`` if the video is missing and
        ``ConflictError`` if the same reaction is already set.  An
        opposite reaction is switched over: its counter goes down by one
        and the requested counter goes up by one.
        """
        if reaction not in _COUNTERS:
            raise ValueError(f"Unknown reaction: {reaction}")
        counter = _COUNTERS[reaction]
        with transaction() as cursor:
            video = cursor.execute("SELECT id FROM videos WHERE id = ?", (video_id,)).fetchone()
            if not video:
                raise NotFoundError("Video not found")
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError("User not found")
            current = cursor.execute(
                "SELECT reaction FROM video_reactions WHERE user_id = ? AND video_id = ?",
                (user_id, video_id),
            ).fetchone()
            if current and current["reaction"] == reaction:
                raise ConflictError(_DUPLICATE_MESSAGES[reaction])
            if current:
                opposite_counter = _COUNTERS[_OPPOSITE[reaction]]
                cursor.execute(
                    "UPDATE video_reactions SET reaction = ?, created_at = ? WHERE user_id = ? AND video_id = ?",
                    (reaction, utc_now(), user_id, video_id),
                )
                cursor.execute(
                    f"UPDATE videos SET {opposite_counter} = {opposite_counter} - 1 WHERE id = ?",
                    (video_id,),
                )
            else:
                cursor.execute(
                    "INSERT INTO video_reactions (user_id, video_id, reaction, created_at) VALUES (?, ?, ?, ?)",
                    (user_id, video_id, reaction, utc_now()),
                )
            cursor.execute(
                f"UPDATE videos SET {counter} = {counter} + 1 WHERE id = ?",
                (video_id,),
            )
            counts = cursor.execute(
                "SELECT likes, dislikes FROM videos WHERE id = ?", (video_id,)
            ).fetchone()
        logger.info(
            "Channel %s set %s on video %s (likes=%d, dislikes=%d)",
            user_id, reaction, video_id, counts["likes"], counts["dislikes"],
        )
        return ReactionResult(
            msg=_SUCCESS_MESSAGES[reaction],
            video_id=video_id,
            likes=counts["likes"],
            dislikes=counts["dislikes"],
        )
