"""
Business logic for video comments.

Comments belong to a video and to the channel that wrote them.  Only
the author may edit or delete a comment.
"""

import logging
import sqlite3
from typing import List

from video_hub_api.app.core.db import get_connection, new_id, transaction, utc_now
from video_hub_api.app.core.errors import InvalidRequestError, NotFoundError, PermissionDeniedError
from video_hub_api.app.schemas.comment import CommentCreate, CommentRead
from video_hub_api.app.schemas.common import ChannelBrief

logger = logging.getLogger(__name__)

COMMENT_SELECT = """
    SELECT c.id, c.video_id, c.user_id, c.comment_text, c.created_at, c.updated_at,
           u.channel_name AS author_channel_name, u.logo_url AS author_logo_url
    FROM comments c LEFT JOIN users u ON u.id = c.user_id
"""


def _to_read(row: sqlite3.Row) -> CommentRead:
    author = None
    if row["author_channel_name"] is not None:
        author = ChannelBrief(
            id=row["user_id"],
            channel_name=row["author_channel_name"],
            logo_url=row["author_logo_url"],
        )
    return CommentRead(
        id=row["id"],
        video_id=row["video_id"],
        user_id=row["user_id"],
        author=author,
        comment_text=row["comment_text"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _require_text(data: CommentCreate) -> str:
    if not data.comment_text:
        raise InvalidRequestError("Comment text is required")
    return data.comment_text


class CommentService:
    """Service for posting, listing, editing and deleting comments."""

    @classmethod
    async def create_comment(cls, video_id: str, data: CommentCreate, current_user: dict) -> CommentRead:
        """Post a comment on a video.  The video and the author must exist."""
        text = _require_text(data)
        user_id = current_user.get("sub")
        comment_id = new_id()
        now = utc_now()
        with transaction() as cursor:
            if not cursor.execute("SELECT id FROM videos WHERE id = ?", (video_id,)).fetchone():
                raise NotFoundError("Video not found")
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError("User not found")
            cursor.execute(
                """
                INSERT INTO comments (id, video_id, user_id, comment_text, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (comment_id, video_id, user_id, text, now, now),
            )
            row = cursor.execute(f"{COMMENT_SELECT} WHERE c.id = ?", (comment_id,)).fetchone()
        logger.info("Channel %s commented on video %s", user_id, video_id)
        return _to_read(row)

    @classmethod
    async def list_comments(cls, video_id: str) -> List[CommentRead]:
        """Comments of a video with author fields, oldest first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                f"{COMMENT_SELECT} WHERE c.video_id = ? ORDER BY c.created_at, c.rowid",
                (video_id,),
            ).fetchall()
            return [_to_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def update_comment(cls, comment_id: str, data: CommentCreate, current_user: dict) -> CommentRead:
        text = _require_text(data)
        with transaction() as cursor:
            row = cursor.execute("SELECT id, user_id FROM comments WHERE id = ?", (comment_id,)).fetchone()
            if not row:
                raise NotFoundError("Comment not found")
            if row["user_id"] != current_user.get("sub"):
                raise PermissionDeniedError("You are not authorized to update this comment.")
            cursor.execute(
                "UPDATE comments SET comment_text = ?, updated_at = ? WHERE id = ?",
                (text, utc_now(), comment_id),
            )
            updated = cursor.execute(f"{COMMENT_SELECT} WHERE c.id = ?", (comment_id,)).fetchone()
        return _to_read(updated)

    @classmethod
    async def delete_comment(cls, comment_id: str, current_user: dict) -> None:
        with transaction() as cursor:
            row = cursor.execute("SELECT id, user_id FROM comments WHERE id = ?", (comment_id,)).fetchone()
            if not row:
                raise NotFoundError("Comment not found")
            if row["user_id"] != current_user.get("sub"):
                raise PermissionDeniedError("You are not authorized to delete this comment.")
            cursor.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
        logger.info("Comment %s deleted", comment_id)
