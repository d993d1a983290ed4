"""
Business logic for videos.

Covers uploads, owner edits and deletion, the public listings (by id,
category, channel and subscriptions) and the view counter.  Media
files go through ``MediaStorage``; the database stores their URLs and
public ids.  Reactions live in ``reaction_service``.
"""

import json
import logging
import sqlite3
from typing import List, Optional

from fastapi import UploadFile

from video_hub_api.app.core.db import get_connection, new_id, transaction, utc_now
from video_hub_api.app.core.errors import InvalidRequestError, NotFoundError, PermissionDeniedError
from video_hub_api.app.core.media import MediaStorage, StoredMedia
from video_hub_api.app.schemas.common import ChannelBrief
from video_hub_api.app.schemas.video import VideoCreate, VideoRead, VideoUpdate, ViewResult

logger = logging.getLogger(__name__)

VIDEO_SELECT = """
    SELECT v.id, v.user_id, v.title, v.description, v.category, v.tags,
           v.video_url, v.video_public_id, v.thumbnail_url, v.thumbnail_public_id,
           v.likes, v.dislikes, v.views, v.created_at, v.updated_at,
           u.channel_name AS owner_channel_name, u.logo_url AS owner_logo_url,
           u.subscribers AS owner_subscribers
    FROM videos v LEFT JOIN users u ON u.id = v.user_id
"""


class VideoService:
    """Service for uploading, editing, listing and counting views of videos."""

    @staticmethod
    def to_read(cursor: sqlite3.Cursor, row: sqlite3.Row) -> VideoRead:
        """Project a row from ``VIDEO_SELECT`` with its owner and reaction lists."""
        reactions = cursor.execute(
            "SELECT user_id, reaction FROM video_reactions WHERE video_id = ? ORDER BY created_at",
            (row["id"],),
        ).fetchall()
        owner = None
        if row["owner_channel_name"] is not None:
            owner = ChannelBrief(
                id=row["user_id"],
                channel_name=row["owner_channel_name"],
                logo_url=row["owner_logo_url"],
                subscribers=row["owner_subscribers"],
            )
        return VideoRead(
            id=row["id"],
            user_id=row["user_id"],
            owner=owner,
            title=row["title"],
            description=row["description"],
            category=row["category"],
            tags=json.loads(row["tags"]) if row["tags"] else [],
            video_url=row["video_url"],
            thumbnail_url=row["thumbnail_url"],
            likes=row["likes"],
            dislikes=row["dislikes"],
            liked_by=[r["user_id"] for r in reactions if r["reaction"] == "like"],
            disliked_by=[r["user_id"] for r in reactions if r["reaction"] == "dislike"],
            views=row["views"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @classmethod
    def _query(cls, where: str = "", params: tuple = (), order: str = "v.created_at DESC, v.rowid DESC") -> List[VideoRead]:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            sql = VIDEO_SELECT
            if where:
                sql += f" WHERE {where}"
            sql += f" ORDER BY {order}"
            rows = cursor.execute(sql, params).fetchall()
            return [cls.to_read(cursor, row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def upload_video(
        cls,
        data: VideoCreate,
        current_user: dict,
        media: MediaStorage,
        video_file: UploadFile,
        thumbnail: UploadFile,
    ) -> VideoRead:
        """Store the media files and create the video record.

        Both files are required.  If the insert fails the stored files
        are removed again.
        """
        title = (data.title or "").strip()
        if not title:
            raise InvalidRequestError("Video title is required")
        if video_file is None or not video_file.filename:
            raise InvalidRequestError("Video file is required")
        if thumbnail is None or not thumbnail.filename:
            raise InvalidRequestError("Thumbnail is required")
        owner_id = current_user.get("sub")

        stored: List[StoredMedia] = []
        try:
            video_media = await media.save_upload(video_file, resource_type="video")
            stored.append(video_media)
            thumb_media = await media.save_upload(thumbnail, resource_type="image")
            stored.append(thumb_media)

            video_id = new_id()
            now = utc_now()
            with transaction() as cursor:
                if not cursor.execute("SELECT id FROM users WHERE id = ?", (owner_id,)).fetchone():
                    raise NotFoundError("User not found")
                cursor.execute(
                    """
                    INSERT INTO videos (id, user_id, title, description, category, tags,
                                        video_url, video_public_id, thumbnail_url, thumbnail_public_id,
                                        likes, dislikes, views, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, 0, 0, ?, ?)
                    """,
                    (
                        video_id,
                        owner_id,
                        title,
                        data.description,
                        data.category,
                        json.dumps(data.tags),
                        video_media.url,
                        video_media.public_id,
                        thumb_media.url,
                        thumb_media.public_id,
                        now,
                        now,
                    ),
                )
                row = cursor.execute(f"{VIDEO_SELECT} WHERE v.id = ?", (video_id,)).fetchone()
                result = cls.to_read(cursor, row)
        except Exception:
            for item in stored:
                media.destroy(item.public_id)
            raise
        logger.info("Channel %s uploaded video %s", owner_id, video_id)
        return result

    @classmethod
    async def get_video(cls, video_id: str) -> VideoRead:
        """Retrieve a single video with its owner's channel fields."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(f"{VIDEO_SELECT} WHERE v.id = ?", (video_id,)).fetchone()
            if not row:
                raise NotFoundError("Video not found")
            return cls.to_read(cursor, row)
        finally:
            conn.close()

    @classmethod
    async def list_own_videos(cls, current_user: dict) -> List[VideoRead]:
        return cls._query("v.user_id = ?", (current_user.get("sub"),))

    @classmethod
    async def list_by_category(cls, category: str) -> List[VideoRead]:
        return cls._query("v.category = ?", (category,))

    @classmethod
    async def list_subscribed_videos(cls, current_user: dict) -> List[VideoRead]:
        """Videos uploaded by the channels the caller follows, newest first."""
        subscriber_id = current_user.get("sub")
        conn = get_connection()
        try:
            if not conn.execute("SELECT id FROM users WHERE id = ?", (subscriber_id,)).fetchone():
                raise NotFoundError("User not found")
        finally:
            conn.close()
        return cls._query(
            "v.user_id IN (SELECT channel_id FROM subscriptions WHERE subscriber_id = ?)",
            (subscriber_id,),
        )

    @classmethod
    async def list_channel_videos(cls, channel_id: str) -> List[VideoRead]:
        """Videos of one channel, newest first.

        Raises ``NotFoundError`` when the channel has no videos.
        """
        videos = cls._query("v.user_id = ?", (channel_id,))
        if not videos:
            raise NotFoundError("No videos found for this channel")
        return videos

    @classmethod
    async def update_video(
        cls,
        video_id: str,
        current_user: dict,
        updates: VideoUpdate,
        media: MediaStorage,
        thumbnail: Optional[UploadFile] = None,
    ) -> VideoRead:
        """Edit a video's details.

        Only the owner may edit.  A new thumbnail replaces the stored
        one; the previous object is removed once the row is saved.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, user_id, thumbnail_public_id FROM videos WHERE id = ?",
                (video_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Video not found")
        if row["user_id"] != current_user.get("sub"):
            raise PermissionDeniedError("You are not authorized to update this video.")

        fields: dict = {}
        if updates.title is not None:
            if not updates.title.strip():
                raise InvalidRequestError("Video title cannot be empty")
            fields["title"] = updates.title.strip()
        if updates.description is not None:
            fields["description"] = updates.description
        if updates.category is not None:
            fields["category"] = updates.category
        if updates.tags is not None:
            fields["tags"] = json.dumps(updates.tags)

        stored: Optional[StoredMedia] = None
        if thumbnail is not None and thumbnail.filename:
            stored = await media.save_upload(thumbnail, resource_type="image")
            fields["thumbnail_url"] = stored.url
            fields["thumbnail_public_id"] = stored.public_id

        try:
            with transaction() as cursor:
                if fields:
                    assignments = ", ".join(f"{key} = ?" for key in fields)
                    cursor.execute(
                        f"UPDATE videos SET {assignments}, updated_at = ? WHERE id = ?",
                        (*fields.values(), utc_now(), video_id),
                    )
                updated = cursor.execute(f"{VIDEO_SELECT} WHERE v.id = ?", (video_id,)).fetchone()
                if not updated:
                    raise NotFoundError("Video not found")
                result = cls.to_read(cursor, updated)
        except Exception:
            if stored:
                media.destroy(stored.public_id)
            raise
        if stored:
            media.destroy(row["thumbnail_public_id"])
        logger.info("Video %s updated", video_id)
        return result

    @classmethod
    async def delete_video(cls, video_id: str, current_user: dict, media: MediaStorage) -> VideoRead:
        """Delete a video and everything that references it.

        Reactions, comments and playlist memberships are removed in the
        same transaction as the video; the media files are removed
        afterwards.  Returns the deleted video's last state.
        """
        with transaction() as cursor:
            row = cursor.execute(f"{VIDEO_SELECT} WHERE v.id = ?", (video_id,)).fetchone()
            if not row:
                raise NotFoundError("Video not found")
            if row["user_id"] != current_user.get("sub"):
                raise PermissionDeniedError("You are not authorized to delete this video.")
            deleted = cls.to_read(cursor, row)
            cursor.execute("DELETE FROM video_reactions WHERE video_id = ?", (video_id,))
            cursor.execute("DELETE FROM comments WHERE video_id = ?", (video_id,))
            cursor.execute("DELETE FROM playlist_videos WHERE video_id = ?", (video_id,))
            cursor.execute("DELETE FROM videos WHERE id = ?", (video_id,))
        media.destroy(row["thumbnail_public_id"])
        media.destroy(row["video_public_id"])
        logger.info("Video %s deleted by its owner", video_id)
        return deleted

    @classmethod
    async def record_view(cls, video_id: str) -> ViewResult:
        """Count one view.  Every call counts, repeats included."""
        with transaction() as cursor:
            updated = cursor.execute(
                "UPDATE videos SET views = views + 1 WHERE id = ?",
                (video_id,),
            ).rowcount
            if not updated:
                raise NotFoundError("Video not found")
            views = cursor.execute("SELECT views FROM videos WHERE id = ?", (video_id,)).fetchone()["views"]
        return ViewResult(msg="Video Viewed", video_id=video_id, views=views)
