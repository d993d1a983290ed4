"""
Business logic for playlists.

A playlist is owned by one channel and holds an ordered list of
distinct videos (``playlist_videos``, ordered by ``position``).  Only
the owner may rename it or change its members, and it can only be
deleted once it is empty.  Every change runs in a single transaction
so the duplicate check and the insert cannot interleave with another
request editing the same playlist.
"""

import logging
import sqlite3
from typing import Optional

from video_hub_api.app.core.db import get_connection, new_id, transaction, utc_now
from video_hub_api.app.core.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
)
from video_hub_api.app.schemas.common import ChannelBrief
from video_hub_api.app.schemas.playlist import (
    PlaylistAddVideo,
    PlaylistCreate,
    PlaylistPage,
    PlaylistRead,
    PlaylistRemoveVideo,
)
from video_hub_api.app.schemas.video import VideoBrief

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 4

PLAYLIST_SELECT = """
    SELECT p.id, p.user_id, p.title, p.created_at, p.updated_at,
           u.channel_name AS owner_channel_name, u.logo_url AS owner_logo_url
    FROM playlists p LEFT JOIN users u ON u.id = p.user_id
"""


class PlaylistService:
    """Сервис плейлистов.

    Создание плейлиста с первым видео, добавление и удаление видео,
    переименование, удаление пустого плейлиста и постраничный список.
    """

    @staticmethod
    def _to_read(cursor: sqlite3.Cursor, row: sqlite3.Row) -> PlaylistRead:
        members = cursor.execute(
            """
            SELECT v.id, v.title, v.thumbnail_url, v.video_url
            FROM playlist_videos pv JOIN videos v ON v.id = pv.video_id
            WHERE pv.playlist_id = ?
            ORDER BY pv.position
            """,
            (row["id"],),
        ).fetchall()
        owner = None
        if row["owner_channel_name"] is not None:
            owner = ChannelBrief(
                id=row["user_id"],
                channel_name=row["owner_channel_name"],
                logo_url=row["owner_logo_url"],
            )
        return PlaylistRead(
            id=row["id"],
            user_id=row["user_id"],
            owner=owner,
            title=row["title"],
            video_ids=[m["id"] for m in members],
            videos=[
                VideoBrief(
                    id=m["id"],
                    title=m["title"],
                    thumbnail_url=m["thumbnail_url"],
                    video_url=m["video_url"],
                )
                for m in members
            ],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _load_owned(cursor: sqlite3.Cursor, playlist_id: str, current_user: dict) -> sqlite3.Row:
        """Fetch a playlist for modification by its owner."""
        row = cursor.execute("SELECT id, user_id FROM playlists WHERE id = ?", (playlist_id,)).fetchone()
        if not row:
            raise NotFoundError("Playlist not found")
        if row["user_id"] != current_user.get("sub"):
            raise PermissionDeniedError("You are not authorized to update this playlist.")
        return row

    @staticmethod
    def _require_video(cursor: sqlite3.Cursor, video_id: str) -> None:
        if not cursor.execute("SELECT id FROM videos WHERE id = ?", (video_id,)).fetchone():
            raise NotFoundError("Video not found")

    @classmethod
    def _reload(cls, cursor: sqlite3.Cursor, playlist_id: str) -> PlaylistRead:
        row = cursor.execute(f"{PLAYLIST_SELECT} WHERE p.id = ?", (playlist_id,)).fetchone()
        return cls._to_read(cursor, row)

    @classmethod
    async def create_with_video(cls, video_id: str, data: PlaylistCreate, current_user: dict) -> PlaylistRead:
        """Create a playlist owned by the caller containing exactly ``video_id``."""
        if not data.title:
            raise InvalidRequestError("Playlist title is required")
        owner_id = current_user.get("sub")
        playlist_id = new_id()
        now = utc_now()
        with transaction() as cursor:
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (owner_id,)).fetchone():
                raise NotFoundError("User not found")
            cls._require_video(cursor, video_id)
            cursor.execute(
                "INSERT INTO playlists (id, user_id, title, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (playlist_id, owner_id, data.title, now, now),
            )
            cursor.execute(
                "INSERT INTO playlist_videos (playlist_id, video_id, position) VALUES (?, ?, 1)",
                (playlist_id, video_id),
            )
            result = cls._reload(cursor, playlist_id)
        logger.info("Channel %s created playlist %s with video %s", owner_id, playlist_id, video_id)
        return result

    @classmethod
    async def add_video(cls, playlist_id: str, data: PlaylistAddVideo, current_user: dict) -> PlaylistRead:
        """Rename the playlist and/or append a video to it.

        Existence and ownership are checked first.  A given title must
        not be blank.  A given video must exist and must not already be
        a member (``ConflictError``).  If any check fails nothing is
        changed.
        """
        with transaction() as cursor:
            cls._load_owned(cursor, playlist_id, current_user)
            if data.title is not None and not data.title:
                raise InvalidRequestError("Playlist title cannot be empty")
            now = utc_now()
            if data.title:
                cursor.execute(
                    "UPDATE playlists SET title = ?, updated_at = ? WHERE id = ?",
                    (data.title, now, playlist_id),
                )
            if data.video_id:
                cls._require_video(cursor, data.video_id)
                member = cursor.execute(
                    "SELECT 1 FROM playlist_videos WHERE playlist_id = ? AND video_id = ?",
                    (playlist_id, data.video_id),
                ).fetchone()
                if member:
                    raise ConflictError("Video already exists in playlist")
                cursor.execute(
                    """
                    INSERT INTO playlist_videos (playlist_id, video_id, position)
                    SELECT ?, ?, COALESCE(MAX(position), 0) + 1 FROM playlist_videos WHERE playlist_id = ?
                    """,
                    (playlist_id, data.video_id, playlist_id),
                )
                cursor.execute("UPDATE playlists SET updated_at = ? WHERE id = ?", (now, playlist_id))
            result = cls._reload(cursor, playlist_id)
        logger.info("Playlist %s updated (video=%s, title=%s)", playlist_id, data.video_id, data.title)
        return result

    @classmethod
    async def remove_video(cls, playlist_id: str, data: PlaylistRemoveVideo, current_user: dict) -> PlaylistRead:
        """Remove a member video from the playlist."""
        if not data.video_id:
            raise InvalidRequestError("Video id is required")
        with transaction() as cursor:
            cls._load_owned(cursor, playlist_id, current_user)
            removed = cursor.execute(
                "DELETE FROM playlist_videos WHERE playlist_id = ? AND video_id = ?",
                (playlist_id, data.video_id),
            ).rowcount
            if not removed:
                raise NotFoundError("Video not found in playlist")
            cursor.execute("UPDATE playlists SET updated_at = ? WHERE id = ?", (utc_now(), playlist_id))
            result = cls._reload(cursor, playlist_id)
        logger.info("Video %s removed from playlist %s", data.video_id, playlist_id)
        return result

    @classmethod
    async def delete_playlist(cls, playlist_id: str, current_user: dict) -> None:
        """Delete an empty playlist.  Raises ``ConflictError`` if it still has videos."""
        with transaction() as cursor:
            cls._load_owned(cursor, playlist_id, current_user)
            count = cursor.execute(
                "SELECT COUNT(*) AS count FROM playlist_videos WHERE playlist_id = ?",
                (playlist_id,),
            ).fetchone()["count"]
            if count > 0:
                raise ConflictError("This playlist is not empty")
            cursor.execute("DELETE FROM playlists WHERE id = ?", (playlist_id,))
        logger.info("Playlist %s deleted", playlist_id)

    @classmethod
    async def get_playlist(cls, playlist_id: str) -> PlaylistRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(f"{PLAYLIST_SELECT} WHERE p.id = ?", (playlist_id,)).fetchone()
            if not row:
                raise NotFoundError("Playlist not found")
            return cls._to_read(cursor, row)
        finally:
            conn.close()

    @classmethod
    async def list_page(cls, page: Optional[int] = None, limit: Optional[int] = None) -> PlaylistPage:
        """Return one page of playlists, newest first.

        ``page`` defaults to 1 and ``limit`` to 4.  ``has_more`` is true
        while ``page * limit`` is below the total number of playlists.
        """
        page = page or DEFAULT_PAGE
        limit = limit or DEFAULT_PAGE_SIZE
        if page < 1 or limit < 1:
            raise InvalidRequestError("page and limit must be positive")
        offset = (page - 1) * limit
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                f"{PLAYLIST_SELECT} ORDER BY p.created_at DESC, p.rowid DESC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
            total = cursor.execute("SELECT COUNT(*) AS count FROM playlists").fetchone()["count"]
            playlists = [cls._to_read(cursor, row) for row in rows]
        finally:
            conn.close()
        return PlaylistPage(
            playlists=playlists,
            page=page,
            limit=limit,
            total=total,
            has_more=page * limit < total,
        )
