"""
Business logic for channels (user accounts).

The ``UserService`` registers channels, authenticates them, edits
profiles and builds the public channel projection.  Passwords are
stored as PBKDF2 hashes (see ``core.security``); logos are kept in the
media storage and only their URL and public id are stored here.
"""

import logging
import sqlite3
from typing import Optional

from fastapi import UploadFile

from video_hub_api.app.core.db import get_connection, new_id, transaction, utc_now
from video_hub_api.app.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
)
from video_hub_api.app.core.media import MediaStorage, StoredMedia
from video_hub_api.app.core.security import (
    TokenManager,
    hash_password,
    identity_claims,
    verify_password,
)
from video_hub_api.app.schemas.user import (
    LoginResponse,
    UserCreate,
    UserLogin,
    UserRead,
    UserUpdate,
)

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, channel_name, email, phone, password, logo_url, logo_id, subscribers, created_at"


class UserService:
    """Сервис для работы с каналами (учётными записями).

    Регистрация, вход, редактирование профиля и чтение канала.  Списки
    подписчиков и подписок строятся из таблицы ``subscriptions``.
    """

    @staticmethod
    def load_row(cursor: sqlite3.Cursor, user_id: str) -> Optional[sqlite3.Row]:
        """Fetch a ``users`` row or ``None``."""
        return cursor.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()

    @staticmethod
    def to_read(cursor: sqlite3.Cursor, row: sqlite3.Row) -> UserRead:
        """Project a ``users`` row, joining both sides of its subscriptions."""
        followers = cursor.execute(
            "SELECT subscriber_id FROM subscriptions WHERE channel_id = ? ORDER BY created_at",
            (row["id"],),
        ).fetchall()
        following = cursor.execute(
            "SELECT channel_id FROM subscriptions WHERE subscriber_id = ? ORDER BY created_at",
            (row["id"],),
        ).fetchall()
        return UserRead(
            id=row["id"],
            channel_name=row["channel_name"],
            email=row["email"],
            phone=row["phone"],
            logo_url=row["logo_url"],
            subscribers=row["subscribers"],
            subscribed_by=[r["subscriber_id"] for r in followers],
            subscribed_channels=[r["channel_id"] for r in following],
            created_at=row["created_at"],
        )

    @classmethod
    async def create_user(
        cls,
        data: UserCreate,
        media: MediaStorage,
        logo: Optional[UploadFile] = None,
    ) -> UserRead:
        """Register a new channel.

        Rejects blank required fields and e-mails that are already
        registered.  The logo, if any, is stored before the row is
        inserted and removed again if the insert fails.
        """
        channel_name = (data.channel_name or "").strip()
        email = (data.email or "").strip().lower()
        if not channel_name:
            raise InvalidRequestError("Channel name is required")
        if not email:
            raise InvalidRequestError("Email is required")
        if not data.password:
            raise InvalidRequestError("Password is required")

        conn = get_connection()
        try:
            exists = conn.execute("SELECT id FROM users WHERE email = ?", (email,)).fetchone()
        finally:
            conn.close()
        if exists:
            raise ConflictError("Email already exists")

        stored: Optional[StoredMedia] = None
        if logo is not None and logo.filename:
            stored = await media.save_upload(logo, resource_type="image")

        user_id = new_id()
        now = utc_now()
        try:
            with transaction() as cursor:
                cursor.execute(
                    """
                    INSERT INTO users (id, channel_name, email, phone, password, logo_url, logo_id,
                                       subscribers, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
                    """,
                    (
                        user_id,
                        channel_name,
                        email,
                        data.phone,
                        hash_password(data.password),
                        stored.url if stored else None,
                        stored.public_id if stored else None,
                        now,
                        now,
                    ),
                )
                row = cls.load_row(cursor, user_id)
                result = cls.to_read(cursor, row)
        except sqlite3.IntegrityError:
            # Another signup with the same e-mail won the race.
            if stored:
                media.destroy(stored.public_id)
            raise ConflictError("Email already exists")
        logger.info("Registered channel %s (%s)", user_id, email)
        return result

    @classmethod
    async def login(cls, data: UserLogin, tokens: TokenManager) -> LoginResponse:
        """Check credentials and issue a bearer token.

        Unknown e-mails and wrong passwords produce the same error so
        that the endpoint does not reveal which accounts exist.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE email = ?",
                ((data.email or "").strip().lower(),),
            ).fetchone()
            if not row or not verify_password(data.password, row["password"]):
                raise AuthenticationError("Invalid credentials")
            profile = cls.to_read(cursor, row)
        finally:
            conn.close()
        token = tokens.create_access_token(identity_claims(row))
        logger.info("Channel %s logged in", row["id"])
        return LoginResponse(token=token, **profile.model_dump())

    @classmethod
    async def get_user(cls, user_id: str) -> UserRead:
        """Retrieve a channel by ID.  Raises ``NotFoundError`` if absent."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cls.load_row(cursor, user_id)
            if not row:
                raise NotFoundError("User not found")
            return cls.to_read(cursor, row)
        finally:
            conn.close()

    @classmethod
    async def update_user(
        cls,
        user_id: str,
        current_user: dict,
        updates: UserUpdate,
        media: MediaStorage,
        logo: Optional[UploadFile] = None,
    ) -> UserRead:
        """Update a channel's profile.

        Only the channel itself may edit it.  A new password needs the
        current one in ``old_password``.  A new logo replaces the stored
        one; the old object is removed after the row is saved.
        """
        conn = get_connection()
        try:
            row = cls.load_row(conn.cursor(), user_id)
        finally:
            conn.close()
        if not row:
            raise NotFoundError("User not found")
        if row["id"] != current_user.get("sub"):
            raise PermissionDeniedError("You are not authorized to update this channel")

        fields: dict = {}
        if updates.password:
            if not updates.old_password or not verify_password(updates.old_password, row["password"]):
                raise InvalidRequestError("Invalid Password")
            fields["password"] = hash_password(updates.password)
        if updates.channel_name is not None:
            if not updates.channel_name.strip():
                raise InvalidRequestError("Channel name cannot be empty")
            fields["channel_name"] = updates.channel_name.strip()
        if updates.email is not None:
            email = updates.email.strip().lower()
            if not email:
                raise InvalidRequestError("Email cannot be empty")
            fields["email"] = email
        if updates.phone is not None:
            fields["phone"] = updates.phone.strip() or None

        stored: Optional[StoredMedia] = None
        if logo is not None and logo.filename:
            stored = await media.save_upload(logo, resource_type="image")
            fields["logo_url"] = stored.url
            fields["logo_id"] = stored.public_id

        try:
            with transaction() as cursor:
                if "email" in fields:
                    taken = cursor.execute(
                        "SELECT id FROM users WHERE email = ? AND id != ?",
                        (fields["email"], user_id),
                    ).fetchone()
                    if taken:
                        raise ConflictError("Email already exists")
                if fields:
                    assignments = ", ".join(f"{key} = ?" for key in fields)
                    cursor.execute(
                        f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?",
                        (*fields.values(), utc_now(), user_id),
                    )
                result = cls.to_read(cursor, cls.load_row(cursor, user_id))
        except Exception:
            if stored:
                media.destroy(stored.public_id)
            raise
        if stored:
            media.destroy(row["logo_id"])
        logger.info("Channel %s updated fields %s", user_id, sorted(k for k in fields if k != "password"))
        return result
