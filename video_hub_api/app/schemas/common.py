"""Small response models shared by several domains."""

from typing import Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Plain acknowledgement returned by delete-style endpoints."""

    msg: str = Field(..., examples=["Playlist deleted successfully"])


class ChannelBrief(BaseModel):
    """Owner/author fields joined onto videos, comments and playlists."""

    id: str
    channel_name: str
    logo_url: Optional[str] = None
    subscribers: Optional[int] = None
