"""
Pydantic models for playlists.

A playlist holds an ordered list of distinct video ids.  Request
models only declare which fields may be sent and trim surrounding
whitespace; whether a title is blank or a video id is missing is
decided by ``PlaylistService`` so that the error messages stay the
same for every caller.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import ChannelBrief
from .video import VideoBrief


class PlaylistCreate(BaseModel):
    title: Optional[str] = Field(None, examples=["Weekend bakes"])

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class PlaylistAddVideo(BaseModel):
    """Add a member, rename, or both."""

    video_id: Optional[str] = None
    title: Optional[str] = None

    @field_validator("video_id", "title")
    @classmethod
    def strip_fields(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class PlaylistRemoveVideo(BaseModel):
    video_id: Optional[str] = None

    @field_validator("video_id")
    @classmethod
    def strip_video_id(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class PlaylistRead(BaseModel):
    """Schema for reading a playlist from the API."""

    id: str
    user_id: str
    owner: Optional[ChannelBrief] = None
    title: str
    video_ids: List[str] = Field(default_factory=list)
    videos: List[VideoBrief] = Field(default_factory=list)
    created_at: str
    updated_at: str


class PlaylistPage(BaseModel):
    playlists: List[PlaylistRead]
    page: int
    limit: int
    total: int
    has_more: bool
