"""
Pydantic models for video data.

Uploads arrive as multipart forms, so ``VideoCreate`` and
``VideoUpdate`` are built by the endpoints from form fields rather
than parsed from a JSON body.  ``VideoRead`` is the full projection,
including the owner's channel fields and the reaction lists.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import ChannelBrief


def split_tags(raw: Optional[str]) -> List[str]:
    """Turn a comma separated form value into a clean tag list."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


class VideoCreate(BaseModel):
    title: str = Field(..., examples=["Sourdough in 10 minutes"])
    description: Optional[str] = None
    category: Optional[str] = Field(None, examples=["cooking"])
    tags: List[str] = Field(default_factory=list)


class VideoUpdate(BaseModel):
    """All fields are optional; only provided fields will be updated."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None


class VideoBrief(BaseModel):
    """Member fields shown inside a playlist."""

    id: str
    title: str
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None


class VideoRead(BaseModel):
    """Schema for reading a video from the API."""

    id: str
    user_id: str
    owner: Optional[ChannelBrief] = None
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    video_url: str
    thumbnail_url: str
    likes: int = 0
    dislikes: int = 0
    liked_by: List[str] = Field(default_factory=list)
    disliked_by: List[str] = Field(default_factory=list)
    views: int = 0
    created_at: str
    updated_at: str


class ReactionResult(BaseModel):
    """Counters after a like or dislike."""

    msg: str = Field(..., examples=["Video Liked"])
    video_id: str
    likes: int
    dislikes: int


class ViewResult(BaseModel):
    msg: str = Field(..., examples=["Video Viewed"])
    video_id: str
    views: int
