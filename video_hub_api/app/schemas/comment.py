"""
Pydantic schemas for video comments.

Comment text is trimmed on input; an empty comment is rejected by
``CommentService``.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import ChannelBrief


class CommentCreate(BaseModel):
    """Schema for posting or editing a comment."""

    comment_text: Optional[str] = Field(None, examples=["Great recipe!"])

    @field_validator("comment_text")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        """Trim whitespace and enforce a maximum length."""
        if v is None:
            return None
        v = v.strip()
        if len(v) > 5000:
            raise ValueError("Comment must be 5000 characters or fewer")
        return v


class CommentRead(BaseModel):
    id: str
    video_id: str
    user_id: str
    author: Optional[ChannelBrief] = None
    comment_text: str
    created_at: str
    updated_at: str
