"""
Comment endpoints for API v1.

Anyone can read the comments of a video; posting requires a bearer
token and only the author can edit or delete a comment.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from video_hub_api.app.core.security import get_current_user
from video_hub_api.app.schemas.comment import CommentCreate, CommentRead
from video_hub_api.app.schemas.common import Message
from video_hub_api.app.services.comment_service import CommentService


router = APIRouter()


@router.post("/new-comment/{video_id}", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def create_comment(
    video_id: str,
    data: CommentCreate,
    current_user: dict = Depends(get_current_user),
) -> CommentRead:
    return await CommentService.create_comment(video_id, data, current_user)


@router.get("/{video_id}", response_model=List[CommentRead])
async def list_comments(video_id: str) -> List[CommentRead]:
    """All comments of a video with the author's channel name and logo."""
    return await CommentService.list_comments(video_id)


@router.put("/{comment_id}", response_model=CommentRead)
async def update_comment(
    comment_id: str,
    data: CommentCreate,
    current_user: dict = Depends(get_current_user),
) -> CommentRead:
    return await CommentService.update_comment(comment_id, data, current_user)


@router.delete("/{comment_id}", response_model=Message)
async def delete_comment(
    comment_id: str,
    current_user: dict = Depends(get_current_user),
) -> Message:
    await CommentService.delete_comment(comment_id, current_user)
    return Message(msg="Comment deleted successfully")
