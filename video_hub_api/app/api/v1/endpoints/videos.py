"""
Video endpoints for API v1.

Uploads, owner edits and deletion, the public listings, reactions and
the view counter.  Every route except the listings and the view
counter requires a bearer token.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from video_hub_api.app.core.media import MediaStorage, get_media_storage
from video_hub_api.app.core.security import get_current_user
from video_hub_api.app.schemas.user import UserRead
from video_hub_api.app.schemas.video import (
    ReactionResult,
    VideoCreate,
    VideoRead,
    VideoUpdate,
    ViewResult,
    split_tags,
)
from video_hub_api.app.services.reaction_service import ReactionService
from video_hub_api.app.services.subscription_service import SubscriptionService
from video_hub_api.app.services.video_service import VideoService


router = APIRouter()


@router.get("/video/{video_id}", response_model=VideoRead)
async def get_video(video_id: str) -> VideoRead:
    """Retrieve a video with its owner's channel name, logo and subscriber count."""
    return await VideoService.get_video(video_id)


@router.get("/own-video", response_model=List[VideoRead])
async def own_videos(current_user: dict = Depends(get_current_user)) -> List[VideoRead]:
    return await VideoService.list_own_videos(current_user)


@router.get("/category/{category}", response_model=List[VideoRead])
async def videos_by_category(category: str) -> List[VideoRead]:
    return await VideoService.list_by_category(category)


@router.get("/subscribed/video", response_model=List[VideoRead])
async def subscribed_videos(current_user: dict = Depends(get_current_user)) -> List[VideoRead]:
    """Videos from every channel the caller is subscribed to, newest first."""
    return await VideoService.list_subscribed_videos(current_user)


@router.get("/subscribed/channel", response_model=List[UserRead])
async def subscribed_channels(current_user: dict = Depends(get_current_user)) -> List[UserRead]:
    return await SubscriptionService.list_subscribed_channels(current_user["sub"])


@router.get("/channel/{channel_id}", response_model=List[VideoRead])
async def channel_videos(channel_id: str) -> List[VideoRead]:
    """Videos of one channel, newest first.  404 when the channel has none."""
    return await VideoService.list_channel_videos(channel_id)


@router.post("/upload", response_model=VideoRead, status_code=status.HTTP_201_CREATED)
async def upload_video(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated tags"),
    video: UploadFile = File(...),
    thumbnail: UploadFile = File(...),
    current_user: dict = Depends(get_current_user),
    media: MediaStorage = Depends(get_media_storage),
) -> VideoRead:
    """Upload a new video with its thumbnail."""
    data = VideoCreate(title=title, description=description, category=category, tags=split_tags(tags))
    return await VideoService.upload_video(data, current_user, media, video, thumbnail)


@router.post("/{video_id}", response_model=VideoRead)
async def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated tags"),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
    media: MediaStorage = Depends(get_media_storage),
) -> VideoRead:
    """Edit a video's details (owner only).  Omitted fields are left unchanged."""
    updates = VideoUpdate(
        title=title,
        description=description,
        category=category,
        tags=split_tags(tags) if tags is not None else None,
    )
    return await VideoService.update_video(video_id, current_user, updates, media, thumbnail)


@router.delete("/{video_id}", response_model=VideoRead)
async def delete_video(
    video_id: str,
    current_user: dict = Depends(get_current_user),
    media: MediaStorage = Depends(get_media_storage),
) -> VideoRead:
    """Delete a video (owner only) and return its final state."""
    return await VideoService.delete_video(video_id, current_user, media)


@router.put("/like/{video_id}", response_model=ReactionResult)
async def like_video(
    video_id: str,
    current_user: dict = Depends(get_current_user),
) -> ReactionResult:
    """Like a video.  A previous dislike by the caller is withdrawn."""
    return await ReactionService.like(current_user["sub"], video_id)


@router.put("/dislike/{video_id}", response_model=ReactionResult)
async def dislike_video(
    video_id: str,
    current_user: dict = Depends(get_current_user),
) -> ReactionResult:
    """Dislike a video.  A previous like by the caller is withdrawn."""
    return await ReactionService.dislike(current_user["sub"], video_id)


@router.put("/views/{video_id}", response_model=ViewResult)
async def record_view(video_id: str) -> ViewResult:
    """Count a view.  No authentication; repeated calls all count."""
    return await VideoService.record_view(video_id)
