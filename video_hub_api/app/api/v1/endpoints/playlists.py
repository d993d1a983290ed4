"""
Playlist endpoints for API v1.

Playlists are created around a first video, then grown, shrunk or
renamed by their owner.  Reads are public; the list endpoint pages
through all playlists newest first, four per page unless ``limit`` is
given.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from video_hub_api.app.core.security import get_current_user
from video_hub_api.app.schemas.common import Message
from video_hub_api.app.schemas.playlist import (
    PlaylistAddVideo,
    PlaylistCreate,
    PlaylistPage,
    PlaylistRead,
    PlaylistRemoveVideo,
)
from video_hub_api.app.services.playlist_service import PlaylistService


router = APIRouter()


@router.get("", response_model=PlaylistPage)
async def list_playlists(
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
) -> PlaylistPage:
    """Page through playlists, newest first.

    - **page**: page number, default 1.
    - **limit**: page size, default 4.
    """
    return await PlaylistService.list_page(page=page, limit=limit)


@router.post("/add-video/{playlist_id}", response_model=PlaylistRead)
async def add_video(
    playlist_id: str,
    data: PlaylistAddVideo,
    current_user: dict = Depends(get_current_user),
) -> PlaylistRead:
    """Append ``video_id`` and/or set ``title`` (owner only).

    Adding a video that is already in the playlist returns 400.
    """
    return await PlaylistService.add_video(playlist_id, data, current_user)


@router.post("/remove-video/{playlist_id}", response_model=PlaylistRead)
async def remove_video(
    playlist_id: str,
    data: PlaylistRemoveVideo,
    current_user: dict = Depends(get_current_user),
) -> PlaylistRead:
    """Remove ``video_id`` from the playlist (owner only)."""
    return await PlaylistService.remove_video(playlist_id, data, current_user)


@router.post("/{video_id}", response_model=PlaylistRead, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    video_id: str,
    data: PlaylistCreate,
    current_user: dict = Depends(get_current_user),
) -> PlaylistRead:
    """Create a new playlist holding ``video_id``.  ``title`` is required."""
    return await PlaylistService.create_with_video(video_id, data, current_user)


@router.get("/{playlist_id}", response_model=PlaylistRead)
async def get_playlist(playlist_id: str) -> PlaylistRead:
    return await PlaylistService.get_playlist(playlist_id)


@router.delete("/{playlist_id}", response_model=Message)
async def delete_playlist(
    playlist_id: str,
    current_user: dict = Depends(get_current_user),
) -> Message:
    """Delete a playlist (owner only).  It must be empty."""
    await PlaylistService.delete_playlist(playlist_id, current_user)
    return Message(msg="Playlist deleted successfully")
