"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers (channels, videos, comments,
playlists) under their prefixes.  When new domains are introduced,
update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import comments, playlists, users, videos

router = APIRouter()

router.include_router(users.router, prefix="/user", tags=["channels"])
router.include_router(videos.router, prefix="/video", tags=["videos"])
router.include_router(comments.router, prefix="/comment", tags=["comments"])
router.include_router(playlists.router, prefix="/playlist", tags=["playlists"])
