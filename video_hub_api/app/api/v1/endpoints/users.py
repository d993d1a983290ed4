"""
Channel endpoints for API v1.

Provide signup, login, profile reads and edits, and the
subscribe/unsubscribe pair.  Signup and profile edits are multipart
forms because they may carry a logo image.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from video_hub_api.app.core.media import MediaStorage, get_media_storage
from video_hub_api.app.core.security import TokenManager, get_current_user, get_token_manager
from video_hub_api.app.schemas.user import (
    LoginResponse,
    SubscriptionResult,
    UserCreate,
    UserLogin,
    UserRead,
    UserUpdate,
)
from video_hub_api.app.services.subscription_service import SubscriptionService
from video_hub_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def signup(
    channel_name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    phone: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    media: MediaStorage = Depends(get_media_storage),
) -> UserRead:
    """Register a new channel.

    The e-mail must not be registered yet.  The optional ``logo``
    file is stored and its URL returned as ``logo_url``.
    """
    data = UserCreate(channel_name=channel_name, email=email, phone=phone, password=password)
    return await UserService.create_user(data, media, logo)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    tokens: TokenManager = Depends(get_token_manager),
) -> LoginResponse:
    """Authenticate a channel and return its profile with a bearer token."""
    return await UserService.login(credentials, tokens)


@router.put("/subscribe/{channel_id}", response_model=SubscriptionResult)
async def subscribe(
    channel_id: str,
    current_user: dict = Depends(get_current_user),
) -> SubscriptionResult:
    """Subscribe the caller to ``channel_id``.

    Returns 400 if already subscribed or if the caller targets their own
    channel, 404 if the channel does not exist.
    """
    return await SubscriptionService.subscribe(current_user["sub"], channel_id)


@router.put("/unsubscribe/{channel_id}", response_model=SubscriptionResult)
async def unsubscribe(
    channel_id: str,
    current_user: dict = Depends(get_current_user),
) -> SubscriptionResult:
    """Unsubscribe the caller from ``channel_id``.  400 if not subscribed."""
    return await SubscriptionService.unsubscribe(current_user["sub"], channel_id)


@router.post("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    channel_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    old_password: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
    media: MediaStorage = Depends(get_media_storage),
) -> UserRead:
    """Update the caller's own channel.

    Every field is optional.  Changing ``password`` requires the
    current password in ``old_password``.
    """
    updates = UserUpdate(
        channel_name=channel_name,
        email=email,
        phone=phone,
        password=password,
        old_password=old_password,
    )
    return await UserService.update_user(user_id, current_user, updates, media, logo)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str) -> UserRead:
    """Retrieve a channel profile.  The password hash is never returned."""
    return await UserService.get_user(user_id)
