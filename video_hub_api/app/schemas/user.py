"""
Pydantic models for channel (account) data.

Defines schemas for registering channels, logging in, reading channel
profiles and reporting the outcome of subscribe/unsubscribe calls.
The stored password hash is never part of a response model.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Fields submitted with the signup form.

    The logo is uploaded alongside as a file part and handled by the
    endpoint; blank values are rejected by ``UserService``.
    """

    channel_name: str = Field(..., examples=["Cooking with Ana"])
    email: str = Field(..., examples=["ana@example.com"])
    phone: Optional[str] = Field(None, examples=["+1 555 0100"])
    password: str = Field(..., examples=["strongpassword"])


class UserUpdate(BaseModel):
    """Schema for updating a channel.

    All fields are optional; only provided fields will be updated.
    Changing the password requires ``old_password``.
    """

    channel_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    old_password: Optional[str] = None


class UserLogin(BaseModel):
    email: str = Field(..., examples=["ana@example.com"])
    password: str = Field(..., examples=["strongpassword"])


class UserRead(BaseModel):
    """Schema for reading a channel from the API."""

    id: str
    channel_name: str
    email: str
    phone: Optional[str] = None
    logo_url: Optional[str] = None
    subscribers: int = 0
    # Ids of channels following this one / followed by this one.
    subscribed_by: List[str] = Field(default_factory=list)
    subscribed_channels: List[str] = Field(default_factory=list)
    created_at: str

    model_config = {
        "from_attributes": True,
    }


class LoginResponse(UserRead):
    token: str
    token_type: str = "bearer"


class SubscriptionResult(BaseModel):
    """Outcome of a subscribe or unsubscribe call."""

    msg: str = Field(..., examples=["Channel Subscribed"])
    channel_id: str
    subscribers: int
