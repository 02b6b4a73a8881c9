from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel

# ------------------------------- Requests ------------------------------- #

class RegisterRequest(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    player_name: Optional[str] = None
    player_id: Optional[str] = None

class LoginRequest(CamelModel):
    # Username or email
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class ProfileUpdateRequest(CamelModel):
    """Only the fields provided are changed."""
    player_name: Optional[str] = None
    player_id: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)

# ------------------------------- Responses ------------------------------- #

class PublicUser(CamelModel):
    """User data anyone may see"""
    id: int
    username: str
    player_id: Optional[str] = None
    player_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None

class UserProfile(PublicUser):
    """User data for the account owner"""
    email: str
    is_verified: bool = False
    updated_at: Optional[datetime] = None

class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserProfile

class UserResponse(CamelModel):
    message: Optional[str] = None
    user: UserProfile

class PublicUserResponse(CamelModel):
    user: PublicUser
