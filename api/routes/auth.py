"""
Auth API Routes

Account registration, login and profile management. Protected routes take
an HS256 bearer token issued by /register or /login.

Routes:
    POST /api/auth/register            create an account (201)
    POST /api/auth/login               username or email + password
    GET  /api/auth/me                  current user (bearer)
    PUT  /api/auth/profile             update profile fields (bearer)
    PUT  /api/auth/change-password     change password (bearer)
    GET  /api/auth/users/{user_id}     public profile, no email
"""

import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from peewee import IntegrityError

from core.logging import get_logger
from core.security import (
    TokenPayload,
    get_current_user,
    hash_password,
    issue_token_for,
    verify_password,
)
from db.base import run_in_db_thread
from db.models import User
from schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    PublicUser,
    PublicUserResponse,
    RegisterRequest,
    UserProfile,
    UserResponse,
)
from schemas.common import MessageResponse

router = APIRouter(prefix="/auth", tags=["auth"])
log = get_logger("auth_api")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password(password: str, label: str = "Password") -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long",
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"{label} must be at most {MAX_PASSWORD_BYTES} bytes long",
        )


def _get_user_or_404(user_id: int) -> User:
    user = User.get_or_none(User.id == user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: Request, body: RegisterRequest) -> AuthResponse:
    """
    Create an account and return a token for it.

    Raises 400 for a short password or malformed email, 409 if the username
    or email is already registered.
    """
    _check_password(body.password)
    if not EMAIL_PATTERN.match(body.email):
        raise HTTPException(status_code=400, detail="Invalid email format")

    app_settings = request.app.state.settings

    def _create() -> User:
        if User.is_taken(body.username, body.email):
            raise HTTPException(status_code=409, detail="Username or email already exists")
        password_hash = hash_password(body.password, rounds=app_settings.bcrypt_rounds)
        try:
            return User.create(
                username=body.username,
                email=body.email,
                password_hash=password_hash,
                player_id=body.player_id or None,
                player_name=body.player_name or None,
            )
        except IntegrityError:
            # Lost a race with a concurrent registration
            raise HTTPException(status_code=409, detail="Username or email already exists")

    user = await run_in_db_thread(request.app.state.database, _create)
    log.info("user_registered", user_id=user.id, username=user.username)

    return AuthResponse(
        message="User registered successfully",
        token=issue_token_for(user, app_settings),
        user=UserProfile.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: Request, body: LoginRequest) -> AuthResponse:
    """Log in with a username or email. Bad credentials are a 401."""

    def _authenticate() -> Optional[User]:
        user = User.find_by_login(body.username)
        if user is None or not verify_password(body.password, user.password_hash):
            return None
        return user

    user = await run_in_db_thread(request.app.state.database, _authenticate)

    if user is None:
        log.info("login_failed", identifier=body.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    log.info("login_succeeded", user_id=user.id)
    return AuthResponse(
        message="Login successful",
        token=issue_token_for(user, request.app.state.settings),
        user=UserProfile.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def me(
    request: Request,
    current: TokenPayload = Depends(get_current_user),
) -> UserResponse:
    user = await run_in_db_thread(request.app.state.database, _get_user_or_404, current.userId)
    return UserResponse(user=UserProfile.model_validate(user))


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    request: Request,
    body: ProfileUpdateRequest,
    current: TokenPayload = Depends(get_current_user),
) -> UserResponse:
    """Update the caller's profile. Fields left out of the body keep their value."""
    changes = body.model_dump(exclude_none=True)

    def _update() -> User:
        user = _get_user_or_404(current.userId)
        for field, value in changes.items():
            setattr(user, field, value)
        user.save()
        return user

    user = await run_in_db_thread(request.app.state.database, _update)
    log.info("profile_updated", user_id=user.id, fields=sorted(changes))

    return UserResponse(
        message="Profile updated successfully",
        user=UserProfile.model_validate(user),
    )


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    current: TokenPayload = Depends(get_current_user),
) -> MessageResponse:
    """Replace the caller's password. The current password must be supplied."""
    _check_password(body.new_password, label="New password")
    rounds = request.app.state.settings.bcrypt_rounds

    def _change() -> None:
        user = _get_user_or_404(current.userId)
        if not verify_password(body.current_password, user.password_hash):
            raise HTTPException(status_code=401, detail="Current password is incorrect")
        user.password_hash = hash_password(body.new_password, rounds=rounds)
        user.save()

    await run_in_db_thread(request.app.state.database, _change)
    log.info("password_changed", user_id=current.userId)

    return MessageResponse(message="Password changed successfully")


@router.get("/users/{user_id}", response_model=PublicUserResponse)
async def get_public_user(request: Request, user_id: int) -> PublicUserResponse:
    user = await run_in_db_thread(request.app.state.database, _get_user_or_404, user_id)
    return PublicUserResponse(user=PublicUser.model_validate(user))
