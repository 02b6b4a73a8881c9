"""
User authentication helpers.

bcrypt password hashing plus HS256 JWT issue/verify, and the FastAPI
dependency that resolves the bearer token on protected routes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import HTTPException, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from core.logging import get_logger
from core.settings import Settings

JWT_ALGORITHM = "HS256"

# auto_error=False so a missing header is a 401 like a bad token, not a 403
security = HTTPBearer(auto_error=False)

log = get_logger("auth")


class TokenPayload(BaseModel):
    """Claims carried in an access token."""

    userId: int
    username: str
    email: str


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    payload: TokenPayload,
    secret: str,
    expires_in: timedelta,
) -> str:
    """
    Sign an access token for a user.

    Args:
        payload: User claims to embed
        secret: HMAC signing secret
        expires_in: Lifetime of the token

    Returns:
        Encoded JWT string
    """
    claims = payload.model_dump()
    claims["exp"] = datetime.now(timezone.utc) + expires_in
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str) -> Optional[TokenPayload]:
    """Return the token's claims, or None if it is invalid or expired."""
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
        return TokenPayload(**claims)
    except jwt.InvalidTokenError as e:
        log.info("token_rejected", reason=type(e).__name__)
        return None
    except ValueError:
        # Signature checked out but the claims are not ours
        log.info("token_rejected", reason="invalid_claims")
        return None


def issue_token_for(user, app_settings: Settings) -> str:
    """Issue an access token for a User row."""
    return create_access_token(
        TokenPayload(userId=user.id, username=user.username, email=user.email),
        secret=app_settings.jwt_secret.get_secret_value(),
        expires_in=app_settings.jwt_expires_delta,
    )


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> TokenPayload:
    """
    Resolve the authenticated user from the Authorization header.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")

    app_settings: Settings = request.app.state.settings
    payload = decode_access_token(
        credentials.credentials,
        app_settings.jwt_secret.get_secret_value(),
    )
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")

    return payload
