"""
Authentication Service
Issues and verifies the JWT access tokens that identify the caller.

Sign-up, sign-in and password handling belong to the hosted auth provider;
this module only needs to agree with it on the token format (HS256, caller
id in "sub").
"""
import os
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "").strip()
if not JWT_SECRET_KEY or len(JWT_SECRET_KEY) < 32:
    raise RuntimeError(
        "CRITICAL: JWT_SECRET_KEY environment variable must be set to a secure value "
        "(at least 32 characters). "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))


class TokenError(Exception):
    """Raised when token is invalid or expired"""
    pass


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: Caller id to encode in token
        expires_delta: Optional custom expiration time

    Returns:
        JWT access token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.utcnow()
    to_encode = {
        "sub": user_id,
        "type": "access",
        "exp": now + expires_delta,
        "iat": now,
    }

    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Verify and decode an access token.

    Raises:
        TokenError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        if "expired" in str(e).lower():
            raise TokenError("Token has expired")
        raise TokenError(f"Invalid token: {str(e)}")

    if payload.get("type", "access") != "access":
        raise TokenError("Invalid token type. Expected access")

    if not payload.get("sub"):
        raise TokenError("Token missing user ID")

    return payload


def get_user_id_from_token(token: str) -> str:
    """Extract the caller id from an access token."""
    return verify_token(token)["sub"]
