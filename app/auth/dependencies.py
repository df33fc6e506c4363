# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Derives the session context of a request from its Supabase access token.
#
# The token is read from the Authorization header (Bearer) or, for browser
# page requests, from the `sb-access-token` cookie.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb-access-token"

# Bearer token extractor; a missing header falls through to the cookie
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


class InvalidTokenError(Exception):
    """Raised when an access token can't be verified."""


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        response = httpx.get(_get_jwks_url(), timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        return _jwks_cache
    except Exception as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys beat no keys
        return _jwks_cache or {"keys": []}


def _get_signing_key(token: str) -> tuple:
    """
    Get the signing key and algorithm for a token.

    HS256 tokens use SUPABASE_JWT_SECRET; asymmetric tokens use the key from
    the project's JWKS whose kid matches the token header.
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg != "HS256" and kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg
        logger.warning(f"No JWKS key for alg={alg}, kid={kid}, falling back to HS256")

    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build the session context from it.

    Args:
        token: Raw JWT

    Returns:
        AuthUser with id, email and the display name from user metadata

    Raises:
        InvalidTokenError: If the token is expired, badly signed or malformed
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except JWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}")

    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        raise InvalidTokenError("Invalid token: malformed user ID")

    metadata = payload.get("user_metadata") or {}
    return AuthUser(id=user_id, email=payload.get("email"), name=metadata.get("name"))


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Access token from the Bearer header, else from the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


async def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Raw access token of the request.

    Raises:
        HTTPException: 401 if no token was sent
    """
    token = extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


async def get_current_user(
    token: str = Depends(get_access_token),
) -> AuthUser:
    """
    Extract and validate the user from the Supabase JWT.

    Returns:
        AuthUser: The authenticated user

    Raises:
        HTTPException: 401 if token is missing, invalid or expired

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    try:
        user = decode_access_token(token)
    except InvalidTokenError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthUser]:
    """
    Optionally get the current user.

    Returns None if no token is provided or it doesn't verify, instead of
    raising. Used by public pages that show more to signed-in viewers.
    """
    token = extract_token(request, credentials)
    if not token:
        return None

    try:
        return decode_access_token(token)
    except InvalidTokenError:
        return None
