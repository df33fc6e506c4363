# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for registration, sign-in/out and the current user.
#
# Sign-in also sets the `sb-access-token` cookie so page requests carry the
# session (see app/middleware.py).
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Response, status

from app.auth.dependencies import ACCESS_TOKEN_COOKIE, get_access_token, get_current_user
from app.auth.models import AuthSession, AuthUser, LoginRequest, RegisterRequest, UserResponse
from app.config import settings
from core.services.auth_service import AuthService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _to_session(result: dict, response: Response) -> AuthSession:
    """Build the API response and attach the session cookie when signed in."""
    access_token = result.get("access_token")
    if access_token:
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            access_token,
            max_age=result.get("expires_in"),
            httponly=True,
            secure=settings.is_production,
            samesite="lax",
        )

    return AuthSession(
        user=AuthUser(id=result["user_id"], email=result.get("email"), name=result.get("name")),
        access_token=access_token,
        refresh_token=result.get("refresh_token"),
        expires_in=result.get("expires_in"),
        profile=result.get("profile"),
    )


@router.post("/register", response_model=AuthSession, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, response: Response) -> AuthSession:
    """
    Create an account and its profile.

    The profile starts private with default preferences; the user fills it in
    from the profile page.

    Raises:
        400: If the auth subsystem refuses the sign-up
    """
    result = AuthService.register(request.name, request.email, request.password)
    return _to_session(result, response)


@router.post("/login", response_model=AuthSession)
async def login(request: LoginRequest, response: Response) -> AuthSession:
    """
    Sign in with e-mail and password.

    Raises:
        401: If the credentials are wrong
    """
    result = AuthService.login(request.email, request.password)
    return _to_session(result, response)


@router.post("/logout")
async def logout(
    response: Response,
    token: str = Depends(get_access_token),
) -> dict:
    """Revoke the current session and clear the session cookie."""
    AuthService.logout(token)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return {"success": True}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    try:
        profile = SupabaseClient.fetch_user(user.id)
        if profile:
            return UserResponse(**profile)
    except Exception as e:
        logger.warning(f"Could not fetch user profile: {e}")

    # Account exists in auth but has no profile row yet
    return UserResponse(id=user.id, email=user.email, name=user.name)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
