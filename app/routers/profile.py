# =============================================================================
# app/routers/profile.py - Own Profile & Avatar Endpoints
# =============================================================================
# The authenticated user's profile and avatar image.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from app.dependencies import CurrentUser
from core.models.user import ProfileUpdate, UserProfile
from core.services.storage_service import StorageService
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=UserProfile)
async def get_profile(user: CurrentUser):
    """Get the authenticated user's profile."""
    return UserService.get_profile(user.id)


@router.patch("", response_model=UserProfile)
async def update_profile(request: ProfileUpdate, user: CurrentUser):
    """
    Update the authenticated user's profile.

    Only fields present in the body change. Send an empty string to clear
    contact_info or specific_location.
    """
    return UserService.update_profile(user.id, request)


@router.post("/avatar")
async def upload_avatar(
    file: Annotated[UploadFile, File(description="Avatar image (jpeg, png, webp or gif)")],
    user: CurrentUser,
):
    """
    Upload a new avatar, replacing the current one.

    Returns the public URL, which is also stored on the profile.
    """
    content = await file.read()
    logger.info(f"Processing avatar upload for {user.id} ({len(content)} bytes)")

    avatar_url = StorageService.upload_avatar(user.id, content, file.content_type or "")
    return {"avatar_url": avatar_url}


@router.delete("/avatar")
async def remove_avatar(user: CurrentUser):
    """Remove the avatar and clear avatar_url on the profile."""
    removed = StorageService.remove_avatar(user.id)
    return {"avatar_url": None, "removed": removed}
