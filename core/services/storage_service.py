# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles avatar upload/removal with Supabase Storage. Each user has one
# object at `{user_id}/avatar` in the avatars bucket, overwritten on upload.
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now_iso
from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    StorageUploadError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def avatar_path(user_id: str | UUID) -> str:
    """Storage path of a user's avatar inside the avatars bucket."""
    return f"{normalize_uuid(user_id)}/avatar"


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading and removing profile avatars.
    """

    @staticmethod
    def validate_avatar(content_type: str | None, size_bytes: int) -> None:
        """
        Check an avatar's content type and size against the configured limits.

        Raises:
            InvalidFileTypeError: If the content type isn't an allowed image type
            FileTooLargeError: If the file exceeds MAX_AVATAR_SIZE_MB
        """
        allowed = settings.allowed_avatar_types_list
        if (content_type or "").lower() not in allowed:
            raise InvalidFileTypeError(content_type or "unknown", allowed)

        if size_bytes > settings.max_avatar_size_bytes:
            raise FileTooLargeError(size_bytes / (1024 * 1024), settings.MAX_AVATAR_SIZE_MB)

    @staticmethod
    def upload_avatar(
        user_id: str | UUID,
        content: bytes,
        content_type: str,
    ) -> str:
        """
        Upload a user's avatar and store its public URL on the profile.

        Args:
            user_id: Owner of the avatar
            content: Image bytes
            content_type: MIME type of the image

        Returns:
            Public URL of the avatar

        Raises:
            InvalidFileTypeError / FileTooLargeError: If validation fails
            StorageUploadError: If upload fails
            UserNotFoundError: If the profile row is missing
        """
        StorageService.validate_avatar(content_type, len(content))

        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)
        path = avatar_path(user_id_str)
        bucket = client.storage.from_(settings.AVATAR_BUCKET)

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"}
            )
            public_url = bucket.get_public_url(path)
            logger.info(f"Uploaded avatar to storage: {path}")

        except Exception as e:
            logger.error(f"Avatar upload failed: {e}")
            raise StorageUploadError(str(e))

        response = (
            client.table("users")
            .update({"avatar_url": public_url, "updated_at": utc_now_iso()})
            .eq("id", user_id_str)
            .execute()
        )
        if not response.data:
            raise UserNotFoundError(user_id_str)

        return public_url

    @staticmethod
    def remove_avatar(user_id: str | UUID) -> bool:
        """
        Remove a user's avatar and clear avatar_url.

        A failed object removal is logged; the column is cleared either way.

        Returns:
            True if the storage object was removed
        """
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)
        path = avatar_path(user_id_str)

        removed = True
        try:
            client.storage.from_(settings.AVATAR_BUCKET).remove([path])
            logger.info(f"Deleted avatar from storage: {path}")
        except Exception as e:
            logger.warning(f"Failed to delete avatar {path}: {e}")
            removed = False

        (
            client.table("users")
            .update({"avatar_url": None, "updated_at": utc_now_iso()})
            .eq("id", user_id_str)
            .execute()
        )
        return removed
