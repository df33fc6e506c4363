# =============================================================================
# core/services/user_service.py - Talent Directory & Profile Logic
# =============================================================================
# Handles the public talent directory and a user's own profile.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, sanitize_keyword, utc_now_iso
from core.models.user import ProfileUpdate, TalentFilters
from app.config import settings
from app.exceptions import ProfilePrivateError, UserNotFoundError

logger = logging.getLogger(__name__)

# Profile columns that may be cleared; every other column is NOT NULL
NULLABLE_COLUMNS = {"contact_info", "specific_location"}


class UserService:
    """
    Service for talents (public profiles) and profile editing.
    """

    @staticmethod
    def list_talents(
        filters: TalentFilters | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List public profiles, newest first.

        The keyword matches name, experience and partner description
        (case-insensitive substring).

        Returns:
            Tuple of (users list, total count)
        """
        filters = filters or TalentFilters()
        page_size = page_size or settings.DEFAULT_PAGE_SIZE
        client = SupabaseClient.get_client()

        query = client.table("users").select("*", count="exact").eq("is_public", True)

        keyword = sanitize_keyword(filters.keyword)
        if keyword:
            query = query.or_(
                f"name.ilike.%{keyword}%,"
                f"experience_description.ilike.%{keyword}%,"
                f"partner_description.ilike.%{keyword}%"
            )
        if filters.skills:
            query = query.overlaps("skills", filters.skills)
        if filters.work_mode:
            query = query.in_("work_mode", [m.value for m in filters.work_mode])
        if filters.location_preference:
            query = query.in_(
                "location_preference", [p.value for p in filters.location_preference]
            )

        offset = (page - 1) * page_size
        query = query.order("created_at", desc=True).range(offset, offset + page_size - 1)

        try:
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            logger.error(f"Failed to list talents: {e}")
            raise

    @staticmethod
    def get_talent(
        user_id: str | UUID,
        viewer_id: str | UUID | None = None,
    ) -> dict[str, Any]:
        """
        Get a talent's profile.

        Args:
            user_id: Profile to show
            viewer_id: Signed-in viewer, if any. Owners always see their own profile.

        Raises:
            UserNotFoundError: If no such user
            ProfilePrivateError: If the profile isn't public and the viewer isn't its owner
        """
        user_id_str = normalize_uuid(user_id)

        user = SupabaseClient.fetch_user(user_id_str)
        if not user:
            raise UserNotFoundError(user_id_str)

        is_owner = viewer_id is not None and normalize_uuid(viewer_id) == user_id_str
        if not user.get("is_public") and not is_owner:
            raise ProfilePrivateError(user_id_str)

        return user

    @staticmethod
    def get_profile(user_id: str | UUID) -> dict[str, Any]:
        """
        Get the caller's own profile.

        Raises:
            UserNotFoundError: If the profile row is missing
        """
        user = SupabaseClient.fetch_user(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    @staticmethod
    def update_profile(
        user_id: str | UUID,
        payload: ProfileUpdate,
    ) -> dict[str, Any]:
        """
        Update the caller's own profile.

        Only fields present in the request are written. contact_info and
        specific_location sent as blank strings are cleared.

        Raises:
            UserNotFoundError: If the profile row is missing
        """
        user_id_str = normalize_uuid(user_id)

        update_data = {
            column: value
            for column, value in payload.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or column in NULLABLE_COLUMNS
        }

        if not update_data:
            return UserService.get_profile(user_id_str)

        update_data["updated_at"] = utc_now_iso()
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("users")
                .update(update_data)
                .eq("id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update profile {user_id_str}: {e}")
            raise

        if not response.data:
            raise UserNotFoundError(user_id_str)

        logger.info(f"Updated profile: {user_id_str}")
        return response.data[0]
