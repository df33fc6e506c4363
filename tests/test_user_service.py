# =============================================================================
# tests/test_user_service.py - Talents, Profile, Avatar & Auth Tests
# =============================================================================
# This module contains tests for:
# - Talent directory filters and the private-profile rule
# - Profile updates (partial, blank optional strings cleared)
# - Avatar upload / removal through storage
# - Registration / sign-in with a mocked auth client
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from app.exceptions import (
    AuthenticationError,
    FileTooLargeError,
    InvalidFileTypeError,
    ProfilePrivateError,
    RegistrationError,
    StorageUploadError,
    UserNotFoundError,
)
from core.models.user import LocationPreference, ProfileUpdate, TalentFilters, WorkMode
from core.services.auth_service import AuthService
from core.services.storage_service import StorageService
from core.services.user_service import UserService
from lib.supabase_client import SupabaseClient
from tests.conftest import APPLICANT_ID, CREATOR_ID, INVITEE_ID, OUTSIDER_ID

NEW_USER_ID = "55555555-5555-5555-5555-555555555555"


# =============================================================================
# Talent Directory
# =============================================================================

class TestTalents:
    """Tests for UserService.list_talents / get_talent."""

    def test_only_public_profiles(self, seeded_db):
        users, total = UserService.list_talents()

        names = {u["name"] for u in users}
        assert total == 3
        assert "Carol" not in names

    def test_filters(self, seeded_db):
        seeded_db.tables["users"][3].update(work_mode="parttime", experience_description="十年 iOS 開發")

        by_skill, _ = UserService.list_talents(TalentFilters(skills=["React"]))
        by_mode, _ = UserService.list_talents(TalentFilters(work_mode=[WorkMode.PARTTIME]))
        by_keyword, _ = UserService.list_talents(TalentFilters(keyword="ios"))
        by_location, _ = UserService.list_talents(
            TalentFilters(location_preference=[LocationPreference.SPECIFIC_LOCATION])
        )

        assert [u["name"] for u in by_skill] == ["Bob"]
        assert [u["name"] for u in by_mode] == ["Dave"]
        assert [u["name"] for u in by_keyword] == ["Dave"]
        assert by_location == []

    def test_get_public_talent(self, seeded_db):
        assert UserService.get_talent(APPLICANT_ID)["name"] == "Bob"

    def test_get_missing_talent(self, seeded_db):
        """Backend not-found (PGRST116) becomes a 404."""
        with pytest.raises(UserNotFoundError) as exc_info:
            UserService.get_talent(NEW_USER_ID)

        assert exc_info.value.status_code == 404

    def test_private_profile(self, seeded_db):
        """Carol is private: others get 403, Carol sees herself."""
        with pytest.raises(ProfilePrivateError) as exc_info:
            UserService.get_talent(INVITEE_ID, viewer_id=CREATOR_ID)

        assert exc_info.value.message == "此用戶的個人資料未公開"
        assert exc_info.value.status_code == 403
        assert UserService.get_talent(INVITEE_ID, viewer_id=INVITEE_ID)["name"] == "Carol"


# =============================================================================
# Profile
# =============================================================================

class TestProfile:
    """Tests for UserService.update_profile."""

    def test_partial_update(self, seeded_db):
        updated = UserService.update_profile(
            APPLICANT_ID,
            ProfileUpdate(skills=["Go", " Go ", "Rust"], is_public=False),
        )

        assert updated["skills"] == ["Go", "Rust"]
        assert updated["is_public"] is False
        assert updated["name"] == "Bob"

    def test_blank_optional_strings_are_cleared(self, seeded_db):
        seeded_db.tables["users"][1].update(contact_info="line: bob", specific_location="台北")

        updated = UserService.update_profile(
            APPLICANT_ID,
            ProfileUpdate(contact_info="  ", specific_location=""),
        )

        assert updated["contact_info"] is None
        assert updated["specific_location"] is None

    def test_empty_update_returns_profile(self, seeded_db):
        profile = UserService.update_profile(APPLICANT_ID, ProfileUpdate())

        assert profile["name"] == "Bob"
        assert seeded_db.write_log == []

    def test_update_missing_profile(self, seeded_db):
        with pytest.raises(UserNotFoundError):
            UserService.update_profile(NEW_USER_ID, ProfileUpdate(name="Eve"))


# =============================================================================
# Avatar
# =============================================================================

class TestAvatar:
    """Tests for StorageService."""

    def test_upload_avatar(self, seeded_db):
        url = StorageService.upload_avatar(APPLICANT_ID, b"\x89PNG...", "image/png")

        assert url.endswith(f"/avatars/{APPLICANT_ID}/avatar")
        assert seeded_db.get("users", APPLICANT_ID)["avatar_url"] == url

        stored = seeded_db.storage.objects[("avatars", f"{APPLICANT_ID}/avatar")]
        assert stored["options"]["upsert"] == "true"
        assert stored["options"]["content-type"] == "image/png"

    def test_reject_wrong_type(self, seeded_db):
        with pytest.raises(InvalidFileTypeError):
            StorageService.upload_avatar(APPLICANT_ID, b"%PDF", "application/pdf")

        assert seeded_db.storage.objects == {}

    def test_reject_large_file(self, seeded_db):
        too_big = b"0" * (5 * 1024 * 1024 + 1)

        with pytest.raises(FileTooLargeError):
            StorageService.upload_avatar(APPLICANT_ID, too_big, "image/jpeg")

    def test_storage_failure(self, seeded_db):
        seeded_db.fail("storage", "upload")

        with pytest.raises(StorageUploadError):
            StorageService.upload_avatar(APPLICANT_ID, b"img", "image/webp")

        assert seeded_db.get("users", APPLICANT_ID).get("avatar_url") is None

    def test_remove_avatar(self, seeded_db):
        StorageService.upload_avatar(APPLICANT_ID, b"img", "image/gif")

        assert StorageService.remove_avatar(APPLICANT_ID) is True
        assert seeded_db.get("users", APPLICANT_ID)["avatar_url"] is None
        assert seeded_db.storage.objects == {}

    def test_remove_avatar_clears_column_when_storage_fails(self, seeded_db):
        seeded_db.tables["users"][1]["avatar_url"] = "https://example.com/old.png"
        seeded_db.fail("storage", "remove")

        assert StorageService.remove_avatar(APPLICANT_ID) is False
        assert seeded_db.get("users", APPLICANT_ID)["avatar_url"] is None


# =============================================================================
# Registration & Sign-in
# =============================================================================

def _auth_response(user_id, email, name=None, with_session=True):
    user = SimpleNamespace(id=user_id, email=email, user_metadata={"name": name} if name else {})
    session = SimpleNamespace(
        access_token="access-123",
        refresh_token="refresh-456",
        expires_in=3600,
    ) if with_session else None
    return SimpleNamespace(user=user, session=session)


class TestAuthService:
    """Tests for AuthService with a mocked GoTrue client."""

    def test_register_creates_profile_with_defaults(self, seeded_db):
        auth_client = MagicMock()
        auth_client.auth.sign_up.return_value = _auth_response(NEW_USER_ID, "eve@example.com", "Eve")

        with patch.object(SupabaseClient, "create_auth_client", return_value=auth_client):
            result = AuthService.register("Eve", "eve@example.com", "Secret123")

        sign_up_args = auth_client.auth.sign_up.call_args.args[0]
        assert sign_up_args["options"]["data"] == {"name": "Eve"}

        profile = seeded_db.get("users", NEW_USER_ID)
        assert profile["name"] == "Eve"
        assert profile["work_mode"] == "fulltime"
        assert profile["location_preference"] == "remote"
        assert profile["is_public"] is False
        assert profile["skills"] == []
        assert result["access_token"] == "access-123"

    def test_register_without_immediate_session(self, seeded_db):
        """E-mail confirmation flow: profile created, no tokens."""
        auth_client = MagicMock()
        auth_client.auth.sign_up.return_value = _auth_response(
            NEW_USER_ID, "eve@example.com", with_session=False
        )

        with patch.object(SupabaseClient, "create_auth_client", return_value=auth_client):
            result = AuthService.register("Eve", "eve@example.com", "Secret123")

        assert "access_token" not in result
        assert seeded_db.get("users", NEW_USER_ID) is not None

    def test_register_refused(self, seeded_db):
        auth_client = MagicMock()
        auth_client.auth.sign_up.side_effect = Exception("User already registered")

        with patch.object(SupabaseClient, "create_auth_client", return_value=auth_client):
            with pytest.raises(RegistrationError):
                AuthService.register("Eve", "eve@example.com", "Secret123")

        assert seeded_db.get("users", NEW_USER_ID) is None

    def test_login_existing_profile(self, seeded_db):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.return_value = _auth_response(
            APPLICANT_ID, "bob@example.com"
        )

        with patch.object(SupabaseClient, "create_auth_client", return_value=auth_client):
            result = AuthService.login("bob@example.com", "Secret123")

        assert result["name"] == "Bob"
        assert result["refresh_token"] == "refresh-456"
        assert seeded_db.write_log == []

    def test_login_creates_missing_profile(self, seeded_db):
        """Accounts without a profile row get one on first sign-in."""
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.return_value = _auth_response(
            NEW_USER_ID, "eve@example.com"
        )

        with patch.object(SupabaseClient, "create_auth_client", return_value=auth_client):
            result = AuthService.login("eve@example.com", "Secret123")

        assert result["name"] == "eve"
        assert seeded_db.get("users", NEW_USER_ID)["is_public"] is False

    def test_login_wrong_password(self, seeded_db):
        auth_client = MagicMock()
        auth_client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        with patch.object(SupabaseClient, "create_auth_client", return_value=auth_client):
            with pytest.raises(AuthenticationError) as exc_info:
                AuthService.login("bob@example.com", "wrong")

        assert exc_info.value.status_code == 401

    def test_logout_revokes_session(self, seeded_db):
        AuthService.logout("access-123")

        seeded_db.auth.admin.sign_out.assert_called_once_with("access-123")

    def test_logout_failure_is_swallowed(self, seeded_db):
        seeded_db.auth.admin.sign_out.side_effect = Exception("network down")

        AuthService.logout("access-123")
