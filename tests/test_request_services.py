# =============================================================================
# tests/test_request_services.py - Application & Invitation Creation Tests
# =============================================================================
# This module contains tests for:
# - Applying to projects (recruiting, self, member and duplicate checks)
# - Inviting talents (creator-only, self, member and duplicate checks)
# - Received / sent listings with status filters
# =============================================================================

import pytest

from app.exceptions import (
    AlreadyAppliedError,
    AlreadyInvitedError,
    AlreadyMemberError,
    ProjectNotFoundError,
    ProjectNotRecruitingError,
    SelfRequestError,
    UserNotFoundError,
)
from core.models.request import RequestStatus
from core.services.application_service import ApplicationService
from core.services.invitation_service import InvitationService
from lib.supabase_client import SupabaseClientError
from tests.conftest import APPLICANT_ID, CREATOR_ID, INVITEE_ID, OUTSIDER_ID, PROJECT_ID
from tests.fake_supabase import api_error


# =============================================================================
# Creating Applications
# =============================================================================

class TestCreateApplication:
    """Tests for ApplicationService.create_application."""

    def test_apply_with_default_message(self, seeded_db):
        """Pending row with the greeting built from the project title."""
        application = ApplicationService.create_application(PROJECT_ID, APPLICANT_ID)

        assert application["status"] == "pending"
        assert application["message"] == "我想加入「AI 旅遊規劃助手」專案！"
        assert application["applicant_id"] == APPLICANT_ID

    def test_apply_with_message(self, seeded_db):
        """Given message is kept (trimmed)."""
        application = ApplicationService.create_application(
            PROJECT_ID, APPLICANT_ID, message="  我會寫 Python  "
        )

        assert application["message"] == "我會寫 Python"

    def test_missing_project(self, seeded_db):
        with pytest.raises(ProjectNotFoundError):
            ApplicationService.create_application(
                "99999999-9999-9999-9999-999999999999", APPLICANT_ID
            )

    def test_project_not_recruiting(self, seeded_db):
        """Closed projects refuse applications."""
        seeded_db.tables["projects"][0]["is_recruiting"] = False

        with pytest.raises(ProjectNotRecruitingError) as exc_info:
            ApplicationService.create_application(PROJECT_ID, APPLICANT_ID)

        assert exc_info.value.message == "此專案目前未開放招募"

    def test_creator_cannot_apply(self, seeded_db):
        with pytest.raises(SelfRequestError):
            ApplicationService.create_application(PROJECT_ID, CREATOR_ID)

    def test_member_cannot_apply(self, seeded_db):
        """Dave is already on the team."""
        with pytest.raises(AlreadyMemberError) as exc_info:
            ApplicationService.create_application(PROJECT_ID, OUTSIDER_ID)

        assert exc_info.value.message == "您已經是此專案的成員"

    def test_duplicate_pending_application(self, seeded_db, pending_application):
        """Second pending application for the same pair is refused."""
        with pytest.raises(AlreadyAppliedError) as exc_info:
            ApplicationService.create_application(PROJECT_ID, APPLICANT_ID)

        assert exc_info.value.message == "您已經申請過此專案"
        assert exc_info.value.status_code == 409

    def test_reapply_after_rejection(self, seeded_db):
        """Only pending applications block a new one."""
        seeded_db.seed(
            "applications",
            project_id=PROJECT_ID,
            applicant_id=APPLICANT_ID,
            message="first try",
            status="rejected",
        )

        application = ApplicationService.create_application(PROJECT_ID, APPLICANT_ID)

        assert application["status"] == "pending"
        assert len(seeded_db.rows("applications")) == 2

    def test_unique_violation_on_insert(self, seeded_db):
        """A concurrent duplicate caught by the index maps to the same error."""
        seeded_db.fail("applications", "insert", error=api_error("23505", "duplicate key value"))

        with pytest.raises(AlreadyAppliedError):
            ApplicationService.create_application(PROJECT_ID, APPLICANT_ID)

    def test_private_project_hidden_from_outsiders(self, seeded_db):
        """A private project looks missing to anyone off the team."""
        seeded_db.tables["projects"][0]["is_public"] = False

        with pytest.raises(ProjectNotFoundError):
            ApplicationService.create_application(PROJECT_ID, APPLICANT_ID)

        assert seeded_db.rows("applications") == []

    def test_duplicate_check_failure(self, seeded_db):
        """A failed pending-row lookup surfaces as a backend error, nothing inserted."""
        seeded_db.fail("applications", "select")

        with pytest.raises(SupabaseClientError) as exc_info:
            ApplicationService.create_application(PROJECT_ID, APPLICANT_ID)

        assert exc_info.value.code == "DUPLICATE_CHECK_FAILED"
        assert seeded_db.rows("applications") == []


# =============================================================================
# Creating Invitations
# =============================================================================

class TestCreateInvitation:
    """Tests for InvitationService.create_invitation."""

    def test_invite_with_default_message(self, seeded_db):
        invitation = InvitationService.create_invitation(PROJECT_ID, CREATOR_ID, INVITEE_ID)

        assert invitation["status"] == "pending"
        assert invitation["message"] == "邀請您加入「AI 旅遊規劃助手」專案"
        assert invitation["inviter_id"] == CREATOR_ID

    def test_only_creator_can_invite(self, seeded_db):
        """A team member who didn't create the project can't invite."""
        with pytest.raises(ProjectNotFoundError):
            InvitationService.create_invitation(PROJECT_ID, OUTSIDER_ID, INVITEE_ID)

    def test_cannot_invite_self(self, seeded_db):
        with pytest.raises(SelfRequestError):
            InvitationService.create_invitation(PROJECT_ID, CREATOR_ID, CREATOR_ID)

    def test_unknown_invitee(self, seeded_db):
        with pytest.raises(UserNotFoundError):
            InvitationService.create_invitation(
                PROJECT_ID, CREATOR_ID, "99999999-9999-9999-9999-999999999999"
            )

    def test_cannot_invite_member(self, seeded_db):
        with pytest.raises(AlreadyMemberError):
            InvitationService.create_invitation(PROJECT_ID, CREATOR_ID, OUTSIDER_ID)

    def test_duplicate_pending_invitation(self, seeded_db, pending_invitation):
        with pytest.raises(AlreadyInvitedError) as exc_info:
            InvitationService.create_invitation(PROJECT_ID, CREATOR_ID, INVITEE_ID)

        assert exc_info.value.message == "您已經邀請過此用戶"

    def test_duplicate_check_failure(self, seeded_db):
        seeded_db.fail("invitations", "select")

        with pytest.raises(SupabaseClientError) as exc_info:
            InvitationService.create_invitation(PROJECT_ID, CREATOR_ID, INVITEE_ID)

        assert exc_info.value.code == "DUPLICATE_CHECK_FAILED"
        assert seeded_db.rows("invitations") == []


# =============================================================================
# Listings
# =============================================================================

class TestListings:
    """Received / sent lists for both request types."""

    def test_received_applications_for_creator(self, seeded_db, pending_application):
        """Creator sees applications with applicant and project expanded."""
        received = ApplicationService.list_received(CREATOR_ID)

        assert [a["id"] for a in received] == [pending_application["id"]]
        assert received[0]["applicant"]["name"] == "Bob"
        assert received[0]["project"]["title"] == "AI 旅遊規劃助手"

    def test_received_applications_without_projects(self, seeded_db):
        """Users who created nothing receive nothing."""
        assert ApplicationService.list_received(APPLICANT_ID) == []

    def test_received_filtered_by_status(self, seeded_db, pending_application):
        seeded_db.seed(
            "applications",
            project_id=PROJECT_ID,
            applicant_id=INVITEE_ID,
            message="old",
            status="rejected",
        )

        pending = ApplicationService.list_received(CREATOR_ID, status=RequestStatus.PENDING)
        everything = ApplicationService.list_received(CREATOR_ID)

        assert [a["id"] for a in pending] == [pending_application["id"]]
        assert len(everything) == 2

    def test_sent_applications_newest_first(self, seeded_db, pending_application):
        older = seeded_db.rows("applications")[0]
        newer = seeded_db.seed(
            "applications",
            project_id=PROJECT_ID,
            applicant_id=APPLICANT_ID,
            message="again",
            status="rejected",
        )

        sent = ApplicationService.list_sent(APPLICANT_ID)

        assert [a["id"] for a in sent] == [newer["id"], older["id"]]
        assert sent[0]["project"]["creator"]["name"] == "Alice"

    def test_project_applications_creator_only(self, seeded_db, pending_application):
        assert len(ApplicationService.list_for_project(PROJECT_ID, CREATOR_ID)) == 1

        with pytest.raises(ProjectNotFoundError):
            ApplicationService.list_for_project(PROJECT_ID, APPLICANT_ID)

    def test_invitation_lists(self, seeded_db, pending_invitation):
        received = InvitationService.list_received(INVITEE_ID)
        sent = InvitationService.list_sent(CREATOR_ID)

        assert received[0]["inviter"]["name"] == "Alice"
        assert sent[0]["invitee"]["name"] == "Carol"
        assert InvitationService.list_received(CREATOR_ID) == []
