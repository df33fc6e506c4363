# =============================================================================
# core/services/invitation_service.py - Invitations to Join Projects
# =============================================================================
# Creating and listing invitations. Status transitions (accept, reject,
# withdraw) live in WorkflowService.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError, is_unique_violation
from lib.utils import normalize_uuid
from core.models.request import RequestStatus
from app.exceptions import (
    AlreadyInvitedError,
    AlreadyMemberError,
    ProjectNotFoundError,
    SelfRequestError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


class InvitationService:
    """
    Service for invitations (a project creator asking a user to join).
    """

    @staticmethod
    def create_invitation(
        project_id: str | UUID,
        inviter_id: str | UUID,
        invitee_id: str | UUID,
        message: str | None = None,
    ) -> dict[str, Any]:
        """
        Invite a user to one of the inviter's projects.

        Returns:
            Inserted invitation dict (status pending)

        Raises:
            ProjectNotFoundError: If the project doesn't exist or the inviter didn't create it
            SelfRequestError: If inviter and invitee are the same user
            UserNotFoundError: If the invitee doesn't exist
            AlreadyMemberError: If the invitee is already on the team
            AlreadyInvitedError: If a pending invitation exists
        """
        project_id_str = normalize_uuid(project_id)
        inviter_id_str = normalize_uuid(inviter_id)
        invitee_id_str = normalize_uuid(invitee_id)

        project = SupabaseClient.fetch_project(project_id_str)
        if not project or str(project["creator_id"]) != inviter_id_str:
            raise ProjectNotFoundError(project_id_str)

        if invitee_id_str == inviter_id_str:
            raise SelfRequestError("無法邀請自己加入專案")

        if not SupabaseClient.fetch_user(invitee_id_str):
            raise UserNotFoundError(invitee_id_str)

        if SupabaseClient.is_project_member(project_id_str, invitee_id_str):
            raise AlreadyMemberError(project_id_str, invitee_id_str, message="此用戶已經是專案成員")

        client = SupabaseClient.get_client()

        try:
            existing = (
                client.table("invitations")
                .select("id")
                .eq("project_id", project_id_str)
                .eq("invitee_id", invitee_id_str)
                .eq("status", RequestStatus.PENDING.value)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to check for a pending invitation: {e}",
                code="DUPLICATE_CHECK_FAILED",
                details={"project_id": project_id_str, "invitee_id": invitee_id_str}
            )
        if existing.data:
            raise AlreadyInvitedError(project_id_str, invitee_id_str)

        data = {
            "project_id": project_id_str,
            "inviter_id": inviter_id_str,
            "invitee_id": invitee_id_str,
            "message": (message or "").strip() or f"邀請您加入「{project['title']}」專案",
            "status": RequestStatus.PENDING.value,
        }

        try:
            response = client.table("invitations").insert(data).execute()
        except Exception as e:
            if is_unique_violation(e):
                raise AlreadyInvitedError(project_id_str, invitee_id_str)
            logger.error(f"Failed to create invitation: {e}")
            raise

        if not response.data:
            raise Exception("Insert returned no data")

        invitation = response.data[0]
        logger.info(
            f"User {inviter_id_str} invited {invitee_id_str} to project {project_id_str}: {invitation['id']}"
        )
        return invitation

    @staticmethod
    def list_received(
        invitee_id: str | UUID,
        status: RequestStatus | None = None,
    ) -> list[dict[str, Any]]:
        """List invitations addressed to the user, newest first."""
        client = SupabaseClient.get_client()

        query = (
            client.table("invitations")
            .select(
                "*, project:projects!project_id(*), "
                "inviter:users!inviter_id(id, name, avatar_url)"
            )
            .eq("invitee_id", normalize_uuid(invitee_id))
        )
        if status:
            query = query.eq("status", status.value)

        response = query.order("created_at", desc=True).execute()
        return response.data or []

    @staticmethod
    def list_sent(
        inviter_id: str | UUID,
        status: RequestStatus | None = None,
    ) -> list[dict[str, Any]]:
        """List invitations the user sent, newest first."""
        client = SupabaseClient.get_client()

        query = (
            client.table("invitations")
            .select(
                "*, project:projects!project_id(*), "
                "invitee:users!invitee_id(id, name, avatar_url, skills)"
            )
            .eq("inviter_id", normalize_uuid(inviter_id))
        )
        if status:
            query = query.eq("status", status.value)

        response = query.order("created_at", desc=True).execute()
        return response.data or []
