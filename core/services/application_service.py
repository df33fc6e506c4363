# =============================================================================
# core/services/application_service.py - Applications to Join Projects
# =============================================================================
# Creating and listing applications. Status transitions (accept, reject,
# withdraw) live in WorkflowService.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError, is_unique_violation
from lib.utils import normalize_uuid
from core.models.request import RequestStatus
from core.services.project_service import ProjectService
from app.exceptions import (
    AlreadyAppliedError,
    AlreadyMemberError,
    ProjectNotFoundError,
    ProjectNotRecruitingError,
    SelfRequestError,
)

logger = logging.getLogger(__name__)

RECEIVED_COLUMNS = (
    "*, project:projects!project_id(id, title, creator_id, current_team_size, target_team_size), "
    "applicant:users!applicant_id(id, name, avatar_url, skills, experience_description, "
    "work_mode, location_preference, specific_location)"
)

SENT_COLUMNS = (
    "*, project:projects!project_id(*, creator:users!creator_id(id, name, avatar_url))"
)


class ApplicationService:
    """
    Service for applications (a user asking to join a project).
    """

    @staticmethod
    def create_application(
        project_id: str | UUID,
        applicant_id: str | UUID,
        message: str | None = None,
    ) -> dict[str, Any]:
        """
        Apply to a project.

        The duplicate check is a read before the insert; the partial unique
        index on pending applications catches what slips through, and both
        paths raise AlreadyAppliedError.

        Args:
            project_id: Project to join
            applicant_id: User applying
            message: Optional note to the creator

        Returns:
            Inserted application dict (status pending)

        Raises:
            ProjectNotFoundError: If the project doesn't exist or is private to the applicant
            SelfRequestError: If the applicant created the project
            ProjectNotRecruitingError: If the project isn't recruiting
            AlreadyMemberError: If the applicant is already on the team
            AlreadyAppliedError: If a pending application exists
        """
        project_id_str = normalize_uuid(project_id)
        applicant_id_str = normalize_uuid(applicant_id)

        project = SupabaseClient.fetch_project(project_id_str)
        if not project or not ProjectService.can_view(project, applicant_id_str):
            raise ProjectNotFoundError(project_id_str)

        if str(project["creator_id"]) == applicant_id_str:
            raise SelfRequestError("無法申請自己建立的專案")

        if not project.get("is_recruiting", True):
            raise ProjectNotRecruitingError(project_id_str)

        if SupabaseClient.is_project_member(project_id_str, applicant_id_str):
            raise AlreadyMemberError(project_id_str, applicant_id_str)

        client = SupabaseClient.get_client()

        try:
            existing = (
                client.table("applications")
                .select("id")
                .eq("project_id", project_id_str)
                .eq("applicant_id", applicant_id_str)
                .eq("status", RequestStatus.PENDING.value)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to check for a pending application: {e}",
                code="DUPLICATE_CHECK_FAILED",
                details={"project_id": project_id_str, "applicant_id": applicant_id_str}
            )
        if existing.data:
            raise AlreadyAppliedError(project_id_str)

        data = {
            "project_id": project_id_str,
            "applicant_id": applicant_id_str,
            "message": (message or "").strip() or f"我想加入「{project['title']}」專案！",
            "status": RequestStatus.PENDING.value,
        }

        try:
            response = client.table("applications").insert(data).execute()
        except Exception as e:
            if is_unique_violation(e):
                raise AlreadyAppliedError(project_id_str)
            logger.error(f"Failed to create application: {e}")
            raise

        if not response.data:
            raise Exception("Insert returned no data")

        application = response.data[0]
        logger.info(f"User {applicant_id_str} applied to project {project_id_str}: {application['id']}")
        return application

    @staticmethod
    def list_received(
        creator_id: str | UUID,
        status: RequestStatus | None = None,
    ) -> list[dict[str, Any]]:
        """
        List applications to every project the user created, newest first.
        """
        client = SupabaseClient.get_client()

        projects = (
            client.table("projects")
            .select("id")
            .eq("creator_id", normalize_uuid(creator_id))
            .execute()
        )
        project_ids = [p["id"] for p in projects.data or []]
        if not project_ids:
            return []

        query = (
            client.table("applications")
            .select(RECEIVED_COLUMNS)
            .in_("project_id", project_ids)
        )
        if status:
            query = query.eq("status", status.value)

        response = query.order("created_at", desc=True).execute()
        return response.data or []

    @staticmethod
    def list_sent(
        applicant_id: str | UUID,
        status: RequestStatus | None = None,
    ) -> list[dict[str, Any]]:
        """List the user's own applications with project and creator, newest first."""
        client = SupabaseClient.get_client()

        query = (
            client.table("applications")
            .select(SENT_COLUMNS)
            .eq("applicant_id", normalize_uuid(applicant_id))
        )
        if status:
            query = query.eq("status", status.value)

        response = query.order("created_at", desc=True).execute()
        return response.data or []

    @staticmethod
    def list_for_project(
        project_id: str | UUID,
        creator_id: str | UUID,
        status: RequestStatus | None = None,
    ) -> list[dict[str, Any]]:
        """
        List applications to one project. Only its creator may see them.

        Raises:
            ProjectNotFoundError: If the project doesn't exist or isn't the caller's
        """
        project_id_str = normalize_uuid(project_id)

        project = SupabaseClient.fetch_project(project_id_str)
        if not project or str(project["creator_id"]) != normalize_uuid(creator_id):
            raise ProjectNotFoundError(project_id_str)

        client = SupabaseClient.get_client()

        query = (
            client.table("applications")
            .select(
                "*, applicant:users!applicant_id(id, name, avatar_url, skills, experience_description)"
            )
            .eq("project_id", project_id_str)
        )
        if status:
            query = query.eq("status", status.value)

        response = query.order("created_at", desc=True).execute()
        return response.data or []
