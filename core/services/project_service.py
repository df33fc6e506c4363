# =============================================================================
# core/services/project_service.py - Project Business Logic
# =============================================================================
# Handles project listings, detail pages, creation / editing and the team
# membership views. Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, sanitize_keyword, utc_now_iso
from core.models.project import (
    MemberRole,
    ParticipationTab,
    ProjectCreate,
    ProjectFilters,
    ProjectUpdate,
)
from app.config import settings
from app.exceptions import ProjectNotFoundError

logger = logging.getLogger(__name__)

CREATOR_COLUMNS = "creator:users!creator_id(id, name, avatar_url)"

MEMBER_COLUMNS = (
    "id, project_id, user_id, role, joined_at, "
    "user:users!user_id(id, name, avatar_url, skills)"
)


def _page_bounds(page: int, page_size: int) -> tuple[int, int]:
    offset = (page - 1) * page_size
    return offset, offset + page_size - 1


class ProjectService:
    """
    Service for project operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def list_projects(
        filters: ProjectFilters | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List public projects that are recruiting, newest first.

        Args:
            filters: Keyword / skills / roles / stage filters
            page: Page number (1-indexed)
            page_size: Items per page (defaults to settings.DEFAULT_PAGE_SIZE)

        Returns:
            Tuple of (projects list, total count)
        """
        filters = filters or ProjectFilters()
        page_size = page_size or settings.DEFAULT_PAGE_SIZE
        client = SupabaseClient.get_client()

        query = (
            client.table("projects")
            .select(f"*, {CREATOR_COLUMNS}", count="exact")
            .eq("is_public", True)
            .eq("is_recruiting", True)
        )

        keyword = sanitize_keyword(filters.keyword)
        if keyword:
            query = query.or_(
                f"title.ilike.%{keyword}%,description.ilike.%{keyword}%"
            )
        if filters.skills:
            query = query.overlaps("required_skills", filters.skills)
        if filters.required_roles:
            query = query.overlaps("required_roles", filters.required_roles)
        if filters.project_stage:
            query = query.in_("project_stage", [s.value for s in filters.project_stage])

        offset, end = _page_bounds(page, page_size)
        query = query.order("created_at", desc=True).range(offset, end)

        try:
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            logger.error(f"Failed to list projects: {e}")
            raise

    @staticmethod
    def can_view(project: dict[str, Any], viewer_id: str | UUID | None = None) -> bool:
        """
        Whether a viewer may see a project.

        Public projects are visible to everyone; private ones only to their
        creator and team members.
        """
        if project.get("is_public", True):
            return True
        if viewer_id is None:
            return False

        viewer_id_str = normalize_uuid(viewer_id)
        if str(project["creator_id"]) == viewer_id_str:
            return True
        return SupabaseClient.is_project_member(project["id"], viewer_id_str)

    @staticmethod
    def get_visible_project(
        project_id: str | UUID,
        viewer_id: str | UUID | None = None,
        columns: str = "*",
    ) -> dict[str, Any]:
        """
        Fetch a project row the viewer is allowed to see.

        Raises:
            ProjectNotFoundError: If project doesn't exist or is private to the viewer
        """
        project_id_str = normalize_uuid(project_id)
        project = SupabaseClient.fetch_row("projects", project_id_str, columns=columns)

        # Private projects look missing to outsiders
        if not project or not ProjectService.can_view(project, viewer_id):
            raise ProjectNotFoundError(project_id_str)
        return project

    @staticmethod
    def get_project(
        project_id: str | UUID,
        viewer_id: str | UUID | None = None,
    ) -> dict[str, Any]:
        """
        Get a project with its creator summary and team members.

        Raises:
            ProjectNotFoundError: If project doesn't exist or is private to the viewer
        """
        project = ProjectService.get_visible_project(
            project_id, viewer_id, columns=f"*, {CREATOR_COLUMNS}"
        )
        project["members"] = ProjectService.list_members(project_id)
        return project

    @staticmethod
    def get_members(
        project_id: str | UUID,
        viewer_id: str | UUID | None = None,
    ) -> list[dict[str, Any]]:
        """
        List the team of a project the viewer is allowed to see.

        Raises:
            ProjectNotFoundError: If project doesn't exist or is private to the viewer
        """
        ProjectService.get_visible_project(project_id, viewer_id)
        return ProjectService.list_members(project_id)

    @staticmethod
    def create_project(
        creator_id: str | UUID,
        payload: ProjectCreate,
    ) -> dict[str, Any]:
        """
        Create a project owned by the caller.

        The team starts at one person, and the creator's membership row is
        written explicitly right after the project row. A failed membership
        write is logged but doesn't undo the project.

        Args:
            creator_id: User creating the project
            payload: Validated form data

        Returns:
            Created project dict
        """
        client = SupabaseClient.get_client()
        creator_id_str = normalize_uuid(creator_id)

        data = payload.model_dump(mode="json")
        data.update({
            "creator_id": creator_id_str,
            "current_team_size": 1,
            "is_recruiting": True,
        })

        try:
            response = client.table("projects").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create project: {e}")
            raise

        if not response.data:
            raise Exception("Insert returned no data")

        project = response.data[0]
        logger.info(f"Created project: {project['id']} for user: {creator_id_str}")

        try:
            client.table("project_members").insert({
                "project_id": project["id"],
                "user_id": creator_id_str,
                "role": MemberRole.CREATOR.value,
            }).execute()
        except Exception as e:
            logger.warning(
                f"Failed to add creator {creator_id_str} as member of project {project['id']}: {e}"
            )

        return project

    @staticmethod
    def update_project(
        project_id: str | UUID,
        creator_id: str | UUID,
        payload: ProjectUpdate,
    ) -> dict[str, Any]:
        """
        Update a project. Only the creator may edit it.

        Raises:
            ProjectNotFoundError: If project doesn't exist or isn't the caller's
        """
        project_id_str = normalize_uuid(project_id)
        creator_id_str = normalize_uuid(creator_id)

        project = SupabaseClient.fetch_project(project_id_str)
        if not project or str(project["creator_id"]) != creator_id_str:
            raise ProjectNotFoundError(project_id_str)

        update_data = payload.model_dump(mode="json", exclude_none=True)
        if not update_data:
            return project  # Nothing to update

        update_data["updated_at"] = utc_now_iso()
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("projects")
                .update(update_data)
                .eq("id", project_id_str)
                .eq("creator_id", creator_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update project: {e}")
            raise

        if not response.data:
            raise ProjectNotFoundError(project_id_str)

        logger.info(f"Updated project: {project_id_str}")
        return response.data[0]

    @staticmethod
    def list_created(creator_id: str | UUID) -> list[dict[str, Any]]:
        """List every project the user created, newest first."""
        client = SupabaseClient.get_client()

        response = (
            client.table("projects")
            .select("*")
            .eq("creator_id", normalize_uuid(creator_id))
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def list_participating(
        user_id: str | UUID,
        tab: ParticipationTab = ParticipationTab.ALL,
    ) -> list[dict[str, Any]]:
        """
        List the projects a user is on, with their role and join date.

        Each item is the project row plus `member_role` and `joined_at`,
        most recently joined first.

        Args:
            user_id: The member
            tab: all, created (role creator) or joined (role member)
        """
        client = SupabaseClient.get_client()

        query = (
            client.table("project_members")
            .select(f"role, joined_at, project:projects!project_id(*, {CREATOR_COLUMNS})")
            .eq("user_id", normalize_uuid(user_id))
        )
        if tab == ParticipationTab.CREATED:
            query = query.eq("role", MemberRole.CREATOR.value)
        elif tab == ParticipationTab.JOINED:
            query = query.eq("role", MemberRole.MEMBER.value)

        response = query.order("joined_at", desc=True).execute()

        projects = []
        for row in response.data or []:
            project = row.get("project")
            if not project:
                continue
            projects.append({
                **project,
                "member_role": row["role"],
                "joined_at": row.get("joined_at"),
            })
        return projects

    @staticmethod
    def list_members(project_id: str | UUID) -> list[dict[str, Any]]:
        """List a project's team members, oldest first. No visibility check."""
        client = SupabaseClient.get_client()

        response = (
            client.table("project_members")
            .select(MEMBER_COLUMNS)
            .eq("project_id", normalize_uuid(project_id))
            .order("joined_at")
            .execute()
        )
        return response.data or []
