# =============================================================================
# app/routers/projects.py - Project Endpoints
# =============================================================================
# Browsing, detail pages, creation/editing and team views for projects.
# Browsing and detail are public; everything else requires authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from app.dependencies import CurrentUser, OptionalUser, PaginationDep
from core.models.project import (
    ParticipationTab,
    ProjectCreate,
    ProjectFilters,
    ProjectList,
    ProjectStage,
    ProjectUpdate,
)
from core.models.request import ApplicationCreate, RequestStatus
from core.services.application_service import ApplicationService
from core.services.project_service import ProjectService

router = APIRouter()

ProjectIdPath = Annotated[UUID, Path(description="Project UUID")]


# =============================================================================
# Browsing
# =============================================================================

@router.get("", response_model=ProjectList)
async def list_projects(
    pagination: PaginationDep,
    keyword: Annotated[str | None, Query(description="Matches title or description")] = None,
    skills: Annotated[list[str] | None, Query(description="Any of these required skills")] = None,
    roles: Annotated[list[str] | None, Query(description="Any of these required roles")] = None,
    stage: Annotated[list[ProjectStage] | None, Query(description="Project stages")] = None,
):
    """
    List public projects that are recruiting, newest first.

    Filters combine with AND; skills and roles match when any value overlaps.
    """
    filters = ProjectFilters(
        keyword=keyword,
        skills=skills or [],
        required_roles=roles or [],
        project_stage=stage or [],
    )
    projects, total = ProjectService.list_projects(
        filters,
        page=pagination.page,
        page_size=pagination.page_size,
    )

    return {"projects": projects, **pagination.envelope(total)}


@router.get("/mine")
async def list_my_projects(user: CurrentUser):
    """List the projects the authenticated user created."""
    projects = ProjectService.list_created(user.id)
    return {"projects": projects, "total": len(projects)}


@router.get("/participating")
async def list_participating(
    user: CurrentUser,
    tab: Annotated[ParticipationTab, Query(description="all, created or joined")] = ParticipationTab.ALL,
):
    """
    List the projects the authenticated user is on.

    Each project carries member_role and joined_at.
    """
    projects = ProjectService.list_participating(user.id, tab=tab)
    return {"projects": projects, "total": len(projects), "tab": tab.value}


# =============================================================================
# Single Project
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(request: ProjectCreate, user: CurrentUser):
    """
    Create a project owned by the authenticated user.

    The creator is the first team member.
    """
    return ProjectService.create_project(user.id, request)


@router.get("/{project_id}")
async def get_project(project_id: ProjectIdPath, viewer: OptionalUser):
    """
    Get a project with its creator and team members.

    Private projects return 404 unless the viewer is on the team.
    """
    return ProjectService.get_project(project_id, viewer_id=viewer.id if viewer else None)


@router.patch("/{project_id}")
async def update_project(
    project_id: ProjectIdPath,
    request: ProjectUpdate,
    user: CurrentUser,
):
    """Update a project. Only its creator may edit it."""
    return ProjectService.update_project(project_id, user.id, request)


@router.get("/{project_id}/members")
async def list_members(project_id: ProjectIdPath, viewer: OptionalUser):
    """List a project's team members, oldest first. Private projects return 404 to outsiders."""
    members = ProjectService.get_members(project_id, viewer_id=viewer.id if viewer else None)
    return {"members": members, "total": len(members)}


# =============================================================================
# Applications to a Project
# =============================================================================

@router.post("/{project_id}/applications", status_code=status.HTTP_201_CREATED)
async def apply_to_project(
    project_id: ProjectIdPath,
    user: CurrentUser,
    request: ApplicationCreate | None = None,
):
    """
    Apply to join a project.

    Returns 409 if a pending application already exists or the user is
    already on the team.
    """
    message = request.message if request else None
    return ApplicationService.create_application(project_id, user.id, message=message)


@router.get("/{project_id}/applications")
async def list_project_applications(
    project_id: ProjectIdPath,
    user: CurrentUser,
    status: Annotated[RequestStatus | None, Query(description="Filter by status")] = None,
):
    """List applications to a project. Only its creator may see them."""
    applications = ApplicationService.list_for_project(project_id, user.id, status=status)
    return {"applications": applications, "total": len(applications)}
