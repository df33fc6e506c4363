# =============================================================================
# app/routers/talents.py - Talent Directory Endpoints
# =============================================================================
# Public directory of users who made their profile public.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from app.dependencies import OptionalUser, PaginationDep
from core.models.user import LocationPreference, TalentFilters, TalentList, UserProfile, WorkMode
from core.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=TalentList)
async def list_talents(
    pagination: PaginationDep,
    keyword: Annotated[str | None, Query(description="Matches name, experience or partner description")] = None,
    skills: Annotated[list[str] | None, Query(description="Any of these skills")] = None,
    work_mode: Annotated[list[WorkMode] | None, Query()] = None,
    location_preference: Annotated[list[LocationPreference] | None, Query()] = None,
):
    """List public profiles, newest first."""
    filters = TalentFilters(
        keyword=keyword,
        skills=skills or [],
        work_mode=work_mode or [],
        location_preference=location_preference or [],
    )
    users, total = UserService.list_talents(
        filters,
        page=pagination.page,
        page_size=pagination.page_size,
    )

    return {"users": users, **pagination.envelope(total)}


@router.get("/{user_id}", response_model=UserProfile)
async def get_talent(
    user_id: Annotated[UUID, Path(description="User UUID")],
    viewer: OptionalUser,
):
    """
    Get a talent's profile.

    Returns 404 if the user doesn't exist and 403 if the profile is private
    (owners can always see their own).
    """
    return UserService.get_talent(user_id, viewer_id=viewer.id if viewer else None)
