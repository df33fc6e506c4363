# =============================================================================
# app/routers/applications.py - Application Endpoints
# =============================================================================
# Lists and status transitions for applications (a user asking to join a
# project). Creating an application lives under /projects/{id}/applications.
#
# Transition responses share one shape: {request, notification}. Outcomes
# other than success come back as errors (409 / 502) with the notification
# as detail + suggestion.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from app.dependencies import CurrentUser, workflow_response
from core.models.request import AcceptRequest, RejectRequest, RequestStatus
from core.services.application_service import ApplicationService
from core.services.workflow_service import APPLICATION, WorkflowService

router = APIRouter()

ApplicationIdPath = Annotated[UUID, Path(description="Application UUID")]
StatusQuery = Annotated[RequestStatus | None, Query(description="Filter by status")]


@router.get("/received")
async def list_received(user: CurrentUser, status: StatusQuery = None):
    """List applications to projects the authenticated user created."""
    applications = ApplicationService.list_received(user.id, status=status)
    return {"applications": applications, "total": len(applications)}


@router.get("/sent")
async def list_sent(user: CurrentUser, status: StatusQuery = None):
    """List the authenticated user's own applications."""
    applications = ApplicationService.list_sent(user.id, status=status)
    return {"applications": applications, "total": len(applications)}


@router.post("/{application_id}/accept")
async def accept_application(
    application_id: ApplicationIdPath,
    user: CurrentUser,
    request: AcceptRequest | None = None,
):
    """
    Accept an application (project creator only).

    The applicant joins the team and the team size goes up by one.
    """
    result = WorkflowService.accept(
        APPLICATION,
        application_id,
        user.id,
        response_message=request.response_message if request else None,
    )
    return workflow_response(result)


@router.post("/{application_id}/reject")
async def reject_application(
    application_id: ApplicationIdPath,
    request: RejectRequest,
    user: CurrentUser,
):
    """Reject an application with a reason (project creator only)."""
    result = WorkflowService.reject(APPLICATION, application_id, user.id, request.reason)
    return workflow_response(result)


@router.delete("/{application_id}")
async def withdraw_application(
    application_id: ApplicationIdPath,
    user: CurrentUser,
):
    """Withdraw a pending application (applicant only)."""
    result = WorkflowService.withdraw(APPLICATION, application_id, user.id)
    return workflow_response(result)
