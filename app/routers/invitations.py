# =============================================================================
# app/routers/invitations.py - Invitation Endpoints
# =============================================================================
# Creating, listing and responding to invitations (a project creator asking
# a talent to join). All endpoints require authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from app.dependencies import CurrentUser, workflow_response
from core.models.request import AcceptRequest, InvitationCreate, RejectRequest, RequestStatus
from core.services.invitation_service import InvitationService
from core.services.workflow_service import INVITATION, WorkflowService

router = APIRouter()

InvitationIdPath = Annotated[UUID, Path(description="Invitation UUID")]
StatusQuery = Annotated[RequestStatus | None, Query(description="Filter by status")]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_invitation(request: InvitationCreate, user: CurrentUser):
    """
    Invite a talent to one of the authenticated user's projects.

    Returns 409 if a pending invitation exists or the talent is already
    on the team.
    """
    return InvitationService.create_invitation(
        request.project_id,
        user.id,
        request.invitee_id,
        message=request.message,
    )


@router.get("/received")
async def list_received(user: CurrentUser, status: StatusQuery = None):
    """List invitations addressed to the authenticated user."""
    invitations = InvitationService.list_received(user.id, status=status)
    return {"invitations": invitations, "total": len(invitations)}


@router.get("/sent")
async def list_sent(user: CurrentUser, status: StatusQuery = None):
    """List invitations the authenticated user sent."""
    invitations = InvitationService.list_sent(user.id, status=status)
    return {"invitations": invitations, "total": len(invitations)}


@router.post("/{invitation_id}/accept")
async def accept_invitation(
    invitation_id: InvitationIdPath,
    user: CurrentUser,
    request: AcceptRequest | None = None,
):
    """Accept an invitation (invitee only) and join the team."""
    result = WorkflowService.accept(
        INVITATION,
        invitation_id,
        user.id,
        response_message=request.response_message if request else None,
    )
    return workflow_response(result)


@router.post("/{invitation_id}/reject")
async def reject_invitation(
    invitation_id: InvitationIdPath,
    request: RejectRequest,
    user: CurrentUser,
):
    """Decline an invitation with a reason (invitee only)."""
    result = WorkflowService.reject(INVITATION, invitation_id, user.id, request.reason)
    return workflow_response(result)


@router.delete("/{invitation_id}")
async def withdraw_invitation(
    invitation_id: InvitationIdPath,
    user: CurrentUser,
):
    """Withdraw a pending invitation (inviter only)."""
    result = WorkflowService.withdraw(INVITATION, invitation_id, user.id)
    return workflow_response(result)
