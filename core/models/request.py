# =============================================================================
# core/models/request.py - Application & Invitation Schemas
# =============================================================================
# Applications (user -> project) and invitations (project creator -> user)
# share one lifecycle:
#
#   pending -> accepted | rejected   (terminal)
#   pending -> removed               (withdrawn by the requester)
# =============================================================================

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class RequestStatus(str, Enum):
    """Status of an application or invitation."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ApplicationCreate(BaseModel):
    """
    Body of "apply to project". The message defaults to a short greeting.

    Example:
        {"message": "我有三年後端經驗，很想加入！"}
    """
    message: str | None = Field(default=None, max_length=1000)


class InvitationCreate(BaseModel):
    """
    Body of "invite a talent to one of my projects".

    Example:
        {
            "project_id": "550e8400-e29b-41d4-a716-446655440000",
            "invitee_id": "660e8400-e29b-41d4-a716-446655440001"
        }
    """
    project_id: UUID
    invitee_id: UUID
    message: str | None = Field(default=None, max_length=1000)


class AcceptRequest(BaseModel):
    """Optional response message sent back when accepting."""
    response_message: str | None = Field(default=None, max_length=1000)


class RejectRequest(BaseModel):
    """Rejection requires a reason; blank reasons are refused by the workflow."""
    reason: str = Field(default="", max_length=1000)
