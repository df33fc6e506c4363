# =============================================================================
# core/models/workflow.py - Request Workflow Results
# =============================================================================
# Typed result of accepting, rejecting or withdrawing an application or an
# invitation. Every UI surface gets the same shape back:
# - outcome: what happened (success / already processed / conflict / error)
# - request: the row as it stands after the operation
# - notification: short title + description to show the user
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class WorkflowOutcome(str, Enum):
    """
    Outcome of a workflow operation.

    - success: all required writes happened
    - already_processed: the row was no longer pending, nothing was written
    - conflict: the user could not be added to the team (already a member)
    - backend_error: a backend call failed
    """
    SUCCESS = "success"
    ALREADY_PROCESSED = "already_processed"
    CONFLICT = "conflict"
    BACKEND_ERROR = "backend_error"


class Notification(BaseModel):
    """
    User-facing message describing an operation's result.

    Example:
        {"title": "申請已通過！", "description": "王小明 已成功加入專案"}
    """
    title: str = Field(..., description="Short headline")
    description: str | None = Field(default=None, description="Follow-up detail or suggestion")


class WorkflowResult(BaseModel):
    """Result of a single accept / reject / withdraw call."""

    outcome: WorkflowOutcome = Field(
        ...,
        description="What happened"
    )

    request: dict[str, Any] | None = Field(
        default=None,
        description="The application/invitation row after the operation"
    )

    notification: Notification = Field(
        ...,
        description="Message to show the user"
    )

    # Only set when the membership insert failed after the status update
    compensated: bool | None = Field(
        default=None,
        description="Whether the status was reverted to pending after a failed join"
    )

    # Only set by accept; False when the counter RPC failed
    team_size_synced: bool | None = Field(
        default=None,
        description="Whether current_team_size was incremented"
    )

    @property
    def ok(self) -> bool:
        return self.outcome == WorkflowOutcome.SUCCESS
