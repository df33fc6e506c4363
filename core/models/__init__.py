# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: Profiles and the talent directory
# - project.py: Project listings and membership roles
# - request.py: Applications and invitations
# - workflow.py: Typed results of accept / reject / withdraw
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import (
    LocationPreference,
    ProfileUpdate,
    TalentFilters,
    TalentList,
    UserProfile,
    WorkMode,
)

from .project import (
    MemberRole,
    ParticipationTab,
    ProjectCreate,
    ProjectFilters,
    ProjectList,
    ProjectResponse,
    ProjectStage,
    ProjectUpdate,
)

from .request import (
    AcceptRequest,
    ApplicationCreate,
    InvitationCreate,
    RejectRequest,
    RequestStatus,
)

from .workflow import (
    Notification,
    WorkflowOutcome,
    WorkflowResult,
)

__all__ = [
    # User
    "LocationPreference",
    "ProfileUpdate",
    "TalentFilters",
    "TalentList",
    "UserProfile",
    "WorkMode",
    # Project
    "MemberRole",
    "ParticipationTab",
    "ProjectCreate",
    "ProjectFilters",
    "ProjectList",
    "ProjectResponse",
    "ProjectStage",
    "ProjectUpdate",
    # Request
    "AcceptRequest",
    "ApplicationCreate",
    "InvitationCreate",
    "RejectRequest",
    "RequestStatus",
    # Workflow
    "Notification",
    "WorkflowOutcome",
    "WorkflowResult",
]
