# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .application_service import ApplicationService
from .auth_service import AuthService
from .invitation_service import InvitationService
from .project_service import ProjectService
from .storage_service import StorageService
from .user_service import UserService
from .workflow_service import APPLICATION, INVITATION, RequestKind, WorkflowService

__all__ = [
    "ApplicationService",
    "AuthService",
    "InvitationService",
    "ProjectService",
    "StorageService",
    "UserService",
    "WorkflowService",
    "RequestKind",
    "APPLICATION",
    "INVITATION",
]
