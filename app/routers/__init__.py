# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - projects.py: Project browsing, creation and team endpoints
# - talents.py: Public talent directory
# - profile.py: Own profile and avatar
# - applications.py: Application lists and responses
# - invitations.py: Invitation creation, lists and responses
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import projects
from . import talents
from . import profile
from . import applications
from . import invitations

__all__ = [
    "health",
    "projects",
    "talents",
    "profile",
    "applications",
    "invitations",
]
