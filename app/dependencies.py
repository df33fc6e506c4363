# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated, Any, Optional

from fastapi import Depends, Query

from app.auth import AuthUser, get_current_user, get_current_user_optional
from app.config import settings
from app.exceptions import WorkflowError
from core.models.workflow import WorkflowResult


class Pagination:
    """Page / page_size query parameters for listing endpoints."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="Page number")] = 1,
        page_size: Annotated[
            Optional[int], Query(ge=1, le=100, description="Items per page")
        ] = None,
    ):
        self.page = page
        self.page_size = page_size or settings.DEFAULT_PAGE_SIZE

    def envelope(self, total: int) -> dict[str, Any]:
        """Paging fields of a list response."""
        return {
            "total": total,
            "page": self.page,
            "page_size": self.page_size,
            "has_next": self.page * self.page_size < total,
            "has_prev": self.page > 1,
        }


def workflow_response(result: WorkflowResult) -> dict[str, Any]:
    """
    Body of a successful accept / reject / withdraw call.

    Raises:
        WorkflowError: If the outcome is not success
    """
    if not result.ok:
        raise WorkflowError(result)
    return {
        "request": result.request,
        "notification": result.notification.model_dump(),
        "team_size_synced": result.team_size_synced,
    }


# Type aliases for dependency injection
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
OptionalUser = Annotated[Optional[AuthUser], Depends(get_current_user_optional)]
PaginationDep = Annotated[Pagination, Depends()]
