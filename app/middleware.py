# =============================================================================
# app/middleware.py - Route Guard Middleware
# =============================================================================
# Redirects page requests according to core.route_guard:
# - protected pages without a valid session -> settings.LOGIN_PATH
# - login/register pages with a valid session -> "/"
#
# The session is read from the Bearer header or the sb-access-token cookie.
# =============================================================================

import logging
from typing import Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from app.auth.dependencies import ACCESS_TOKEN_COOKIE, InvalidTokenError, decode_access_token
from app.config import settings
from core.route_guard import matches_prefix, resolve_redirect

logger = logging.getLogger(__name__)


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """
    Middleware that keeps signed-out visitors off protected pages and
    signed-in visitors off the login/register pages.

    Args:
        protected_prefixes: Path prefixes that need a session
        auth_prefixes: Login / register path prefixes
        login_path: Redirect target for signed-out visitors
    """

    def __init__(
        self,
        app,
        protected_prefixes: Optional[Sequence[str]] = None,
        auth_prefixes: Optional[Sequence[str]] = None,
        login_path: Optional[str] = None,
    ):
        super().__init__(app)
        self.protected_prefixes = list(
            settings.protected_path_prefixes_list if protected_prefixes is None else protected_prefixes
        )
        self.auth_prefixes = list(
            settings.auth_path_prefixes_list if auth_prefixes is None else auth_prefixes
        )
        self.login_path = login_path or settings.LOGIN_PATH

    def is_authenticated(self, request: Request) -> bool:
        """Whether the request carries a token that verifies."""
        token = request.cookies.get(ACCESS_TOKEN_COOKIE)
        auth_header = request.headers.get("Authorization", "")
        if auth_header.lower().startswith("bearer "):
            token = auth_header[7:].strip()

        if not token:
            return False

        try:
            decode_access_token(token)
            return True
        except InvalidTokenError as e:
            logger.debug(f"Ignoring invalid session on {request.url.path}: {e}")
            return False

    async def dispatch(self, request: Request, call_next):
        """Process the request through the middleware."""
        path = request.url.path

        # Only guarded paths pay for token verification
        if not matches_prefix(path, self.protected_prefixes + self.auth_prefixes):
            return await call_next(request)

        target = resolve_redirect(
            path,
            self.is_authenticated(request),
            self.protected_prefixes,
            self.auth_prefixes,
            self.login_path,
        )
        if target:
            logger.debug(f"Redirecting {path} -> {target}")
            return RedirectResponse(url=target, status_code=307)

        return await call_next(request)
