# =============================================================================
# core/route_guard.py - Page Route Protection Rules
# =============================================================================
# Decides where a page request should be sent based on whether the visitor
# has a session:
# - protected pages without a session   -> login page
# - login/register pages with a session -> home page
# Matching is by path prefix, so "/profile" also covers "/profile/edit".
# =============================================================================

from typing import Sequence

HOME_PATH = "/"


def matches_prefix(path: str, prefixes: Sequence[str]) -> bool:
    """True if the path starts with any of the prefixes."""
    return any(path.startswith(prefix) for prefix in prefixes if prefix)


def resolve_redirect(
    path: str,
    is_authenticated: bool,
    protected_prefixes: Sequence[str],
    auth_prefixes: Sequence[str],
    login_path: str,
) -> str | None:
    """
    Get the redirect target for a request, or None to let it through.

    Args:
        path: Request path
        is_authenticated: Whether the request carries a valid session
        protected_prefixes: Pages that need a session
        auth_prefixes: Login / register pages
        login_path: Where unauthenticated visitors are sent

    Example:
        >>> resolve_redirect("/profile", False, ["/profile"], ["/auth/login"], "/auth/login")
        '/auth/login'
    """
    if not is_authenticated and matches_prefix(path, protected_prefixes):
        return login_path

    if is_authenticated and matches_prefix(path, auth_prefixes):
        return HOME_PATH

    return None
