# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        project_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        project_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the format PostgREST accepts)."""
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Text Utilities
# =============================================================================

# Characters with meaning inside a PostgREST `or=(...)` filter expression
_FILTER_RESERVED = str.maketrans({",": " ", "(": " ", ")": " ", "%": " ", "*": " "})


def sanitize_keyword(keyword: str | None) -> str:
    """
    Make a free-text search keyword safe to embed in an `or_()` filter.

    Reserved characters are replaced by spaces and whitespace is collapsed.
    Returns an empty string when nothing searchable is left.
    """
    if not keyword:
        return ""
    return " ".join(keyword.translate(_FILTER_RESERVED).split())


def clean_tags(values: list[str] | None) -> list[str]:
    """Strip, drop blanks and de-duplicate a tag list, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values or []:
        tag = value.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result
