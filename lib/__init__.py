# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper and error classification
# - utils.py: Shared utilities (UUID normalization, timestamps, filter text)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import (
    SupabaseClient,
    SupabaseClientError,
    is_not_found_error,
    is_unique_violation,
)
from lib.utils import clean_tags, normalize_uuid, sanitize_keyword, utc_now_iso

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "is_not_found_error",
    "is_unique_violation",
    # Utils
    "clean_tags",
    "normalize_uuid",
    "sanitize_keyword",
    "utc_now_iso",
]
