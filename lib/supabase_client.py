# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase operations.
# It implements the singleton pattern to reuse a single service-role client
# and provides:
# - Single-row fetches for users, projects and request rows
# - Classification of PostgREST errors (row not found, unique violation)
# - Short-lived anon-key clients for auth calls (sign up / sign in)
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   project = SupabaseClient.fetch_project(project_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NOT_FOUND_CODE = "PGRST116"

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries an actionable suggestion next to the failure itself.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def error_code(error: Exception) -> str | None:
    """Return the PostgREST / Postgres error code carried by an exception."""
    if isinstance(error, APIError):
        return str(error.code) if error.code else None
    code = getattr(error, "code", None)
    return str(code) if code else None


def is_not_found_error(error: Exception) -> bool:
    """True when a .single() query matched no rows."""
    return error_code(error) == NOT_FOUND_CODE or NOT_FOUND_CODE in str(error)


def is_unique_violation(error: Exception) -> bool:
    """True when an insert hit a unique constraint or unique index."""
    return (
        error_code(error) == UNIQUE_VIOLATION_CODE
        or UNIQUE_VIOLATION_CODE in str(error)
        or "duplicate key" in str(error)
    )


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one service-role client instance is shared
    across the application. All methods are class methods for easy access
    without instantiation.

    Example:
        project = SupabaseClient.fetch_project("550e8400-...")
        if project and project["is_recruiting"]:
            ...
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key which bypasses Row Level Security (RLS);
        ownership checks are done in the service layer.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a fresh anon-key client for auth subsystem calls.

        Sign-in stores a session on the client it runs on, so these calls
        never go through the shared service-role singleton.
        """
        try:
            return create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_ANON_KEY,
                options=ClientOptions(
                    persist_session=False,
                    auto_refresh_token=False,
                ),
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="AUTH_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Single Row Fetches
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_row(
        cls,
        table: str,
        row_id: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch one row of a table by its id.

        Args:
            table: Table name
            row_id: Row UUID
            columns: PostgREST select expression (may embed relations)

        Returns:
            Row dict, or None if no row has that id

        Raises:
            SupabaseClientError: If the query fails for another reason
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq("id", row_id_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if is_not_found_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code="FETCH_ROW_FAILED",
                suggestion=f"Check that the {table} table is reachable",
                details={"table": table, "id": row_id_str}
            )

    @classmethod
    def fetch_user(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a user profile row, or None if it doesn't exist."""
        return cls.fetch_row("users", user_id)

    @classmethod
    def fetch_project(cls, project_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a project row, or None if it doesn't exist."""
        return cls.fetch_row("projects", project_id)

    @classmethod
    def is_project_member(cls, project_id: str | UUID, user_id: str | UUID) -> bool:
        """
        Check whether a user already has a membership row in a project.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("project_members")
                .select("id")
                .eq("project_id", cls._normalize_uuid(project_id))
                .eq("user_id", cls._normalize_uuid(user_id))
                .limit(1)
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to check project membership: {e}",
                code="MEMBERSHIP_CHECK_FAILED",
                details={"project_id": str(project_id), "user_id": str(user_id)}
            )

    # -------------------------------------------------------------------------
    # Remote Procedures
    # -------------------------------------------------------------------------

    @classmethod
    def increment_team_size(cls, project_id: str | UUID) -> None:
        """
        Call the `increment_team_size` procedure for a project.

        Raises:
            SupabaseClientError: If the RPC fails
        """
        client = cls.get_client()
        project_id_str = cls._normalize_uuid(project_id)

        try:
            client.rpc("increment_team_size", {"project_id": project_id_str}).execute()
            logger.debug(f"Incremented team size of project {project_id_str}")

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to increment team size: {e}",
                code="RPC_INCREMENT_TEAM_SIZE_FAILED",
                suggestion="Check that the increment_team_size function exists in the database",
                details={"project_id": project_id_str}
            )
