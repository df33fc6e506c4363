# =============================================================================
# core/services/auth_service.py - Sign-up / Sign-in Logic
# =============================================================================
# Talks to Supabase Auth (GoTrue) and keeps the public.users profile row in
# step with the auth account:
#   register -> auth sign-up -> insert profile row with defaults
#   login    -> auth sign-in -> profile row (created if it's missing)
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, is_unique_violation
from lib.utils import normalize_uuid
from core.models.user import LocationPreference, WorkMode
from app.exceptions import AuthenticationError, RegistrationError

logger = logging.getLogger(__name__)


def default_profile(user_id: str, email: str | None, name: str) -> dict[str, Any]:
    """Profile row for a freshly registered user."""
    return {
        "id": user_id,
        "email": email,
        "name": name,
        "skills": [],
        "experience_description": "",
        "work_mode": WorkMode.FULLTIME.value,
        "partner_description": "",
        "location_preference": LocationPreference.REMOTE.value,
        "is_public": False,
    }


def _session_tokens(session: Any) -> dict[str, Any]:
    if session is None:
        return {}
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_in": session.expires_in,
    }


class AuthService:
    """
    Service for account registration and sign-in.
    """

    @staticmethod
    def ensure_profile(
        user_id: str | UUID,
        email: str | None,
        name: str | None = None,
    ) -> dict[str, Any]:
        """
        Return the user's profile row, inserting a default one if missing.

        Args:
            user_id: Auth user id (also the profile id)
            email: Account e-mail
            name: Display name; falls back to the e-mail's local part

        Returns:
            Profile dict
        """
        user_id_str = normalize_uuid(user_id)

        existing = SupabaseClient.fetch_user(user_id_str)
        if existing:
            return existing

        display_name = (name or "").strip() or (email or "").split("@")[0]
        data = default_profile(user_id_str, email, display_name)
        client = SupabaseClient.get_client()

        try:
            response = client.table("users").insert(data).execute()
        except Exception as e:
            # Concurrent first sign-in already created it
            if is_unique_violation(e):
                return SupabaseClient.fetch_user(user_id_str) or data
            logger.error(f"Failed to create profile for {user_id_str}: {e}")
            raise

        logger.info(f"Created profile for user: {user_id_str}")
        return response.data[0] if response.data else data

    @staticmethod
    def register(name: str, email: str, password: str) -> dict[str, Any]:
        """
        Create an auth account and its profile row.

        Returns:
            Dict with user_id, email, name, profile and session tokens (if the
            backend signs the user in immediately)

        Raises:
            RegistrationError: If the auth subsystem refuses the sign-up
        """
        auth_client = SupabaseClient.create_auth_client()

        try:
            response = auth_client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name}},
            })
        except Exception as e:
            logger.warning(f"Sign-up failed for {email}: {e}")
            raise RegistrationError(str(e))

        if response.user is None:
            raise RegistrationError("Sign-up returned no user")

        user_id = str(response.user.id)
        profile = AuthService.ensure_profile(user_id, email, name)
        logger.info(f"Registered user: {user_id}")

        return {
            "user_id": user_id,
            "email": email,
            "name": profile.get("name", name),
            "profile": profile,
            **_session_tokens(response.session),
        }

    @staticmethod
    def login(email: str, password: str) -> dict[str, Any]:
        """
        Sign in with e-mail and password.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        auth_client = SupabaseClient.create_auth_client()

        try:
            response = auth_client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            logger.info(f"Sign-in failed for {email}: {e}")
            raise AuthenticationError(str(e))

        if response.user is None or response.session is None:
            raise AuthenticationError("Sign-in returned no session")

        user_id = str(response.user.id)
        metadata = response.user.user_metadata or {}
        profile = AuthService.ensure_profile(user_id, response.user.email, metadata.get("name"))

        return {
            "user_id": user_id,
            "email": response.user.email,
            "name": profile.get("name"),
            "profile": profile,
            **_session_tokens(response.session),
        }

    @staticmethod
    def logout(access_token: str) -> None:
        """
        Revoke the session behind an access token.

        Failures are logged; the client drops its tokens either way.
        """
        client = SupabaseClient.get_client()

        try:
            client.auth.admin.sign_out(access_token)
            logger.debug("Revoked session")
        except Exception as e:
            logger.warning(f"Failed to revoke session: {e}")
