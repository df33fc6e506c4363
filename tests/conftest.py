# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the Supabase singleton for an in-memory fake
# - Provides seeded users / projects / requests for workflow tests
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import time

import pytest
from jose import jwt

from lib.supabase_client import SupabaseClient
from tests.fake_supabase import FakeSupabase

CREATOR_ID = "11111111-1111-1111-1111-111111111111"
APPLICANT_ID = "22222222-2222-2222-2222-222222222222"
INVITEE_ID = "33333333-3333-3333-3333-333333333333"
OUTSIDER_ID = "44444444-4444-4444-4444-444444444444"
PROJECT_ID = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"


def make_token(user_id: str, email: str = "user@example.com", expires_in: int = 3600, **claims) -> str:
    """Sign an HS256 access token the way Supabase Auth does."""
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
        "iat": int(time.time()),
        **claims,
    }
    return jwt.encode(payload, os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


def user_row(user_id: str, name: str, **overrides) -> dict:
    """Profile row with registration defaults."""
    return {
        "id": user_id,
        "email": f"{name.lower()}@example.com",
        "name": name,
        "skills": [],
        "experience_description": "",
        "work_mode": "fulltime",
        "partner_description": "",
        "location_preference": "remote",
        "is_public": True,
        **overrides,
    }


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db(monkeypatch):
    """In-memory Supabase installed as the service-role singleton."""
    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", fake)
    return fake


@pytest.fixture
def seeded_db(fake_db):
    """
    Three users and one recruiting project with a team of two out of four.

    The creator and one existing member already have membership rows.
    """
    fake_db.seed("users", **user_row(CREATOR_ID, "Alice"))
    fake_db.seed("users", **user_row(APPLICANT_ID, "Bob", skills=["Python", "React"]))
    fake_db.seed("users", **user_row(INVITEE_ID, "Carol", is_public=False))
    fake_db.seed("users", **user_row(OUTSIDER_ID, "Dave"))

    fake_db.seed(
        "projects",
        id=PROJECT_ID,
        creator_id=CREATOR_ID,
        title="AI 旅遊規劃助手",
        description="用對話幫旅客排出完整行程的 App",
        current_team_size=2,
        target_team_size=4,
        required_roles=["後端工程師"],
        required_skills=["Python"],
        project_stage="idea",
        is_recruiting=True,
        is_public=True,
    )
    fake_db.seed("project_members", project_id=PROJECT_ID, user_id=CREATOR_ID, role="creator")
    fake_db.seed("project_members", project_id=PROJECT_ID, user_id=OUTSIDER_ID, role="member")
    return fake_db


@pytest.fixture
def pending_application(seeded_db):
    """Pending application from Bob to the seeded project."""
    return seeded_db.seed(
        "applications",
        project_id=PROJECT_ID,
        applicant_id=APPLICANT_ID,
        message="我想加入「AI 旅遊規劃助手」專案！",
        status="pending",
        response_message=None,
    )


@pytest.fixture
def pending_invitation(seeded_db):
    """Pending invitation from Alice to Carol for the seeded project."""
    return seeded_db.seed(
        "invitations",
        project_id=PROJECT_ID,
        inviter_id=CREATOR_ID,
        invitee_id=INVITEE_ID,
        message="邀請您加入「AI 旅遊規劃助手」專案",
        status="pending",
        response_message=None,
    )
