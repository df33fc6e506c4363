# =============================================================================
# tests/test_project_service.py - Project Service Tests
# =============================================================================
# This module contains tests for:
# - Browsing with keyword / skills / roles / stage filters and pagination
# - Project detail with creator and members
# - Creating (creator membership) and editing (creator only)
# - Participation tabs
# =============================================================================

import pytest

from app.exceptions import ProjectNotFoundError
from core.models.project import (
    ParticipationTab,
    ProjectCreate,
    ProjectFilters,
    ProjectStage,
    ProjectUpdate,
)
from core.services.project_service import ProjectService
from tests.conftest import APPLICANT_ID, CREATOR_ID, OUTSIDER_ID, PROJECT_ID


def _seed_project(db, title, **overrides):
    data = {
        "creator_id": CREATOR_ID,
        "title": title,
        "description": f"{title} 的專案描述內容",
        "current_team_size": 1,
        "target_team_size": 3,
        "required_roles": ["設計師"],
        "required_skills": ["Figma"],
        "project_stage": "prototype",
        "is_recruiting": True,
        "is_public": True,
        **overrides,
    }
    return db.seed("projects", **data)


# =============================================================================
# Browsing
# =============================================================================

class TestListProjects:
    """Tests for ProjectService.list_projects."""

    def test_only_public_recruiting_projects(self, seeded_db):
        _seed_project(seeded_db, "私人專案", is_public=False)
        _seed_project(seeded_db, "已滿專案", is_recruiting=False)

        projects, total = ProjectService.list_projects()

        assert total == 1
        assert [p["id"] for p in projects] == [PROJECT_ID]
        assert projects[0]["creator"]["name"] == "Alice"

    def test_keyword_matches_title_or_description(self, seeded_db):
        _seed_project(seeded_db, "健身追蹤", description="記錄每天的運動 workout 數據")

        by_title, _ = ProjectService.list_projects(ProjectFilters(keyword="旅遊"))
        by_description, _ = ProjectService.list_projects(ProjectFilters(keyword="WORKOUT"))

        assert [p["title"] for p in by_title] == ["AI 旅遊規劃助手"]
        assert [p["title"] for p in by_description] == ["健身追蹤"]

    def test_keyword_with_filter_syntax_is_sanitized(self, seeded_db):
        """Commas and parentheses can't break the or() expression."""
        projects, total = ProjectService.list_projects(ProjectFilters(keyword="旅遊,(x)"))

        assert total == 0
        assert projects == []

    def test_skills_roles_and_stage(self, seeded_db):
        _seed_project(seeded_db, "設計專案")

        by_skill, _ = ProjectService.list_projects(ProjectFilters(skills=["Python", "Go"]))
        by_role, _ = ProjectService.list_projects(ProjectFilters(required_roles=["設計師"]))
        by_stage, _ = ProjectService.list_projects(
            ProjectFilters(project_stage=[ProjectStage.IDEA, ProjectStage.BETA])
        )

        assert [p["id"] for p in by_skill] == [PROJECT_ID]
        assert [p["title"] for p in by_role] == ["設計專案"]
        assert [p["id"] for p in by_stage] == [PROJECT_ID]

    def test_pagination_newest_first(self, seeded_db):
        for i in range(4):
            _seed_project(seeded_db, f"專案 {i}")

        first, total = ProjectService.list_projects(page=1, page_size=2)
        last, _ = ProjectService.list_projects(page=3, page_size=2)

        assert total == 5
        assert [p["title"] for p in first] == ["專案 3", "專案 2"]
        assert [p["id"] for p in last] == [PROJECT_ID]


# =============================================================================
# Single Project
# =============================================================================

class TestProjectDetail:
    """Tests for get / create / update."""

    def test_get_project_with_members(self, seeded_db):
        project = ProjectService.get_project(PROJECT_ID)

        assert project["creator"]["name"] == "Alice"
        assert [m["user_id"] for m in project["members"]] == [CREATOR_ID, OUTSIDER_ID]
        assert project["members"][0]["user"]["name"] == "Alice"

    def test_get_missing_project(self, seeded_db):
        with pytest.raises(ProjectNotFoundError) as exc_info:
            ProjectService.get_project("99999999-9999-9999-9999-999999999999")

        assert exc_info.value.message == "找不到指定的專案"

    def test_private_project_visibility(self, seeded_db):
        """Private projects are visible to the creator and team, 404 for others."""
        seeded_db.tables["projects"][0]["is_public"] = False

        assert ProjectService.get_project(PROJECT_ID, viewer_id=CREATOR_ID)["title"] == "AI 旅遊規劃助手"
        assert len(ProjectService.get_members(PROJECT_ID, viewer_id=OUTSIDER_ID)) == 2

        with pytest.raises(ProjectNotFoundError):
            ProjectService.get_project(PROJECT_ID)
        with pytest.raises(ProjectNotFoundError):
            ProjectService.get_project(PROJECT_ID, viewer_id=APPLICANT_ID)
        with pytest.raises(ProjectNotFoundError):
            ProjectService.get_members(PROJECT_ID, viewer_id=APPLICANT_ID)

    def test_create_project_adds_creator_member(self, seeded_db):
        payload = ProjectCreate(
            title="  新創點子  ",
            description="一個正在找夥伴的新點子",
            target_team_size=3,
            required_roles=["工程師", "工程師", " "],
        )

        project = ProjectService.create_project(APPLICANT_ID, payload)

        assert project["title"] == "新創點子"
        assert project["current_team_size"] == 1
        assert project["creator_id"] == APPLICANT_ID
        assert project["required_roles"] == ["工程師"]
        assert project["project_stage"] == "idea"

        members = [m for m in seeded_db.rows("project_members") if m["project_id"] == project["id"]]
        assert [(m["user_id"], m["role"]) for m in members] == [(APPLICANT_ID, "creator")]

    def test_create_survives_membership_failure(self, seeded_db):
        """The project stays even if the creator row can't be written."""
        seeded_db.fail("project_members", "insert")
        payload = ProjectCreate(
            title="點子",
            description="一個正在找夥伴的新點子",
            target_team_size=2,
            required_roles=["工程師"],
        )

        project = ProjectService.create_project(APPLICANT_ID, payload)

        assert seeded_db.get("projects", project["id"]) is not None

    def test_update_by_creator(self, seeded_db):
        updated = ProjectService.update_project(
            PROJECT_ID, CREATOR_ID, ProjectUpdate(is_recruiting=False, target_team_size=5)
        )

        assert updated["is_recruiting"] is False
        assert updated["target_team_size"] == 5
        assert updated["title"] == "AI 旅遊規劃助手"

    def test_update_by_other_user(self, seeded_db):
        with pytest.raises(ProjectNotFoundError):
            ProjectService.update_project(PROJECT_ID, OUTSIDER_ID, ProjectUpdate(title="搶走"))

        assert seeded_db.get("projects", PROJECT_ID)["title"] == "AI 旅遊規劃助手"

# =============================================================================
# Membership Views
# =============================================================================

class TestParticipation:
    """Tests for created / participating / members lists."""

    def test_list_created(self, seeded_db):
        _seed_project(seeded_db, "第二個")
        _seed_project(seeded_db, "別人的", creator_id=OUTSIDER_ID)

        titles = [p["title"] for p in ProjectService.list_created(CREATOR_ID)]

        assert titles == ["第二個", "AI 旅遊規劃助手"]

    def test_participating_tabs(self, seeded_db):
        other = _seed_project(seeded_db, "Dave 的專案", creator_id=OUTSIDER_ID)
        seeded_db.seed("project_members", project_id=other["id"], user_id=OUTSIDER_ID, role="creator")

        everything = ProjectService.list_participating(OUTSIDER_ID)
        created = ProjectService.list_participating(OUTSIDER_ID, ParticipationTab.CREATED)
        joined = ProjectService.list_participating(OUTSIDER_ID, ParticipationTab.JOINED)

        assert len(everything) == 2
        assert [p["title"] for p in created] == ["Dave 的專案"]
        assert [p["id"] for p in joined] == [PROJECT_ID]
        assert joined[0]["member_role"] == "member"
        assert joined[0]["joined_at"] is not None

    def test_list_members(self, seeded_db):
        members = ProjectService.list_members(PROJECT_ID)

        assert [m["role"] for m in members] == ["creator", "member"]
