# =============================================================================
# core/models/project.py - Project Schemas
# =============================================================================
# These models define the API contract for project listings:
# - ProjectCreate / ProjectUpdate: input from the project form
# - ProjectResponse: a row of the projects table
# - ProjectFilters / ProjectList: browsing with filters and pagination
# - MemberRole / ParticipationTab: team membership views
#
# A project is owned by exactly one creator; only the creator edits it.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from lib.utils import clean_tags

MAX_ROLES = 10
MAX_SKILLS = 20


class ProjectStage(str, Enum):
    """
    How far along a project is.

    Flow: idea -> prototype -> beta -> launched
    """
    IDEA = "idea"
    PROTOTYPE = "prototype"
    BETA = "beta"
    LAUNCHED = "launched"


class MemberRole(str, Enum):
    """Role stored on a project_members row."""
    CREATOR = "creator"
    MEMBER = "member"


class ParticipationTab(str, Enum):
    """Filter for the "my projects" view."""
    ALL = "all"
    CREATED = "created"
    JOINED = "joined"


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _validate_roles(value: list[str]) -> list[str]:
    roles = clean_tags(value)
    if not roles:
        raise ValueError("請至少添加一個所需職位")
    if len(roles) > MAX_ROLES:
        raise ValueError(f"所需職位最多 {MAX_ROLES} 個")
    return roles


def _validate_skills(value: list[str]) -> list[str]:
    skills = clean_tags(value)
    if len(skills) > MAX_SKILLS:
        raise ValueError(f"所需技能最多 {MAX_SKILLS} 個")
    return skills


class ProjectCreate(BaseModel):
    """
    Schema for creating a project.

    Example:
        {
            "title": "AI 旅遊規劃助手",
            "description": "用對話幫旅客排出完整行程的 App",
            "target_team_size": 4,
            "required_roles": ["後端工程師", "設計師"],
            "required_skills": ["Python", "Figma"],
            "project_stage": "idea",
            "is_public": true
        }
    """

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=10, max_length=2000)
    target_team_size: int = Field(..., ge=2, le=20)
    required_roles: list[str] = Field(..., description="Roles the team is looking for")
    required_skills: list[str] = Field(default_factory=list)
    project_stage: ProjectStage = ProjectStage.IDEA
    is_public: bool = True

    # Strip before the length constraints run, so "   " counts as empty
    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("required_roles")
    @classmethod
    def normalize_roles(cls, value: list[str]) -> list[str]:
        return _validate_roles(value)

    @field_validator("required_skills")
    @classmethod
    def normalize_skills(cls, value: list[str]) -> list[str]:
        return _validate_skills(value)


class ProjectUpdate(BaseModel):
    """
    Schema for editing a project. Only fields present are written.

    is_recruiting lets the creator close or reopen recruiting.
    """

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=10, max_length=2000)
    target_team_size: int | None = Field(default=None, ge=2, le=20)
    required_roles: list[str] | None = None
    required_skills: list[str] | None = None
    project_stage: ProjectStage | None = None
    is_public: bool | None = None
    is_recruiting: bool | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("required_roles")
    @classmethod
    def normalize_roles(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _validate_roles(value)

    @field_validator("required_skills")
    @classmethod
    def normalize_skills(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _validate_skills(value)


class ProjectResponse(BaseModel):
    """A row of the projects table, optionally with its creator expanded."""

    id: UUID
    creator_id: UUID
    title: str
    description: str
    current_team_size: int = Field(default=1, ge=0)
    target_team_size: int
    required_roles: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    project_stage: ProjectStage
    is_recruiting: bool = True
    is_public: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    creator: dict[str, Any] | None = None

    class Config:
        from_attributes = True


class ProjectFilters(BaseModel):
    """Project browsing filters. Empty filters match every public recruiting project."""
    keyword: str | None = None
    skills: list[str] = Field(default_factory=list)
    required_roles: list[str] = Field(default_factory=list)
    project_stage: list[ProjectStage] = Field(default_factory=list)


class ProjectList(BaseModel):
    """One page of project listings."""
    projects: list[ProjectResponse] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=12, ge=1, le=100)
    has_next: bool = False
    has_prev: bool = False
