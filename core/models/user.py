# =============================================================================
# core/models/user.py - User / Talent Schemas
# =============================================================================
# These models define the API contract for profiles and the talent directory:
# - UserProfile: a row of the users table
# - ProfileUpdate: editable profile fields
# - TalentFilters / TalentList: directory search and its paginated result
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from lib.utils import clean_tags

MAX_SKILLS = 20


class WorkMode(str, Enum):
    """How much time a user can put into a project."""
    FULLTIME = "fulltime"
    PARTTIME = "parttime"


class LocationPreference(str, Enum):
    """Where a user wants to work."""
    REMOTE = "remote"
    SPECIFIC_LOCATION = "specific_location"


class UserProfile(BaseModel):
    """
    A user's profile as stored in the users table.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "email": "ming@example.com",
            "name": "王小明",
            "skills": ["React", "Python"],
            "work_mode": "parttime",
            "location_preference": "remote",
            "is_public": true
        }
    """

    id: UUID
    email: str | None = None
    name: str = ""
    contact_info: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience_description: str = ""
    work_mode: WorkMode = WorkMode.FULLTIME
    partner_description: str = ""
    location_preference: LocationPreference = LocationPreference.REMOTE
    specific_location: str | None = None
    is_public: bool = False
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """
    Editable profile fields.

    Only fields present in the request body are written.
    Blank optional strings (contact_info, specific_location) are stored as null.
    """

    name: str | None = Field(default=None, max_length=50)
    contact_info: str | None = Field(default=None, max_length=200)
    skills: list[str] | None = None
    experience_description: str | None = Field(default=None, max_length=2000)
    work_mode: WorkMode | None = None
    partner_description: str | None = Field(default=None, max_length=2000)
    location_preference: LocationPreference | None = None
    specific_location: str | None = Field(default=None, max_length=100)
    is_public: bool | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("姓名不能為空")
        return value.strip() if value is not None else None

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        skills = clean_tags(value)
        if len(skills) > MAX_SKILLS:
            raise ValueError(f"技能最多 {MAX_SKILLS} 項")
        return skills

    @field_validator("contact_info", "specific_location")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TalentFilters(BaseModel):
    """Talent directory search filters. Empty filters match everyone public."""
    keyword: str | None = None
    skills: list[str] = Field(default_factory=list)
    work_mode: list[WorkMode] = Field(default_factory=list)
    location_preference: list[LocationPreference] = Field(default_factory=list)


class TalentList(BaseModel):
    """One page of the talent directory."""
    users: list[UserProfile] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=12, ge=1, le=100)
    has_next: bool = False
    has_prev: bool = False
