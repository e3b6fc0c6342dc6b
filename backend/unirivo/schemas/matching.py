from __future__ import annotations

from pydantic import Field

from unirivo.schemas.base import CamelModel
from unirivo.schemas.project import RoleOut


class MatchRole(CamelModel):
    role_name: str = ""
    mandatory_skills: list[str] | None = None
    optional_skills: list[str] | None = None
    needed: int = 1


class MatchProfilesRequest(CamelModel):
    roles: list[MatchRole] | None = None


class MatchedProfileOut(CamelModel):
    id: str
    name: str
    email: str
    skills: list[str]
    matched_role: str
    match_score: int = Field(ge=0, le=100)
    matched_skills: list[str]
    missing_skills: list[str]


class MatchProfilesResponse(CamelModel):
    profiles: list[MatchedProfileOut]
    total_matches: int


class RecommendationOut(CamelModel):
    id: str
    title: str
    description: str | None = None
    owner_id: str
    roles: list[RoleOut]
    match_score: int


class RecommendationsResponse(CamelModel):
    recommendations: list[RecommendationOut]


class DemandedSkillOut(CamelModel):
    skill: str
    demand: int
    user_has: bool


class SkillGapOut(CamelModel):
    skill: str
    demand: int


class SkillBreakdownOut(CamelModel):
    skill: str
    project_matches: int


class SkillsAnalyticsOut(CamelModel):
    user_skills: list[str]
    coverage_percentage: int
    top_demanded_skills: list[DemandedSkillOut]
    recommended_skills: list[SkillGapOut]
    user_skill_breakdown: list[SkillBreakdownOut]
    total_open_projects: int
    matching_projects: int


class DashboardStatsOut(CamelModel):
    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    pending_applications: int = 0
    owned_projects_count: int = 0
    participating_projects_count: int = 0
