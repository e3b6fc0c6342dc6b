from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Callable, TypeVar

OPEN_STATUS = "OPEN"

MANDATORY_WEIGHT = 70
OPTIONAL_WEIGHT = 30

# Recommendation points per matched skill, summed over every role of a project.
PROJECT_MANDATORY_POINTS = 10
PROJECT_OPTIONAL_POINTS = 5

MAX_PROFILE_MATCHES = 20
MAX_RECOMMENDATIONS = 10
TOP_DEMANDED_SKILLS = 10
RECOMMENDED_SKILLS = 5

T = TypeVar("T")


@dataclass
class RoleSpec:
    role_name: str
    mandatory_skills: list[str] = field(default_factory=list)
    optional_skills: list[str] = field(default_factory=list)
    needed: int = 1
    filled: int = 0
    role_id: int | None = None

    @property
    def is_open(self) -> bool:
        return self.filled < self.needed


@dataclass
class ProjectSnapshot:
    id: int
    owner_id: int
    title: str
    description: str | None = None
    status: str = OPEN_STATUS
    roles: list[RoleSpec] = field(default_factory=list)


@dataclass
class CandidateRecord:
    id: int
    name: str
    email: str
    skills: list[str] = field(default_factory=list)


@dataclass
class MatchContext:
    """Who is asking: the acting user, their skills and the projects they applied to."""

    user_id: int
    skills: list[str] = field(default_factory=list)
    applied_project_ids: frozenset[int] = frozenset()


@dataclass
class RoleMatch:
    score: int
    matched_mandatory: list[str]
    matched_optional: list[str]
    missing_skills: list[str]
    has_mandatory: bool

    @property
    def matched_skills(self) -> list[str]:
        return self.matched_mandatory + self.matched_optional

    @property
    def is_match(self) -> bool:
        if self.matched_mandatory:
            return True
        return not self.has_mandatory and bool(self.matched_optional)


@dataclass
class ProfileMatch:
    candidate: CandidateRecord
    matched_role: str
    match_score: int
    matched_skills: list[str]
    missing_skills: list[str]


@dataclass
class ProjectRecommendation:
    project: ProjectSnapshot
    match_score: int


@dataclass
class DemandedSkill:
    skill: str
    demand: int
    user_has: bool


@dataclass
class SkillGap:
    skill: str
    demand: int


@dataclass
class SkillBreakdown:
    skill: str
    project_matches: int


@dataclass
class SkillsAnalytics:
    user_skills: list[str]
    coverage_percentage: int
    top_demanded_skills: list[DemandedSkill]
    recommended_skills: list[SkillGap]
    user_skill_breakdown: list[SkillBreakdown]
    total_open_projects: int
    matching_projects: int


def normalize_skill(skill: str) -> str:
    return skill.lower()


def skill_keys(skills: Iterable[str] | None) -> set[str]:
    return {normalize_skill(skill) for skill in skills or []}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_role(role: RoleSpec, candidate_skills: Iterable[str] | None) -> RoleMatch:
    """Score one candidate against one role.

    Mandatory skills carry 70 points and optional skills 30, each as the
    fraction of that list the candidate covers. Matching is exact after
    lower-casing. Matched and missing skills keep the role's spelling.
    """
    mandatory = list(role.mandatory_skills or [])
    optional = list(role.optional_skills or [])
    owned = skill_keys(candidate_skills)

    matched_mandatory = [skill for skill in mandatory if normalize_skill(skill) in owned]
    matched_optional = [skill for skill in optional if normalize_skill(skill) in owned]
    missing = [skill for skill in mandatory if normalize_skill(skill) not in owned]

    mandatory_score = len(matched_mandatory) / len(mandatory) * MANDATORY_WEIGHT if mandatory else 0.0
    optional_score = len(matched_optional) / len(optional) * OPTIONAL_WEIGHT if optional else 0.0

    return RoleMatch(
        score=_round_half_up(mandatory_score + optional_score),
        matched_mandatory=matched_mandatory,
        matched_optional=matched_optional,
        missing_skills=missing,
        has_mandatory=bool(mandatory),
    )


def best_role_match(roles: Sequence[RoleSpec], candidate: CandidateRecord) -> ProfileMatch | None:
    """Return the highest scoring role the candidate qualifies for.

    On equal scores the earlier role wins.
    """
    if not candidate.skills:
        return None

    best: ProfileMatch | None = None
    for role in roles:
        result = score_role(role, candidate.skills)
        if not result.is_match:
            continue
        if best is None or result.score > best.match_score:
            best = ProfileMatch(
                candidate=candidate,
                matched_role=role.role_name,
                match_score=result.score,
                matched_skills=result.matched_skills,
                missing_skills=result.missing_skills,
            )
    return best


def rank(items: Iterable[T], score: Callable[[T], int], limit: int) -> list[T]:
    """Sort by score, highest first, and keep the first ``limit`` items.

    Equal scores keep their input order.
    """
    return sorted(items, key=score, reverse=True)[: max(0, limit)]


def match_candidates(
    context: MatchContext,
    roles: Sequence[RoleSpec] | None,
    candidates: Iterable[CandidateRecord],
    limit: int = MAX_PROFILE_MATCHES,
) -> tuple[list[ProfileMatch], int]:
    """Match candidates to roles, keeping each candidate's best role.

    Returns the ranked, capped list and the number of matches before capping.
    The acting user is never matched against their own roles.
    """
    if not roles:
        return [], 0

    matches: list[ProfileMatch] = []
    for candidate in candidates:
        if candidate.id == context.user_id:
            continue
        match = best_role_match(roles, candidate)
        if match is not None:
            matches.append(match)

    return rank(matches, lambda item: item.match_score, limit), len(matches)


def score_project(project: ProjectSnapshot, user_skills: Iterable[str] | None) -> int:
    owned = skill_keys(user_skills)
    total = 0
    for role in project.roles:
        total += PROJECT_MANDATORY_POINTS * sum(
            1 for skill in role.mandatory_skills or [] if normalize_skill(skill) in owned
        )
        total += PROJECT_OPTIONAL_POINTS * sum(
            1 for skill in role.optional_skills or [] if normalize_skill(skill) in owned
        )
    return total


def recommend_projects(
    context: MatchContext,
    projects: Iterable[ProjectSnapshot],
    limit: int = MAX_RECOMMENDATIONS,
) -> list[ProjectRecommendation]:
    """Rank OPEN projects for the acting user.

    Users without skills get the first ``limit`` OPEN projects they do not
    own, unscored, in input order.
    """
    available = [
        project for project in projects
        if project.status == OPEN_STATUS and project.owner_id != context.user_id
    ]

    if not context.skills:
        return [ProjectRecommendation(project=project, match_score=0) for project in available[: max(0, limit)]]

    scored = [
        ProjectRecommendation(project=project, match_score=score_project(project, context.skills))
        for project in available
        if project.id not in context.applied_project_ids
    ]
    return rank(scored, lambda item: item.match_score, limit)


def aggregate_demand(projects: Iterable[ProjectSnapshot]) -> Counter[str]:
    """Count skill occurrences across the roles of OPEN projects.

    Every occurrence counts, including a skill repeated inside one role.
    Keys are normalized and kept in first-seen order.
    """
    demand: Counter[str] = Counter()
    for project in projects:
        if project.status != OPEN_STATUS:
            continue
        for role in project.roles:
            for skill in [*(role.mandatory_skills or []), *(role.optional_skills or [])]:
                demand[normalize_skill(skill)] += 1
    return demand


def coverage_percentage(demand: Counter[str], user_skills: Iterable[str] | None) -> int:
    if not demand:
        return 0
    owned = skill_keys(user_skills)
    covered = sum(1 for skill in demand if skill in owned)
    return _round_half_up(covered / len(demand) * 100)


def analyze_skills(
    user_skills: Sequence[str] | None,
    projects: Sequence[ProjectSnapshot],
    top_demanded: int = TOP_DEMANDED_SKILLS,
    recommended: int = RECOMMENDED_SKILLS,
) -> SkillsAnalytics:
    skills = list(user_skills or [])
    owned = skill_keys(skills)
    demand = aggregate_demand(projects)

    by_demand = rank(demand.items(), lambda item: item[1], len(demand))

    return SkillsAnalytics(
        user_skills=skills,
        coverage_percentage=coverage_percentage(demand, skills),
        top_demanded_skills=[
            DemandedSkill(skill=skill, demand=count, user_has=skill in owned)
            for skill, count in by_demand[: max(0, top_demanded)]
        ],
        recommended_skills=[
            SkillGap(skill=skill, demand=count)
            for skill, count in by_demand
            if skill not in owned
        ][: max(0, recommended)],
        user_skill_breakdown=[
            SkillBreakdown(skill=skill, project_matches=demand.get(normalize_skill(skill), 0))
            for skill in skills
        ],
        total_open_projects=sum(1 for project in projects if project.status == OPEN_STATUS),
        matching_projects=sum(count for skill, count in demand.items() if skill in owned),
    )
