from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session, selectinload

from unirivo.models.application import Application
from unirivo.models.project import Project, Role
from unirivo.models.user import User
from unirivo.services.skill_matching import CandidateRecord, MatchContext, ProjectSnapshot, RoleSpec


def resolve_skills(skills: list[str] | None, tech_stack: list[str] | None) -> list[str]:
    """Pick the canonical skill list; ``skills`` wins whenever it is populated."""
    if skills:
        return list(skills)
    if tech_stack:
        return list(tech_stack)
    return []


def user_skills(user: User | None) -> list[str]:
    if user is None:
        return []
    return resolve_skills(user.skills, user.tech_stack)


def display_name(user: User) -> str:
    return user.name or user.full_name or "Unknown"


def set_user_skills(user: User, skills: Iterable[str]) -> None:
    cleaned = [skill for skill in skills if isinstance(skill, str) and skill]
    user.skills = list(cleaned)
    user.tech_stack = list(cleaned)


def candidate_from_user(user: User) -> CandidateRecord:
    return CandidateRecord(
        id=user.id,
        name=display_name(user),
        email=user.email,
        skills=user_skills(user),
    )


def role_spec_from_role(role: Role) -> RoleSpec:
    return RoleSpec(
        role_id=role.id,
        role_name=role.role_name,
        mandatory_skills=list(role.mandatory_skills or []),
        optional_skills=list(role.optional_skills or []),
        needed=role.needed,
        filled=role.filled,
    )


def snapshot_project(project: Project) -> ProjectSnapshot:
    return ProjectSnapshot(
        id=project.id,
        owner_id=project.owner_id,
        title=project.title,
        description=project.description,
        status=project.status,
        roles=[role_spec_from_role(role) for role in project.roles],
    )


def build_match_context(db: Session, user: User) -> MatchContext:
    applied = db.query(Application.project_id).filter(Application.user_id == user.id).all()
    return MatchContext(
        user_id=user.id,
        skills=user_skills(user),
        applied_project_ids=frozenset(row.project_id for row in applied),
    )


def load_project_snapshots(db: Session, status: str | None = None) -> list[ProjectSnapshot]:
    """Materialize projects in creation order, the order ties are ranked in."""
    query = db.query(Project).options(selectinload(Project.roles))
    if status is not None:
        query = query.filter(Project.status == status)
    return [snapshot_project(project) for project in query.order_by(Project.id.asc()).all()]
