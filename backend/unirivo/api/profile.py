from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from unirivo.auth import get_current_user
from unirivo.database import get_db
from unirivo.models.application import STATUS_ACCEPTED, Application
from unirivo.models.project import PROJECT_COMPLETED, Project
from unirivo.models.user import User
from unirivo.schemas.profile import ProfileOut, ProfileStats, ProfileUpdate
from unirivo.services.profiles import display_name, resolve_skills, set_user_skills, user_skills


router = APIRouter()


def _profile_out(db: Session, user: User) -> ProfileOut:
    owned = db.query(Project).filter(Project.owner_id == user.id).count()
    completed = (
        db.query(Project)
        .filter(Project.owner_id == user.id, Project.status == PROJECT_COMPLETED)
        .count()
    )
    joined = (
        db.query(Application)
        .filter(Application.user_id == user.id, Application.status == STATUS_ACCEPTED)
        .count()
    )
    skills = user_skills(user)
    return ProfileOut(
        id=user.id,
        email=user.email,
        name=display_name(user),
        bio=user.bio,
        location=user.location,
        skills=skills,
        tech_stack=skills,
        stats=ProfileStats(projects_owned=owned, projects_joined=joined, projects_completed=completed),
    )


@router.get("", response_model=ProfileOut)
def get_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProfileOut:
    return _profile_out(db, current_user)


@router.patch("", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProfileOut:
    if payload.name is not None:
        current_user.name = payload.name
        current_user.full_name = payload.name
    if payload.bio is not None:
        current_user.bio = payload.bio
    if payload.location is not None:
        current_user.location = payload.location
    if payload.skills is not None or payload.tech_stack is not None:
        set_user_skills(current_user, resolve_skills(payload.skills, payload.tech_stack))

    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return _profile_out(db, current_user)
