from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from unirivo.auth import ensure_owner, get_current_user
from unirivo.config import settings
from unirivo.database import get_db
from unirivo.models.application import STATUS_ACCEPTED, STATUS_REMOVED, STATUS_SHORTLISTED, Application
from unirivo.models.project import PROJECT_OPEN, Project, Role
from unirivo.models.user import User
from unirivo.schemas.application import ApplicationOut, MemberAddRequest, ShortlistRequest
from unirivo.schemas.matching import MatchedProfileOut, MatchProfilesRequest, MatchProfilesResponse
from unirivo.schemas.project import ProjectCreate, ProjectOut, ProjectUpdate, RoleIn
from unirivo.services.notifications import notify_member_added, notify_member_removed, notify_shortlisted
from unirivo.services.profiles import candidate_from_user, display_name
from unirivo.services.roster import RoleFullError, accept_into_role, refresh_status, release_from_role
from unirivo.services.skill_matching import MatchContext, RoleSpec, match_candidates


router = APIRouter()


def _get_project_or_404(db: Session, project_id: int) -> Project:
    project = (
        db.query(Project)
        .options(selectinload(Project.roles))
        .filter(Project.id == project_id)
        .first()
    )
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def _new_role(position: int, payload: RoleIn) -> Role:
    return Role(
        position=position,
        role_name=payload.role_name.strip(),
        mandatory_skills=list(payload.mandatory_skills),
        optional_skills=list(payload.optional_skills),
        needed=payload.needed,
        filled=0,
    )


def _replace_roles(db: Session, project: Project, roles: list[RoleIn]) -> None:
    existing = {role.id: role for role in project.roles}
    kept_ids = {payload.id for payload in roles if payload.id is not None}
    dropped = [role for role_id, role in existing.items() if role_id not in kept_ids]

    for role in dropped:
        if role.filled > 0:
            raise HTTPException(status_code=400, detail=f"Role '{role.role_name}' still has members")

    updated: list[Role] = []
    for position, payload in enumerate(roles):
        role = existing.get(payload.id) if payload.id is not None else None
        if role is None:
            updated.append(_new_role(position, payload))
            continue
        if payload.needed < role.filled:
            raise HTTPException(
                status_code=400,
                detail=f"Role '{role.role_name}' already has {role.filled} members",
            )
        role.position = position
        role.role_name = payload.role_name.strip()
        role.mandatory_skills = list(payload.mandatory_skills)
        role.optional_skills = list(payload.optional_skills)
        role.needed = payload.needed
        updated.append(role)

    if dropped:
        # Open applications would otherwise point at a role that no longer exists.
        removed = (
            db.query(Application)
            .filter(Application.role_id.in_([role.id for role in dropped]))
            .delete(synchronize_session=False)
        )
        logger.info("Dropped {} roles from project {}, discarding {} applications", len(dropped), project.id, removed)
    project.roles = updated


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Project:
    project = Project(
        owner_id=current_user.id,
        title=payload.title.strip(),
        description=payload.description,
        status=PROJECT_OPEN,
        roles=[_new_role(position, role) for position, role in enumerate(payload.roles)],
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("User {} created project {} with {} roles", current_user.id, project.id, len(project.roles))
    return project


@router.get("/all-open", response_model=list[ProjectOut])
def list_open_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Project]:
    projects = (
        db.query(Project)
        .options(selectinload(Project.roles))
        .filter(Project.status == PROJECT_OPEN)
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )
    return [project for project in projects if any(role.filled < role.needed for role in project.roles)]


@router.get("/mine", response_model=list[ProjectOut])
def list_my_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Project]:
    accepted = select(Application.project_id).where(
        Application.user_id == current_user.id,
        Application.status == STATUS_ACCEPTED,
    )
    return (
        db.query(Project)
        .options(selectinload(Project.roles))
        .filter(or_(Project.owner_id == current_user.id, Project.id.in_(accepted)))
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )


@router.post("/match-profiles", response_model=MatchProfilesResponse)
def match_profiles(
    payload: MatchProfilesRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MatchProfilesResponse:
    if not payload.roles:
        raise HTTPException(status_code=400, detail="Roles are required")

    roles = [
        RoleSpec(
            role_name=role.role_name,
            mandatory_skills=list(role.mandatory_skills or []),
            optional_skills=list(role.optional_skills or []),
            needed=role.needed,
        )
        for role in payload.roles
    ]
    users = (
        db.query(User)
        .filter(User.id != current_user.id, User.is_active == True)  # noqa: E712
        .order_by(User.id.asc())
        .all()
    )
    matches, total = match_candidates(
        MatchContext(user_id=current_user.id),
        roles,
        [candidate_from_user(user) for user in users],
        limit=settings.max_profile_matches,
    )
    logger.info("Matched {} profiles for user {} across {} roles", total, current_user.id, len(roles))

    return MatchProfilesResponse(
        profiles=[
            MatchedProfileOut(
                id=str(match.candidate.id),
                name=match.candidate.name,
                email=match.candidate.email,
                skills=match.candidate.skills,
                matched_role=match.matched_role,
                match_score=match.match_score,
                matched_skills=match.matched_skills,
                missing_skills=match.missing_skills,
            )
            for match in matches
        ],
        total_matches=total,
    )


@router.post("/shortlist", response_model=ApplicationOut, status_code=status.HTTP_201_CREATED)
def shortlist_candidate(
    payload: ShortlistRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Application:
    project = _get_project_or_404(db, payload.project_id)
    if project.owner_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only project owner can shortlist")

    role = next((role for role in project.roles if role.id == payload.role_id), None)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")

    candidate = db.query(User).filter(User.id == payload.user_id).first()
    if not candidate:
        raise HTTPException(status_code=404, detail="User not found")

    existing = (
        db.query(Application)
        .filter(
            Application.project_id == project.id,
            Application.role_id == role.id,
            Application.user_id == candidate.id,
        )
        .first()
    )
    if existing:
        raise HTTPException(status_code=400, detail="User already has an application for this role")

    application = Application(
        project_id=project.id,
        role_id=role.id,
        user_id=candidate.id,
        user_name=display_name(candidate),
        user_email=candidate.email,
        status=STATUS_SHORTLISTED,
        message="Shortlisted by project owner based on skill match",
    )
    db.add(application)
    db.flush()
    notify_shortlisted(db, project, role, application)
    db.commit()
    db.refresh(application)
    logger.info("User {} shortlisted for role {} of project {}", candidate.id, role.id, project.id)
    return application


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Project:
    return _get_project_or_404(db, project_id)


@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Project:
    project = _get_project_or_404(db, project_id)
    ensure_owner(project, current_user)

    if payload.title is not None:
        project.title = payload.title.strip()
    if payload.description is not None:
        project.description = payload.description
    if payload.roles is not None:
        _replace_roles(db, project, payload.roles)
        refresh_status(project)

    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str | int]:
    project = _get_project_or_404(db, project_id)
    ensure_owner(project, current_user)

    db.query(Application).filter(Application.project_id == project.id).delete(synchronize_session=False)
    db.delete(project)
    db.commit()
    logger.info("User {} deleted project {}", current_user.id, project_id)
    return {"status": "deleted", "project_id": project_id}


@router.get("/{project_id}/members", response_model=list[ApplicationOut])
def list_members(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Application]:
    project = _get_project_or_404(db, project_id)
    return (
        db.query(Application)
        .filter(Application.project_id == project.id, Application.status == STATUS_ACCEPTED)
        .order_by(Application.id.asc())
        .all()
    )


@router.post("/{project_id}/members", response_model=ApplicationOut, status_code=status.HTTP_201_CREATED)
def add_member(
    project_id: int,
    payload: MemberAddRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Application:
    """Seat a registered user directly, without waiting for them to apply."""
    project = _get_project_or_404(db, project_id)
    ensure_owner(project, current_user)

    role = next((role for role in project.roles if role.id == payload.role_id), None)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")

    member = db.query(User).filter(User.email == payload.email.strip().lower()).first()
    if not member:
        raise HTTPException(status_code=404, detail="User not found")
    if member.id == project.owner_id:
        raise HTTPException(status_code=400, detail="Project owner cannot be added as a member")

    applications = (
        db.query(Application)
        .filter(Application.project_id == project.id, Application.user_id == member.id)
        .all()
    )
    if any(application.status == STATUS_ACCEPTED for application in applications):
        raise HTTPException(status_code=400, detail="This user is already a member of this project")

    try:
        accept_into_role(project, role)
    except RoleFullError:
        raise HTTPException(status_code=400, detail="This role is already full")

    application = next((item for item in applications if item.role_id == role.id), None)
    if application is None:
        application = Application(
            project_id=project.id,
            role_id=role.id,
            user_id=member.id,
            user_name=display_name(member),
            user_email=member.email,
            message="Manually added by project owner",
        )
    application.status = STATUS_ACCEPTED
    db.add(application)
    db.add(project)
    db.flush()
    notify_member_added(db, project, role, member.id)
    db.commit()
    db.refresh(application)
    logger.info("User {} added to role {} of project {} by owner", member.id, role.id, project.id)
    return application


@router.delete("/{project_id}/members/{user_id}")
def remove_member(
    project_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str | int]:
    """Owners remove anyone; members may remove themselves."""
    project = _get_project_or_404(db, project_id)
    if project.owner_id != current_user.id and user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    if user_id == project.owner_id:
        raise HTTPException(status_code=400, detail="Cannot remove project owner")

    memberships = (
        db.query(Application)
        .filter(
            Application.project_id == project.id,
            Application.user_id == user_id,
            Application.status == STATUS_ACCEPTED,
        )
        .all()
    )
    if not memberships:
        raise HTTPException(status_code=404, detail="Member not found")

    roles = {role.id: role for role in project.roles}
    for application in memberships:
        role = roles.get(application.role_id)
        if role is not None:
            release_from_role(project, role)
        application.status = STATUS_REMOVED
        db.add(application)

    if current_user.id == project.owner_id:
        notify_member_removed(db, project, user_id)
    db.add(project)
    db.commit()
    logger.info("User {} removed from project {} (project is {})", user_id, project.id, project.status)
    return {"status": "removed", "project_id": project.id, "user_id": user_id}
