from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session, selectinload

from unirivo.auth import ensure_owner, get_current_user
from unirivo.database import get_db
from unirivo.models.application import STATUS_ACCEPTED, STATUS_PENDING, Application
from unirivo.models.project import Project
from unirivo.models.user import User
from unirivo.schemas.application import ApplicationCreate, ApplicationOut, ApplicationStatusUpdate
from unirivo.services.notifications import notify_new_application, notify_status_change
from unirivo.services.profiles import display_name
from unirivo.services.roster import RoleFullError, accept_into_role, release_from_role


router = APIRouter()


def _load_project(db: Session, project_id: int) -> Project | None:
    return (
        db.query(Project)
        .options(selectinload(Project.roles))
        .filter(Project.id == project_id)
        .first()
    )


@router.post("", response_model=ApplicationOut, status_code=status.HTTP_201_CREATED)
def apply_to_role(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Application:
    project = _load_project(db, payload.project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if project.owner_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot apply to your own project")
    role = next((role for role in project.roles if role.id == payload.role_id), None)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")

    existing = (
        db.query(Application)
        .filter(
            Application.project_id == project.id,
            Application.role_id == payload.role_id,
            Application.user_id == current_user.id,
        )
        .first()
    )
    if existing:
        raise HTTPException(status_code=400, detail="You have already applied for this role")

    application = Application(
        project_id=project.id,
        role_id=payload.role_id,
        user_id=current_user.id,
        user_name=display_name(current_user),
        user_email=current_user.email,
        status=STATUS_PENDING,
        message=payload.message,
    )
    db.add(application)
    db.flush()
    notify_new_application(db, project, role, application)
    db.commit()
    db.refresh(application)
    logger.info("User {} applied to role {} of project {}", current_user.id, payload.role_id, project.id)
    return application


@router.get("/mine", response_model=list[ApplicationOut])
def list_my_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Application]:
    return (
        db.query(Application)
        .filter(Application.user_id == current_user.id)
        .order_by(Application.id.desc())
        .all()
    )


@router.get("/project/{project_id}", response_model=list[ApplicationOut])
def list_project_applications(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Application]:
    project = _load_project(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    ensure_owner(project, current_user)
    return (
        db.query(Application)
        .filter(Application.project_id == project.id)
        .order_by(Application.id.asc())
        .all()
    )


@router.patch("/{application_id}", response_model=ApplicationOut)
def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    project = _load_project(db, application.project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    ensure_owner(project, current_user)

    role = next((role for role in project.roles if role.id == application.role_id), None)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")

    previous = application.status
    # An ACCEPTED application holds exactly one seat, so any move out of it frees that seat.
    if payload.status == STATUS_ACCEPTED and previous != STATUS_ACCEPTED:
        try:
            accept_into_role(project, role)
        except RoleFullError:
            raise HTTPException(status_code=400, detail="All seats for this role are already filled")
    elif previous == STATUS_ACCEPTED and payload.status != STATUS_ACCEPTED:
        release_from_role(project, role)

    application.status = payload.status
    notify_status_change(db, project, role, application, previous)
    db.add(application)
    db.add(project)
    db.commit()
    db.refresh(application)
    logger.info(
        "Application {} moved {} -> {} (project {} is {})",
        application.id,
        previous,
        application.status,
        project.id,
        project.status,
    )
    return application
