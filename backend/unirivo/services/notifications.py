from __future__ import annotations

from loguru import logger
from sqlalchemy.orm import Session

from unirivo.models.application import (
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_REMOVED,
    STATUS_SHORTLISTED,
    Application,
)
from unirivo.models.notification import (
    APPLICATION_ACCEPTED,
    APPLICATION_REJECTED,
    APPLICATION_SHORTLISTED,
    MEMBER_ADDED,
    MEMBER_REMOVED,
    NEW_APPLICATION,
    Notification,
)
from unirivo.models.project import Project, Role


def notify(
    db: Session,
    user_id: int,
    kind: str,
    title: str,
    message: str,
    link: str | None = None,
    project_id: int | None = None,
    application_id: int | None = None,
) -> Notification:
    """Stage a notification on the caller's session; the caller commits."""
    notification = Notification(
        user_id=user_id,
        type=kind,
        title=title,
        message=message,
        link=link,
        project_id=project_id,
        application_id=application_id,
        read=False,
    )
    db.add(notification)
    logger.info("Queued {} notification for user {}", kind, user_id)
    return notification


def notify_new_application(db: Session, project: Project, role: Role, application: Application) -> Notification:
    return notify(
        db,
        project.owner_id,
        NEW_APPLICATION,
        "New Application Received",
        f'{application.user_name} applied for {role.role_name} in "{project.title}"',
        link=f"/dashboard/projects/manage/{project.id}",
        project_id=project.id,
        application_id=application.id,
    )


def notify_status_change(
    db: Session,
    project: Project,
    role: Role,
    application: Application,
    previous: str,
) -> Notification | None:
    """Tell the applicant about an owner decision. Moves back to PENDING stay silent."""
    status = application.status
    if status == previous:
        return None

    if status == STATUS_ACCEPTED:
        kind = APPLICATION_ACCEPTED
        title = "Application Accepted!"
        message = f'Your application for {role.role_name} in "{project.title}" has been accepted!'
        link = f"/dashboard/projects/manage/{project.id}"
    elif status == STATUS_REJECTED:
        kind = APPLICATION_REJECTED
        title = "Application Update"
        message = f'Your application for {role.role_name} in "{project.title}" was not accepted this time.'
        link = f"/dashboard/projects/{project.id}"
    elif status == STATUS_SHORTLISTED:
        return notify_shortlisted(db, project, role, application)
    elif status == STATUS_REMOVED and previous == STATUS_ACCEPTED:
        return notify_member_removed(db, project, application.user_id)
    else:
        return None

    return notify(
        db,
        application.user_id,
        kind,
        title,
        message,
        link=link,
        project_id=project.id,
        application_id=application.id,
    )


def notify_shortlisted(db: Session, project: Project, role: Role, application: Application) -> Notification:
    return notify(
        db,
        application.user_id,
        APPLICATION_SHORTLISTED,
        "You've Been Shortlisted!",
        f'You\'ve been shortlisted for {role.role_name} in "{project.title}". '
        "The owner will review your application soon.",
        link="/dashboard/notifications",
        project_id=project.id,
        application_id=application.id,
    )


def notify_member_added(db: Session, project: Project, role: Role, user_id: int) -> Notification:
    return notify(
        db,
        user_id,
        MEMBER_ADDED,
        "Added to Project Team!",
        f'You\'ve been added as {role.role_name} to "{project.title}"',
        link=f"/dashboard/projects/manage/{project.id}",
        project_id=project.id,
    )


def notify_member_removed(db: Session, project: Project, user_id: int) -> Notification:
    return notify(
        db,
        user_id,
        MEMBER_REMOVED,
        "Removed from Project",
        f'You\'ve been removed from "{project.title}"',
        link="/dashboard/projects",
        project_id=project.id,
    )
