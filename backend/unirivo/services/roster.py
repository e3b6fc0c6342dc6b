from __future__ import annotations

from loguru import logger

from unirivo.models.project import PROJECT_COMPLETED, PROJECT_OPEN, Project, Role


class RoleFullError(Exception):
    """Raised when accepting into a role whose seats are all taken."""


def all_roles_filled(project: Project) -> bool:
    return bool(project.roles) and all(role.filled >= role.needed for role in project.roles)


def refresh_status(project: Project) -> str:
    """Bring ``project.status`` in line with its role headcounts."""
    if all_roles_filled(project):
        if project.status != PROJECT_COMPLETED:
            project.status = PROJECT_COMPLETED
            logger.info("Project {} auto-closed: all roles filled", project.id)
    elif project.status == PROJECT_COMPLETED:
        project.status = PROJECT_OPEN
        logger.info("Project {} reopened: a role has open seats", project.id)
    return project.status


def accept_into_role(project: Project, role: Role) -> None:
    if role.filled >= role.needed:
        raise RoleFullError(f"All seats for role {role.role_name!r} are already filled")
    role.filled += 1
    refresh_status(project)


def release_from_role(project: Project, role: Role) -> bool:
    """Free one seat; returns False when the role had nobody to release."""
    if role.filled <= 0:
        return False
    role.filled -= 1
    refresh_status(project)
    return True
