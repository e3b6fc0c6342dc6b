from __future__ import annotations

from loguru import logger
from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session

from unirivo.models.user import User
from unirivo.services.profiles import resolve_skills, set_user_skills


def _column_exists(conn: Connection, table_name: str, column_name: str) -> bool:
    return any(column["name"] == column_name for column in inspect(conn).get_columns(table_name))


def _add_column_if_missing(conn: Connection, table_name: str, column_name: str, column_sql: str) -> None:
    if _column_exists(conn, table_name, column_name):
        return
    conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_sql}"))
    logger.info("Added column {}.{}", table_name, column_name)


def _sync_skill_columns(conn: Connection) -> int:
    """Copy the populated skill column onto the other one; returns users touched."""
    session = Session(bind=conn)
    try:
        touched = 0
        for user in session.query(User).all():
            skills = resolve_skills(user.skills, user.tech_stack)
            if user.skills == skills and user.tech_stack == skills:
                continue
            set_user_skills(user, skills)
            touched += 1
        session.flush()
        return touched
    finally:
        session.close()


def run_runtime_migrations(engine: Engine) -> None:
    with engine.begin() as conn:
        _add_column_if_missing(conn, "users", "skills", "skills JSON")
        _add_column_if_missing(conn, "users", "tech_stack", "tech_stack JSON")
        _add_column_if_missing(conn, "users", "full_name", "full_name VARCHAR(255)")
        _add_column_if_missing(conn, "applications", "message", "message TEXT")

        synced = _sync_skill_columns(conn)
        if synced:
            logger.info("Synced skills and tech_stack for {} users", synced)

        closed = conn.execute(
            text(
                """
                UPDATE projects SET status = 'COMPLETED'
                WHERE status = 'OPEN'
                AND EXISTS (SELECT 1 FROM project_roles r WHERE r.project_id = projects.id)
                AND NOT EXISTS (
                    SELECT 1 FROM project_roles r WHERE r.project_id = projects.id AND r.filled < r.needed
                )
                """
            )
        )
        reopened = conn.execute(
            text(
                """
                UPDATE projects SET status = 'OPEN'
                WHERE status = 'COMPLETED'
                AND EXISTS (
                    SELECT 1 FROM project_roles r WHERE r.project_id = projects.id AND r.filled < r.needed
                )
                """
            )
        )
        if closed.rowcount or reopened.rowcount:
            logger.info(
                "Reconciled project status: {} closed, {} reopened",
                closed.rowcount,
                reopened.rowcount,
            )
