from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from unirivo.database import Base

PROJECT_OPEN = "OPEN"
PROJECT_COMPLETED = "COMPLETED"


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (Index("idx_project_status", "status"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(20), default=PROJECT_OPEN, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    roles = relationship(
        "Role",
        back_populates="project",
        order_by="Role.position",
        cascade="all, delete-orphan",
    )


class Role(Base):
    __tablename__ = "project_roles"
    __table_args__ = (
        CheckConstraint("filled >= 0", name="ck_role_filled_non_negative"),
        CheckConstraint("needed >= 1", name="ck_role_needed_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    role_name = Column(String(255), nullable=False)
    mandatory_skills = Column(JSON)
    optional_skills = Column(JSON)
    needed = Column(Integer, nullable=False, default=1)
    filled = Column(Integer, nullable=False, default=0)

    project = relationship("Project", back_populates="roles")
