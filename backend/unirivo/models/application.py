from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func

from unirivo.database import Base

STATUS_PENDING = "PENDING"
STATUS_SHORTLISTED = "SHORTLISTED"
STATUS_ACCEPTED = "ACCEPTED"
STATUS_REJECTED = "REJECTED"
STATUS_REMOVED = "REMOVED"

APPLICATION_STATUSES = (
    STATUS_PENDING,
    STATUS_SHORTLISTED,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_REMOVED,
)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("project_id", "role_id", "user_id", name="uq_application_project_role_user"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("project_roles.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_name = Column(String(255))
    user_email = Column(String(255))
    status = Column(String(20), default=STATUS_PENDING, nullable=False)
    message = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
