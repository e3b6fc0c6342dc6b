from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, func

from unirivo.database import Base

NEW_APPLICATION = "NEW_APPLICATION"
APPLICATION_ACCEPTED = "APPLICATION_ACCEPTED"
APPLICATION_REJECTED = "APPLICATION_REJECTED"
APPLICATION_SHORTLISTED = "APPLICATION_SHORTLISTED"
MEMBER_ADDED = "MEMBER_ADDED"
MEMBER_REMOVED = "MEMBER_REMOVED"

NOTIFICATION_TYPES = (
    NEW_APPLICATION,
    APPLICATION_ACCEPTED,
    APPLICATION_REJECTED,
    APPLICATION_SHORTLISTED,
    MEMBER_ADDED,
    MEMBER_REMOVED,
)


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("idx_notification_user_read", "user_id", "read"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(40), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(512))
    # No foreign keys: a notification outlives the project or application it mentions.
    project_id = Column(Integer)
    application_id = Column(Integer)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
