from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func
from sqlalchemy.types import JSON

from unirivo.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(512), nullable=False)
    name = Column(String(255))
    full_name = Column(String(255))
    bio = Column(Text)
    location = Column(String(255))
    # Same list under two names; older clients still read tech_stack.
    skills = Column(JSON)
    tech_stack = Column(JSON)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
