"""Locally persisted per-user preferences for the HarakaPay gateway."""

from sqlalchemy import Column, DateTime, Integer, String

from harakapay.core.time import utc_now
from harakapay.db.base_class import Base


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True, index=True)
    # Backend auth user id (UUID); users live in the remote backend, not here
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    language = Column(String(8), nullable=False, default="fr")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
