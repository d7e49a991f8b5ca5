from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func

from bagtag.models.base import Base


class UserSession(Base):
    __tablename__ = "user_sessions"

    # SHA-256 hex digest of the bearer token; the raw token is never stored
    token_hash = Column(String(64), primary_key=True)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
