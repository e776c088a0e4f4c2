"""Profile model."""
import enum
from uuid import uuid4
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class UserRole(str, enum.Enum):
    """Account roles."""

    OWNER = "OWNER"
    PLAYER = "PLAYER"


class Profile(Base):
    """Represents an authenticated account (owner or player)."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))  # Same as the auth identity
    role = Column(String, nullable=False, default=UserRole.PLAYER.value)
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
