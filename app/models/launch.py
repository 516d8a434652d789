from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
from app.db.base import Base

class LaunchKind(enum.Enum):
    POSTER = "poster"
    VIDEO = "video"

class Launch(Base):
    __tablename__ = "launches"
    id = Column(Integer, primary_key=True)
    kind = Column(Enum(LaunchKind), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    title = Column(String, nullable=False)
    media_url = Column(String, nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    launched_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    stopped_at = Column(DateTime(timezone=True), nullable=True)
    launched_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    team = relationship("Team")
