from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.base import Base

class Team(Base):
    __tablename__ = "teams"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    # Result category, the key the release gate is checked against
    category = Column(String, nullable=False)
    project_title = Column(String, nullable=True)

    leader_name = Column(String, nullable=False)
    leader_email = Column(String, nullable=False)
    leader_phone = Column(String, nullable=True)

    # Team credential pair, issued separately from the login account
    username = Column(String, nullable=False, unique=True)
    hashed_password = Column(String, nullable=False)

    poster_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)

    faculty_id = Column(Integer, ForeignKey("faculty.id"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    faculty = relationship("Faculty", back_populates="teams")
    user = relationship("User", back_populates="team")
    assignments = relationship("EvaluatorAssignment", back_populates="team")
    evaluations = relationship("Evaluation", back_populates="team")
