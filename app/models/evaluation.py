from sqlalchemy import Column, Integer, ForeignKey, Text, DateTime, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
from app.db.base import Base

class EvaluationStatus(enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"

class Evaluation(Base):
    __tablename__ = "evaluations"
    # At most one evaluation per (team, evaluator); submit upserts on this key
    __table_args__ = (UniqueConstraint("team_id", "evaluator_id", name="team_evaluator_unique"),)

    id = Column(Integer, primary_key=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    evaluator_id = Column(Integer, ForeignKey("evaluators.id"), nullable=False, index=True)
    scores = Column(JSON, nullable=False, default=dict)
    comments = Column(Text, nullable=True)
    status = Column(Enum(EvaluationStatus), nullable=False, default=EvaluationStatus.SUBMITTED)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    team = relationship("Team", back_populates="evaluations")
    evaluator = relationship("Evaluator", back_populates="evaluations")
