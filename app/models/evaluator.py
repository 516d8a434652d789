from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.base import Base

class Evaluator(Base):
    __tablename__ = "evaluators"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, unique=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    expertise = Column(String, nullable=True)

    user = relationship("User", back_populates="evaluator_profile")
    assignments = relationship(
        "EvaluatorAssignment",
        back_populates="evaluator",
        order_by="EvaluatorAssignment.id"
    )
    evaluations = relationship("Evaluation", back_populates="evaluator")

class EvaluatorAssignment(Base):
    __tablename__ = "evaluator_assignments"
    __table_args__ = (UniqueConstraint("evaluator_id", "team_id", name="evaluator_team_unique"),)

    id = Column(Integer, primary_key=True)
    evaluator_id = Column(Integer, ForeignKey("evaluators.id"), nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    assigned_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    evaluator = relationship("Evaluator", back_populates="assignments")
    team = relationship("Team", back_populates="assignments")
