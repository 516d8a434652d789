from sqlalchemy import Column, Integer, String, ForeignKey, Enum, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
from app.db.base import Base

class RoleType(enum.Enum):
    ADMIN = "admin"
    FACULTY = "faculty"
    TEAM = "team"
    EVALUATOR = "evaluator"

class User(Base):
    __tablename__ = "users"
    # One account per email+role pair, so a faculty member can also be an evaluator
    __table_args__ = (UniqueConstraint("email", "role", name="email_role_unique"),)

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    role = Column(Enum(RoleType), nullable=False)
    hashed_password = Column(String, nullable=False)
    faculty_id = Column(Integer, ForeignKey("faculty.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    faculty_profile = relationship("Faculty", back_populates="users")
    team = relationship("Team", back_populates="user", uselist=False)
    evaluator_profile = relationship("Evaluator", back_populates="user", uselist=False)
