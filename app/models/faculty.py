from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.db.base import Base

class Faculty(Base):
    __tablename__ = "faculty"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    designation = Column(String, nullable=True)
    department = Column(String, nullable=True)
    specialization = Column(String, nullable=True)

    users = relationship("User", back_populates="faculty_profile")
    teams = relationship("Team", back_populates="faculty", order_by="Team.id")
