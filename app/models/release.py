from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime
from app.db.base import Base

class ReleaseGate(Base):
    """Result visibility switch for one category. A missing row means closed."""
    __tablename__ = "release_gates"
    category = Column(String, primary_key=True)
    is_open = Column(Boolean, nullable=False, default=False)
    released_at = Column(DateTime(timezone=True), nullable=True)
    released_by = Column(Integer, ForeignKey("users.id"), nullable=True)
