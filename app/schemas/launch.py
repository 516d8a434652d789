from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.models.launch import LaunchKind

class LaunchRequest(BaseModel):
    team_id: int
    title: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)

class LaunchUpdateRequest(BaseModel):
    title: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)

class LaunchDisplay(BaseModel):
    id: int
    kind: LaunchKind
    team_id: int
    title: str
    media_url: str
    duration_minutes: Optional[int] = None
    is_active: bool
    launched_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None

    class Config:
        from_attributes = True
