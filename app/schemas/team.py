from pydantic import BaseModel, EmailStr, validator
from datetime import datetime
from typing import Optional

class TeamBase(BaseModel):
    name: str
    leader_name: str
    leader_email: EmailStr
    leader_phone: Optional[str] = None
    project_title: Optional[str] = None
    category: Optional[str] = None
    faculty_id: Optional[int] = None
    poster_url: Optional[str] = None
    video_url: Optional[str] = None

    @validator('name')
    def validate_name(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError('Team name cannot be empty')
        return v.strip()

class TeamCreateRequest(TeamBase):
    pass

class TeamUpdateRequest(BaseModel):
    name: Optional[str] = None
    leader_name: Optional[str] = None
    leader_email: Optional[EmailStr] = None
    leader_phone: Optional[str] = None
    project_title: Optional[str] = None
    category: Optional[str] = None
    faculty_id: Optional[int] = None
    poster_url: Optional[str] = None
    video_url: Optional[str] = None

    @validator('name')
    def validate_name(cls, v):
        if v is not None and len(v.strip()) == 0:
            raise ValueError('Team name cannot be empty')
        return v.strip() if v is not None else v

class TeamDisplay(BaseModel):
    id: int
    name: str
    category: str
    leader_name: str
    leader_email: str
    leader_phone: Optional[str] = None
    project_title: Optional[str] = None
    username: str
    faculty_id: Optional[int] = None
    user_id: Optional[int] = None
    poster_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TeamCreatedResponse(BaseModel):
    team: TeamDisplay
    credentials: dict
    login: dict
