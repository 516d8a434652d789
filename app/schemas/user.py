from pydantic import BaseModel, EmailStr, validator
from datetime import datetime
from typing import Optional
from app.models.user import RoleType

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    role: Optional[RoleType] = None

class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: RoleType

    @validator('name')
    def validate_name(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError('Name cannot be empty')
        return v.strip()

    @validator('password')
    def validate_password(cls, v):
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters long')
        return v

class FacultyProfile(BaseModel):
    id: int
    name: str
    designation: Optional[str] = None
    department: Optional[str] = None
    specialization: Optional[str] = None

    class Config:
        from_attributes = True

class UserDisplay(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: RoleType
    faculty_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None

class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserDisplay
    faculty_profile: Optional[FacultyProfile] = None
