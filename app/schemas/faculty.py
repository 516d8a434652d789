from pydantic import BaseModel, EmailStr
from typing import Optional

class FacultyCreateRequest(BaseModel):
    name: str
    email: EmailStr
    designation: Optional[str] = None
    department: Optional[str] = None
    specialization: Optional[str] = None

class FacultyUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    specialization: Optional[str] = None

class FacultyDisplay(BaseModel):
    id: int
    name: str
    email: str
    designation: Optional[str] = None
    department: Optional[str] = None
    specialization: Optional[str] = None

    class Config:
        from_attributes = True
