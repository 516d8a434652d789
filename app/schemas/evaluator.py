from pydantic import BaseModel, EmailStr
from typing import List, Optional

class EvaluatorCreateRequest(BaseModel):
    name: str
    email: EmailStr
    expertise: Optional[str] = None

class EvaluatorDisplay(BaseModel):
    id: int
    name: str
    email: str
    expertise: Optional[str] = None
    user_id: Optional[int] = None
    team_ids: List[int] = []

class AssignTeamsRequest(BaseModel):
    team_ids: List[int]
    replace: bool = True
