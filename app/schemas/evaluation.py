from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, Optional
from app.models.evaluation import EvaluationStatus

class EvaluationSubmitRequest(BaseModel):
    team_id: int
    # Checked against the configured criteria by the service, not here
    scores: Dict[str, Any]
    comments: Optional[str] = None

class EvaluationUpdateRequest(BaseModel):
    scores: Dict[str, Any]
    comments: Optional[str] = None

class EvaluationDisplay(BaseModel):
    id: int
    team_id: int
    evaluator_id: int
    scores: Dict[str, Any]
    comments: Optional[str] = None
    status: EvaluationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReleaseRequest(BaseModel):
    category: Optional[str] = None
