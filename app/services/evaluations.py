"""
Evaluation record store.

One record per (team, evaluator). Submitting for a pair that already has a
record overwrites it through a single INSERT ... ON CONFLICT statement, so two
racing submissions for the same pair leave exactly one row behind.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound, PermissionDenied, ValidationError
from app.models.evaluation import Evaluation, EvaluationStatus
from app.models.team import Team
from app.services import assignments
from app.services.criteria import get_criteria

logger = logging.getLogger(__name__)


def validate_scores(scores: Any) -> Dict[str, float]:
    if not isinstance(scores, dict):
        raise ValidationError("Scores must be an object mapping criterion to score")

    criteria = get_criteria()
    known = {criterion["key"] for criterion in criteria}
    unknown = sorted(set(scores) - known)
    if unknown:
        raise ValidationError(f"Unknown criteria: {', '.join(unknown)}")

    cleaned = {}
    for criterion in criteria:
        key = criterion["key"]
        if key not in scores or scores[key] is None:
            raise ValidationError(f"Missing score for criterion '{key}'")
        value = scores[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValidationError(f"Score for criterion '{key}' must be a number")
        if not criterion["min_score"] <= value <= criterion["max_score"]:
            raise ValidationError(
                f"Score for criterion '{key}' must be between "
                f"{criterion['min_score']} and {criterion['max_score']}"
            )
        cleaned[key] = value
    return cleaned

def _clean_comments(comments: Optional[str]) -> str:
    return (comments or "").strip()

def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise RuntimeError(f"Unsupported database dialect for evaluation upsert: {dialect}")
    return insert

def submit(
    db: Session,
    evaluator_id: int,
    team_id: int,
    scores: Any,
    comments: Optional[str] = None
) -> Evaluation:
    if not db.query(Team.id).filter(Team.id == team_id).first():
        raise NotFound(f"Team {team_id} not found")

    if not assignments.is_assigned(db, evaluator_id, team_id):
        logger.warning("Evaluator %s tried to submit for unassigned team %s", evaluator_id, team_id)
        raise PermissionDenied("You are not assigned to evaluate this team")

    cleaned = validate_scores(scores)
    now = datetime.now(timezone.utc)

    insert = _insert_for(db)
    stmt = insert(Evaluation).values(
        team_id=team_id,
        evaluator_id=evaluator_id,
        scores=cleaned,
        comments=_clean_comments(comments),
        status=EvaluationStatus.SUBMITTED,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["team_id", "evaluator_id"],
        set_={
            "scores": stmt.excluded.scores,
            "comments": stmt.excluded.comments,
            "status": stmt.excluded.status,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    db.execute(stmt)
    db.commit()

    evaluation = get_for_pair(db, team_id, evaluator_id)
    logger.info(
        "Evaluation %s submitted by evaluator %s for team %s",
        evaluation.id, evaluator_id, team_id
    )
    return evaluation

def update(
    db: Session,
    evaluation_id: int,
    evaluator_id: int,
    scores: Any,
    comments: Optional[str] = None
) -> Evaluation:
    evaluation = db.query(Evaluation).filter(Evaluation.id == evaluation_id).first()
    if not evaluation:
        raise NotFound(f"Evaluation {evaluation_id} not found")
    if evaluation.evaluator_id != evaluator_id:
        logger.warning(
            "Evaluator %s tried to update evaluation %s owned by %s",
            evaluator_id, evaluation_id, evaluation.evaluator_id
        )
        raise PermissionDenied("You can only update your own evaluations")

    evaluation.scores = validate_scores(scores)
    evaluation.comments = _clean_comments(comments)
    evaluation.status = EvaluationStatus.SUBMITTED
    evaluation.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(evaluation)
    logger.info("Evaluation %s updated by evaluator %s", evaluation_id, evaluator_id)
    return evaluation

def get(db: Session, team_id: int) -> List[Evaluation]:
    return (
        db.query(Evaluation)
        .filter(Evaluation.team_id == team_id)
        .order_by(Evaluation.id)
        .all()
    )

def get_by_evaluator(db: Session, evaluator_id: int) -> List[Evaluation]:
    return (
        db.query(Evaluation)
        .filter(Evaluation.evaluator_id == evaluator_id)
        .order_by(Evaluation.id)
        .all()
    )

def get_for_pair(db: Session, team_id: int, evaluator_id: int) -> Optional[Evaluation]:
    return db.query(Evaluation).filter(
        Evaluation.team_id == team_id,
        Evaluation.evaluator_id == evaluator_id
    ).first()

def list_all(db: Session) -> List[Evaluation]:
    return db.query(Evaluation).order_by(Evaluation.team_id, Evaluation.id).all()
