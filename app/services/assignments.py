"""Assignment registry: which evaluator scores which teams."""
import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.evaluator import Evaluator, EvaluatorAssignment
from app.models.team import Team

logger = logging.getLogger(__name__)


def get_evaluator(db: Session, evaluator_id: int) -> Evaluator:
    evaluator = db.query(Evaluator).filter(Evaluator.id == evaluator_id).first()
    if not evaluator:
        raise NotFound(f"Evaluator {evaluator_id} not found")
    return evaluator

def assign(db: Session, evaluator_id: int, team_ids: Iterable[int], replace: bool = True) -> List[int]:
    """
    Assign teams to an evaluator.

    With ``replace`` the evaluator ends up with exactly ``team_ids``; otherwise
    the ids are added to the existing set. Pairs that already exist are kept
    as they are, and every team is checked before anything is written.
    Removing a pair never deletes the evaluator's evaluations.
    """
    get_evaluator(db, evaluator_id)

    wanted = list(dict.fromkeys(team_ids))
    found = {
        team_id for (team_id,) in db.query(Team.id).filter(Team.id.in_(wanted)).all()
    } if wanted else set()
    missing = [team_id for team_id in wanted if team_id not in found]
    if missing:
        raise NotFound(f"Team(s) not found: {', '.join(str(t) for t in missing)}")

    existing = {
        a.team_id: a for a in db.query(EvaluatorAssignment)
        .filter(EvaluatorAssignment.evaluator_id == evaluator_id)
        .all()
    }

    added = [team_id for team_id in wanted if team_id not in existing]
    for team_id in added:
        db.add(EvaluatorAssignment(evaluator_id=evaluator_id, team_id=team_id))

    removed = []
    if replace:
        removed = [team_id for team_id in existing if team_id not in found]
        for team_id in removed:
            db.delete(existing[team_id])

    db.commit()
    if added or removed:
        logger.info(
            "Evaluator %s assignments changed: added=%s removed=%s",
            evaluator_id, added, removed
        )
    return teams_for(db, evaluator_id)

def unassign(db: Session, evaluator_id: int, team_id: int) -> bool:
    get_evaluator(db, evaluator_id)
    assignment = db.query(EvaluatorAssignment).filter(
        EvaluatorAssignment.evaluator_id == evaluator_id,
        EvaluatorAssignment.team_id == team_id
    ).first()
    if not assignment:
        return False
    db.delete(assignment)
    db.commit()
    logger.info("Evaluator %s unassigned from team %s", evaluator_id, team_id)
    return True

def teams_for(db: Session, evaluator_id: int) -> List[int]:
    rows = (
        db.query(EvaluatorAssignment.team_id)
        .filter(EvaluatorAssignment.evaluator_id == evaluator_id)
        .order_by(EvaluatorAssignment.id)
        .all()
    )
    return [team_id for (team_id,) in rows]

def evaluators_for(db: Session, team_id: int) -> List[int]:
    rows = (
        db.query(EvaluatorAssignment.evaluator_id)
        .filter(EvaluatorAssignment.team_id == team_id)
        .order_by(EvaluatorAssignment.id)
        .all()
    )
    return [evaluator_id for (evaluator_id,) in rows]

def is_assigned(db: Session, evaluator_id: int, team_id: int) -> bool:
    return db.query(EvaluatorAssignment.id).filter(
        EvaluatorAssignment.evaluator_id == evaluator_id,
        EvaluatorAssignment.team_id == team_id
    ).first() is not None
