"""
Result aggregation, gated by the release switch of each team's category.

A closed gate and a team without evaluations are ordinary results tagged
``pending`` and ``no_evaluations``; neither raises.
"""
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.evaluation import Evaluation, EvaluationStatus
from app.models.faculty import Faculty
from app.models.team import Team
from app.services import evaluations, release_gate
from app.services.criteria import criteria_keys

PENDING = "pending"
NO_EVALUATIONS = "no_evaluations"
RELEASED = "released"


def aggregate(records: Iterable[Evaluation]) -> Dict[str, Any]:
    """
    Mean per criterion across submitted evaluations plus an overall total.

    A record that lacks a criterion is left out of that criterion's mean
    instead of counting as zero.
    """
    submitted = [r for r in records if r.status == EvaluationStatus.SUBMITTED]

    keys = criteria_keys()
    for record in submitted:
        for key in (record.scores or {}):
            if key not in keys:
                keys.append(key)

    criteria = {}
    means = []
    for key in keys:
        values = [
            record.scores[key] for record in submitted
            if record.scores and record.scores.get(key) is not None
        ]
        if not values:
            continue
        mean = sum(values) / len(values)
        means.append(mean)
        criteria[key] = {"average": round(mean, 2), "count": len(values)}

    return {
        "evaluation_count": len(submitted),
        "criteria": criteria,
        # Rounded once, from the unrounded means
        "overall_total": round(sum(means), 2),
        "comments": [r.comments for r in submitted if r.comments],
    }

def _team_header(team: Team) -> Dict[str, Any]:
    return {
        "team_id": team.id,
        "team_name": team.name,
        "category": team.category,
    }

def result_for(db: Session, team: Team) -> Dict[str, Any]:
    result = _team_header(team)
    if not release_gate.is_open(db, team.category):
        result["status"] = PENDING
        return result

    records = [
        r for r in evaluations.get(db, team.id)
        if r.status == EvaluationStatus.SUBMITTED
    ]
    if not records:
        result["status"] = NO_EVALUATIONS
        return result

    result["status"] = RELEASED
    result.update(aggregate(records))
    return result

def results_for_team(db: Session, team_id: int) -> Dict[str, Any]:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFound(f"Team {team_id} not found")
    return result_for(db, team)

def results_for_faculty(db: Session, faculty_id: int) -> List[Dict[str, Any]]:
    faculty = db.query(Faculty).filter(Faculty.id == faculty_id).first()
    if not faculty:
        raise NotFound(f"Faculty {faculty_id} not found")
    teams = db.query(Team).filter(Team.faculty_id == faculty_id).order_by(Team.id).all()
    return [result_for(db, team) for team in teams]
