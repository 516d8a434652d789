from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Any, Dict, List

from app.core.config.settings import get_settings
from app.core.errors import PermissionDenied
from app.core.security.auth import get_current_user
from app.core.security.principals import (
    AdminPrincipal, EvaluatorPrincipal, FacultyPrincipal, TeamPrincipal,
    current_admin, current_evaluator, current_faculty, current_team,
)
from app.db.session import get_db
from app.models.evaluation import Evaluation
from app.models.team import Team
from app.models.user import User
from app.schemas.evaluation import (
    EvaluationDisplay, EvaluationSubmitRequest, EvaluationUpdateRequest, ReleaseRequest,
)
from app.services import assignments, evaluations, release_gate, results
from app.services.criteria import get_criteria
from app.services.directory import get_team
from app.utils.helpers import format_datetime

router = APIRouter(prefix="/evaluation", tags=["evaluation"])


def _team_summary(team: Team) -> Dict[str, Any]:
    return {
        "id": team.id,
        "name": team.name,
        "category": team.category,
        "project_title": team.project_title,
        "leader_name": team.leader_name,
        "poster_url": team.poster_url,
        "video_url": team.video_url,
    }

def _evaluation_detail(evaluation: Evaluation) -> Dict[str, Any]:
    detail = EvaluationDisplay.model_validate(evaluation).model_dump(mode="json")
    evaluator = evaluation.evaluator
    detail["evaluator_name"] = evaluator.name if evaluator else None
    detail["total"] = round(sum((evaluation.scores or {}).values()), 2)
    return detail


# ==================== EVALUATOR ROUTES ====================

@router.get("/evaluator/teams")
def get_evaluator_teams(
    principal: EvaluatorPrincipal = Depends(current_evaluator),
    db: Session = Depends(get_db)
):
    team_ids = assignments.teams_for(db, principal.evaluator_id)
    teams = {team.id: team for team in db.query(Team).filter(Team.id.in_(team_ids)).all()}
    own = {e.team_id: e for e in evaluations.get_by_evaluator(db, principal.evaluator_id)}

    items = []
    for team_id in team_ids:
        item = _team_summary(teams[team_id])
        evaluation = own.get(team_id)
        item["evaluation_id"] = evaluation.id if evaluation else None
        item["evaluation_status"] = evaluation.status.value if evaluation else None
        item["evaluated_at"] = format_datetime(evaluation.updated_at) if evaluation else None
        items.append(item)

    return {
        "teams": items,
        "total": len(items),
        "evaluated": sum(1 for item in items if item["evaluation_id"] is not None),
    }

@router.get("/team/{team_id}")
def get_team_for_evaluation(
    team_id: int,
    principal: EvaluatorPrincipal = Depends(current_evaluator),
    db: Session = Depends(get_db)
):
    team = get_team(db, team_id)
    if not assignments.is_assigned(db, principal.evaluator_id, team_id):
        raise PermissionDenied("You are not assigned to evaluate this team")

    existing = evaluations.get_for_pair(db, team_id, principal.evaluator_id)
    return {
        "team": _team_summary(team),
        "evaluation": EvaluationDisplay.model_validate(existing) if existing else None,
        "criteria": get_criteria(),
    }

@router.post("/submit", response_model=EvaluationDisplay)
def submit_evaluation(
    request: EvaluationSubmitRequest,
    principal: EvaluatorPrincipal = Depends(current_evaluator),
    db: Session = Depends(get_db)
):
    return evaluations.submit(
        db,
        evaluator_id=principal.evaluator_id,
        team_id=request.team_id,
        scores=request.scores,
        comments=request.comments
    )

@router.put("/{evaluation_id}", response_model=EvaluationDisplay)
def update_evaluation(
    evaluation_id: int,
    request: EvaluationUpdateRequest,
    principal: EvaluatorPrincipal = Depends(current_evaluator),
    db: Session = Depends(get_db)
):
    return evaluations.update(
        db,
        evaluation_id=evaluation_id,
        evaluator_id=principal.evaluator_id,
        scores=request.scores,
        comments=request.comments
    )


# ==================== ADMIN ROUTES ====================

@router.get("/admin/overview")
def get_evaluation_overview(
    principal: AdminPrincipal = Depends(current_admin),
    db: Session = Depends(get_db)
):
    gates = release_gate.gate_states(db)
    teams = []
    for team in db.query(Team).order_by(Team.id).all():
        records = evaluations.get(db, team.id)
        summary = results.aggregate(records)
        teams.append({
            **_team_summary(team),
            "assigned_evaluators": len(assignments.evaluators_for(db, team.id)),
            "submitted_evaluations": summary["evaluation_count"],
            "criteria": summary["criteria"],
            "overall_total": summary["overall_total"],
            "released": gates.get(team.category, False),
        })

    return {
        "teams": teams,
        "total_teams": len(teams),
        "total_evaluations": sum(t["submitted_evaluations"] for t in teams),
        "release_gates": gates,
    }

@router.get("/admin/team/{team_id}")
def get_team_evaluation_details(
    team_id: int,
    principal: AdminPrincipal = Depends(current_admin),
    db: Session = Depends(get_db)
):
    team = get_team(db, team_id)
    records = evaluations.get(db, team_id)
    return {
        "team": _team_summary(team),
        "evaluations": [_evaluation_detail(e) for e in records],
        "summary": results.aggregate(records),
        "released": release_gate.is_open(db, team.category),
    }

@router.post("/admin/release-results")
def release_results(
    request: ReleaseRequest,
    principal: AdminPrincipal = Depends(current_admin),
    db: Session = Depends(get_db)
):
    category = request.category or get_settings().DEFAULT_CATEGORY
    gate = release_gate.release(db, category, released_by=principal.user_id)
    return {
        "message": f"Results released for category {gate.category}",
        "category": gate.category,
        "released_at": format_datetime(gate.released_at),
    }

@router.post("/admin/reset-results")
def reset_results(
    principal: AdminPrincipal = Depends(current_admin),
    db: Session = Depends(get_db)
):
    closed = release_gate.reset_all(db)
    return {"message": "All results hidden", "closed": closed}


# ==================== RESULTS ROUTES ====================

@router.get("/results/team")
def get_team_results(
    principal: TeamPrincipal = Depends(current_team),
    db: Session = Depends(get_db)
):
    return results.results_for_team(db, principal.team_id)

@router.get("/results/faculty")
def get_faculty_results(
    principal: FacultyPrincipal = Depends(current_faculty),
    db: Session = Depends(get_db)
) -> List[Dict[str, Any]]:
    return results.results_for_faculty(db, principal.faculty_id)


# ==================== GENERAL ROUTES ====================

@router.get("/criteria")
def get_evaluation_criteria(current_user: User = Depends(get_current_user)):
    return {"criteria": get_criteria()}
