from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.security.auth import admin_required
from app.core.security.principals import AdminPrincipal, current_admin
from app.db.session import get_db
from app.models.evaluator import Evaluator
from app.models.user import RoleType
from app.models.launch import LaunchKind
from app.routers.launches import build_launch_router
from app.schemas.evaluation import EvaluationDisplay
from app.schemas.evaluator import AssignTeamsRequest, EvaluatorCreateRequest, EvaluatorDisplay
from app.schemas.faculty import FacultyCreateRequest, FacultyDisplay, FacultyUpdateRequest
from app.schemas.team import TeamCreateRequest, TeamDisplay, TeamUpdateRequest
from app.schemas.user import UserDisplay, UserUpdateRequest
from app.services import assignments, directory, evaluations, launches, release_gate
from app.utils.helpers import paginate_results

# Every route here requires an admin token
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_required)])


def _evaluator_display(evaluator: Evaluator) -> EvaluatorDisplay:
    return EvaluatorDisplay(
        id=evaluator.id,
        name=evaluator.name,
        email=evaluator.email,
        expertise=evaluator.expertise,
        user_id=evaluator.user_id,
        team_ids=[a.team_id for a in evaluator.assignments]
    )


# Dashboard

@router.get("/dashboard")
def get_dashboard_stats(db: Session = Depends(get_db)):
    return {
        "stats": directory.dashboard_stats(db),
        "release_gates": release_gate.gate_states(db),
    }


# Team Management

@router.get("/teams")
def get_teams(
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db)
):
    teams = [
        TeamDisplay.model_validate(team).model_dump(mode="json")
        for team in directory.list_teams(db, category)
    ]
    return paginate_results(teams, page, page_size)

@router.post("/teams", status_code=status.HTTP_201_CREATED)
def create_team(request: TeamCreateRequest, db: Session = Depends(get_db)):
    team, team_password, login_password = directory.create_team(db, request.model_dump())
    return {
        "team": TeamDisplay.model_validate(team),
        "credentials": {"username": team.username, "password": team_password},
        "login": {"email": team.leader_email, "password": login_password},
    }

@router.put("/teams/{team_id}", response_model=TeamDisplay)
def update_team(team_id: int, request: TeamUpdateRequest, db: Session = Depends(get_db)):
    return directory.update_team(db, team_id, request.model_dump(exclude_unset=True))

@router.delete("/teams/{team_id}")
def delete_team(team_id: int, db: Session = Depends(get_db)):
    directory.delete_team(db, team_id)
    return {"message": "Team deleted successfully"}


# Faculty Management

@router.get("/faculty", response_model=List[FacultyDisplay])
def get_faculty(db: Session = Depends(get_db)):
    return directory.list_faculty(db)

@router.post("/faculty", status_code=status.HTTP_201_CREATED)
def create_faculty(request: FacultyCreateRequest, db: Session = Depends(get_db)):
    faculty, password = directory.create_faculty(db, request.model_dump())
    return {
        "faculty": FacultyDisplay.model_validate(faculty),
        "login": {"email": faculty.email, "password": password},
    }

@router.put("/faculty/{faculty_id}", response_model=FacultyDisplay)
def update_faculty(faculty_id: int, request: FacultyUpdateRequest, db: Session = Depends(get_db)):
    return directory.update_faculty(db, faculty_id, request.model_dump(exclude_unset=True))

@router.delete("/faculty/{faculty_id}")
def delete_faculty(faculty_id: int, db: Session = Depends(get_db)):
    directory.delete_faculty(db, faculty_id)
    return {"message": "Faculty deleted successfully"}


# Evaluator Management

@router.get("/evaluators", response_model=List[EvaluatorDisplay])
def get_evaluators(db: Session = Depends(get_db)):
    return [_evaluator_display(e) for e in directory.list_evaluators(db)]

@router.post("/evaluators", status_code=status.HTTP_201_CREATED)
def create_evaluator(request: EvaluatorCreateRequest, db: Session = Depends(get_db)):
    evaluator, password = directory.create_evaluator(db, request.model_dump())
    return {
        "evaluator": _evaluator_display(evaluator),
        "login": {"email": evaluator.email, "password": password},
    }

@router.post("/evaluators/{evaluator_id}/assign-teams")
def assign_teams_to_evaluator(
    evaluator_id: int,
    request: AssignTeamsRequest,
    db: Session = Depends(get_db)
):
    team_ids = assignments.assign(db, evaluator_id, request.team_ids, replace=request.replace)
    return {"evaluator_id": evaluator_id, "team_ids": team_ids}

@router.delete("/evaluators/{evaluator_id}/teams/{team_id}")
def unassign_team_from_evaluator(evaluator_id: int, team_id: int, db: Session = Depends(get_db)):
    removed = assignments.unassign(db, evaluator_id, team_id)
    return {
        "removed": removed,
        "evaluator_id": evaluator_id,
        "team_ids": assignments.teams_for(db, evaluator_id),
    }


# Evaluation Management

@router.get("/evaluations", response_model=List[EvaluationDisplay])
def get_evaluations(db: Session = Depends(get_db)):
    return evaluations.list_all(db)

@router.get("/evaluations/team/{team_id}", response_model=List[EvaluationDisplay])
def get_team_evaluations(team_id: int, db: Session = Depends(get_db)):
    directory.get_team(db, team_id)
    return evaluations.get(db, team_id)


# User Management

@router.get("/users", response_model=List[UserDisplay])
def get_users(role: Optional[RoleType] = None, db: Session = Depends(get_db)):
    return directory.list_users(db, role)

@router.put("/users/{user_id}", response_model=UserDisplay)
def update_user(user_id: int, request: UserUpdateRequest, db: Session = Depends(get_db)):
    return directory.update_user(db, user_id, request.model_dump(exclude_unset=True))

@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    principal: AdminPrincipal = Depends(current_admin),
    db: Session = Depends(get_db)
):
    directory.delete_user(db, user_id, acting_user_id=principal.user_id)
    return {"message": "User deleted successfully"}


# Poster / Video Launch Management

router.include_router(build_launch_router(LaunchKind.POSTER, "posters"))
router.include_router(build_launch_router(LaunchKind.VIDEO, "videos"))

@router.delete("/reset-all-launches")
def reset_all_launches(db: Session = Depends(get_db)):
    stopped = launches.reset_all(db)
    return {"message": "All launches stopped", "stopped": stopped}
