"""Admin-side management of teams, faculty, evaluators and user accounts."""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config.settings import get_settings
from app.core.errors import Conflict, NotFound, ValidationError
from app.core.security.auth import get_password_hash
from app.models.evaluation import Evaluation, EvaluationStatus
from app.models.evaluator import Evaluator, EvaluatorAssignment
from app.models.faculty import Faculty
from app.models.launch import Launch
from app.models.release import ReleaseGate
from app.models.team import Team
from app.models.user import User, RoleType
from app.utils.helpers import generate_password, slugify_username

logger = logging.getLogger(__name__)


def _commit(db: Session, conflict_message: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("%s: %s", conflict_message, e.orig)
        raise Conflict(conflict_message)

def _ensure_faculty(db: Session, faculty_id: Optional[int]) -> None:
    if faculty_id is not None and not db.query(Faculty.id).filter(Faculty.id == faculty_id).first():
        raise NotFound(f"Faculty {faculty_id} not found")

def _apply(obj: Any, changes: Dict[str, Any], required: Tuple[str, ...] = ()) -> None:
    cleared = sorted(key for key in required if key in changes and changes[key] is None)
    if cleared:
        raise ValidationError(f"Fields cannot be cleared: {', '.join(cleared)}")
    for key, value in changes.items():
        setattr(obj, key, value)

def _detach_user(db: Session, user_id: int) -> None:
    # Rows that only record who did something outlive the account
    db.query(Team).filter(Team.user_id == user_id).update({Team.user_id: None})
    db.query(Evaluator).filter(Evaluator.user_id == user_id).update({Evaluator.user_id: None})
    db.query(ReleaseGate).filter(ReleaseGate.released_by == user_id).update(
        {ReleaseGate.released_by: None}
    )
    db.query(Launch).filter(Launch.launched_by == user_id).update({Launch.launched_by: None})


# Users

def create_user(
    db: Session,
    name: str,
    email: str,
    role: RoleType,
    password: str,
    faculty_id: Optional[int] = None
) -> User:
    if db.query(User.id).filter(User.email == email, User.role == role).first():
        raise Conflict(f"A {role.value} account already exists for {email}")
    user = User(
        name=name,
        email=email,
        role=role,
        hashed_password=get_password_hash(password),
        faculty_id=faculty_id
    )
    db.add(user)
    db.flush()
    return user

def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound(f"User {user_id} not found")
    return user

def list_users(db: Session, role: Optional[RoleType] = None) -> List[User]:
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    return query.order_by(User.id).all()

def update_user(db: Session, user_id: int, changes: Dict[str, Any]) -> User:
    user = get_user(db, user_id)
    _apply(user, changes, required=("name", "email"))
    _commit(db, "Another account already uses this email and role")
    db.refresh(user)
    return user

def delete_user(db: Session, user_id: int, acting_user_id: int) -> None:
    user = get_user(db, user_id)
    if user.id == acting_user_id:
        raise Conflict("You cannot delete your own account")
    _detach_user(db, user.id)
    db.delete(user)
    _commit(db, f"User {user_id} is still referenced")
    logger.info("Deleted user %s (%s)", user_id, user.role.value)


# Teams

def get_team(db: Session, team_id: int) -> Team:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFound(f"Team {team_id} not found")
    return team

def list_teams(db: Session, category: Optional[str] = None) -> List[Team]:
    query = db.query(Team)
    if category:
        query = query.filter(Team.category == category)
    return query.order_by(Team.id).all()

def create_team(db: Session, data: Dict[str, Any]) -> Tuple[Team, str, str]:
    """
    Create a team with its credential pair and its ``team`` login account.

    Returns the team, the generated team password and the generated login
    password; both are only ever available in this response.
    """
    data = dict(data)
    _ensure_faculty(db, data.get("faculty_id"))
    if db.query(Team.id).filter(Team.name == data["name"]).first():
        raise Conflict(f"Team name {data['name']} already exists")

    team_password = generate_password()
    login_password = generate_password()

    user = create_user(
        db,
        name=data["name"],
        email=data["leader_email"],
        role=RoleType.TEAM,
        password=login_password
    )
    team = Team(
        category=data.pop("category", None) or get_settings().DEFAULT_CATEGORY,
        username=slugify_username(data["name"]),
        hashed_password=get_password_hash(team_password),
        user_id=user.id,
        **data
    )
    db.add(team)
    _commit(db, f"Team {data['name']} conflicts with an existing record")
    db.refresh(team)
    logger.info("Created team %s (%s) in category '%s'", team.id, team.name, team.category)
    return team, team_password, login_password

def update_team(db: Session, team_id: int, changes: Dict[str, Any]) -> Team:
    team = get_team(db, team_id)
    if "faculty_id" in changes:
        _ensure_faculty(db, changes["faculty_id"])
    _apply(team, changes, required=("name", "category", "leader_name", "leader_email"))
    _commit(db, "Team name already exists")
    db.refresh(team)
    return team

def delete_team(db: Session, team_id: int) -> None:
    team = get_team(db, team_id)
    if db.query(Evaluation.id).filter(Evaluation.team_id == team_id).first():
        raise Conflict("Team already has evaluations and cannot be deleted")

    db.query(EvaluatorAssignment).filter(EvaluatorAssignment.team_id == team_id).delete(
        synchronize_session=False
    )
    db.query(Launch).filter(Launch.team_id == team_id).delete(synchronize_session=False)
    user = team.user
    if user is not None:
        _detach_user(db, user.id)
    db.delete(team)
    if user is not None:
        db.delete(user)
    _commit(db, f"Team {team_id} is still referenced")
    logger.info("Deleted team %s", team_id)


# Faculty

def get_faculty(db: Session, faculty_id: int) -> Faculty:
    faculty = db.query(Faculty).filter(Faculty.id == faculty_id).first()
    if not faculty:
        raise NotFound(f"Faculty {faculty_id} not found")
    return faculty

def list_faculty(db: Session) -> List[Faculty]:
    return db.query(Faculty).order_by(Faculty.id).all()

def create_faculty(db: Session, data: Dict[str, Any]) -> Tuple[Faculty, str]:
    if db.query(Faculty.id).filter(Faculty.email == data["email"]).first():
        raise Conflict(f"Faculty with email {data['email']} already exists")

    faculty = Faculty(**data)
    db.add(faculty)
    db.flush()

    password = generate_password()
    create_user(
        db,
        name=faculty.name,
        email=faculty.email,
        role=RoleType.FACULTY,
        password=password,
        faculty_id=faculty.id
    )
    _commit(db, f"Faculty {data['email']} conflicts with an existing record")
    db.refresh(faculty)
    logger.info("Created faculty %s (%s)", faculty.id, faculty.email)
    return faculty, password

def update_faculty(db: Session, faculty_id: int, changes: Dict[str, Any]) -> Faculty:
    faculty = get_faculty(db, faculty_id)
    _apply(faculty, changes, required=("name", "email"))
    _commit(db, "Another faculty member already uses this email")
    db.refresh(faculty)
    return faculty

def delete_faculty(db: Session, faculty_id: int) -> None:
    faculty = get_faculty(db, faculty_id)
    db.query(Team).filter(Team.faculty_id == faculty_id).update({Team.faculty_id: None})
    for user in list(faculty.users):
        if user.role == RoleType.FACULTY:
            _detach_user(db, user.id)
            db.delete(user)
        else:
            user.faculty_id = None
    db.delete(faculty)
    _commit(db, f"Faculty {faculty_id} is still referenced")
    logger.info("Deleted faculty %s", faculty_id)


# Evaluators

def list_evaluators(db: Session) -> List[Evaluator]:
    return db.query(Evaluator).order_by(Evaluator.id).all()

def create_evaluator(db: Session, data: Dict[str, Any]) -> Tuple[Evaluator, str]:
    """The email may already belong to an account with another role, e.g. faculty."""
    password = generate_password()
    user = create_user(
        db,
        name=data["name"],
        email=data["email"],
        role=RoleType.EVALUATOR,
        password=password
    )
    evaluator = Evaluator(user_id=user.id, **data)
    db.add(evaluator)
    _commit(db, f"Evaluator {data['email']} conflicts with an existing record")
    db.refresh(evaluator)
    logger.info("Created evaluator %s (%s)", evaluator.id, evaluator.email)
    return evaluator, password


def dashboard_stats(db: Session) -> Dict[str, int]:
    return {
        "teams": db.query(Team).count(),
        "faculty": db.query(Faculty).count(),
        "evaluators": db.query(Evaluator).count(),
        "users": db.query(User).count(),
        "submitted_evaluations": db.query(Evaluation)
            .filter(Evaluation.status == EvaluationStatus.SUBMITTED)
            .count(),
        "active_launches": db.query(Launch).filter(Launch.is_active.is_(True)).count(),
    }
