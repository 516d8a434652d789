"""
Role-specific view of the authenticated user.

Every role maps to exactly one principal type, built by one resolver. A role
without a registered resolver is an error rather than a silent fallthrough.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from fastapi import Depends
from sqlalchemy import update
from sqlalchemy.orm import Session
import logging

from app.core.errors import NotFound
from app.core.security.auth import (
    admin_required, evaluator_required, faculty_required, team_required,
)
from app.db.session import get_db
from app.models.evaluator import Evaluator
from app.models.faculty import Faculty
from app.models.team import Team
from app.models.user import User, RoleType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminPrincipal:
    user_id: int


@dataclass(frozen=True)
class FacultyPrincipal:
    user_id: int
    faculty_id: Optional[int]


@dataclass(frozen=True)
class TeamPrincipal:
    user_id: int
    team_id: Optional[int]


@dataclass(frozen=True)
class EvaluatorPrincipal:
    user_id: int
    evaluator_id: Optional[int]


Principal = Union[AdminPrincipal, FacultyPrincipal, TeamPrincipal, EvaluatorPrincipal]


def link_faculty_profile(db: Session, user: User) -> Optional[int]:
    """
    Link an unlinked faculty user to the Faculty row sharing its email.

    The link is a single conditional UPDATE guarded by ``faculty_id IS NULL``,
    so concurrent logins for the same user cannot overwrite each other.
    """
    if user.faculty_id is not None:
        return user.faculty_id

    faculty = db.query(Faculty).filter(Faculty.email == user.email).first()
    if not faculty:
        return None

    result = db.execute(
        update(User)
        .where(User.id == user.id, User.faculty_id.is_(None))
        .values(faculty_id=faculty.id)
    )
    db.commit()
    db.refresh(user)
    if result.rowcount:
        logger.info("Linked faculty profile %s to user %s", faculty.id, user.id)
    return user.faculty_id


def _resolve_admin(db: Session, user: User) -> AdminPrincipal:
    return AdminPrincipal(user_id=user.id)

def _resolve_faculty(db: Session, user: User) -> FacultyPrincipal:
    # Linking happens at login; requests only read the link
    return FacultyPrincipal(user_id=user.id, faculty_id=user.faculty_id)

def _resolve_team(db: Session, user: User) -> TeamPrincipal:
    team = db.query(Team).filter(Team.user_id == user.id).first()
    return TeamPrincipal(user_id=user.id, team_id=team.id if team else None)

def _resolve_evaluator(db: Session, user: User) -> EvaluatorPrincipal:
    evaluator = db.query(Evaluator).filter(Evaluator.user_id == user.id).first()
    return EvaluatorPrincipal(user_id=user.id, evaluator_id=evaluator.id if evaluator else None)


RESOLVERS: Dict[RoleType, Callable[[Session, User], Principal]] = {
    RoleType.ADMIN: _resolve_admin,
    RoleType.FACULTY: _resolve_faculty,
    RoleType.TEAM: _resolve_team,
    RoleType.EVALUATOR: _resolve_evaluator,
}


def resolve_principal(db: Session, user: User) -> Principal:
    try:
        resolver = RESOLVERS[user.role]
    except KeyError:
        raise LookupError(f"No principal resolver registered for role {user.role!r}")
    return resolver(db, user)


# Route dependencies, one per variant

def current_admin(
    user: User = Depends(admin_required), db: Session = Depends(get_db)
) -> AdminPrincipal:
    return resolve_principal(db, user)

def current_evaluator(
    user: User = Depends(evaluator_required), db: Session = Depends(get_db)
) -> EvaluatorPrincipal:
    principal = resolve_principal(db, user)
    if principal.evaluator_id is None:
        raise NotFound("No evaluator profile is linked to this account")
    return principal

def current_team(
    user: User = Depends(team_required), db: Session = Depends(get_db)
) -> TeamPrincipal:
    principal = resolve_principal(db, user)
    if principal.team_id is None:
        raise NotFound("No team is linked to this account")
    return principal

def current_faculty(
    user: User = Depends(faculty_required), db: Session = Depends(get_db)
) -> FacultyPrincipal:
    principal = resolve_principal(db, user)
    if principal.faculty_id is None:
        raise NotFound("No faculty profile is linked to this account")
    return principal
