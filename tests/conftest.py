from __future__ import annotations

import os
import tempfile

# Settings are cached on first use, so point them at scratch locations first
_scratch = tempfile.mkdtemp(prefix="event-eval-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_scratch, 'bootstrap.db')}")
os.environ.setdefault("LOG_DIR", os.path.join(_scratch, "logs"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.core.security.auth import generate_token, get_password_hash
from app.db.base import Base
from app.db.session import get_db
from app.models.evaluation import Evaluation, EvaluationStatus
from app.models.evaluator import Evaluator, EvaluatorAssignment
from app.models.faculty import Faculty
from app.models.team import Team
from app.models.user import User, RoleType
from app.services.criteria import criteria_keys

PASSWORD = "secret123"
_password_hash = None


def password_hash() -> str:
    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(PASSWORD)
    return _password_hash


def full_scores(value=8, **overrides):
    scores = {key: value for key in criteria_keys()}
    scores.update(overrides)
    return scores


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def enforce_foreign_keys(engine):
    """SQLite skips foreign key checks unless each connection opts in."""
    event.listen(engine, "connect", _enable_foreign_keys)
    # Drop pooled connections opened before the listener existed
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory) -> TestClient:
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


class Factory:
    """Creates directory rows straight through the session."""

    def __init__(self, db):
        self.db = db
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def user(self, role: RoleType, email=None, name=None, faculty_id=None) -> User:
        n = self._next()
        user = User(
            name=name or f"{role.value} {n}",
            email=email or f"{role.value}{n}@example.com",
            role=role,
            hashed_password=password_hash(),
            faculty_id=faculty_id,
        )
        self.db.add(user)
        self.db.commit()
        return user

    def admin(self) -> User:
        return self.user(RoleType.ADMIN)

    def faculty(self, email=None, link=True):
        n = self._next()
        profile = Faculty(
            name=f"Prof {n}",
            email=email or f"prof{n}@example.com",
            department="Computer Science",
        )
        self.db.add(profile)
        self.db.commit()
        user = self.user(
            RoleType.FACULTY,
            email=profile.email,
            faculty_id=profile.id if link else None,
        )
        return profile, user

    def team(self, name=None, category="general", faculty=None, with_user=True, **extra) -> Team:
        n = self._next()
        user = self.user(RoleType.TEAM) if with_user else None
        team = Team(
            name=name or f"Team {n}",
            category=category,
            leader_name=f"Leader {n}",
            leader_email=f"leader{n}@example.com",
            username=f"team_{n}",
            hashed_password="not-used",
            faculty_id=faculty.id if faculty else None,
            user_id=user.id if user else None,
            **extra,
        )
        self.db.add(team)
        self.db.commit()
        return team

    def evaluator(self, email=None) -> Evaluator:
        user = self.user(RoleType.EVALUATOR, email=email)
        evaluator = Evaluator(user_id=user.id, name=user.name, email=user.email)
        self.db.add(evaluator)
        self.db.commit()
        return evaluator

    def assign(self, evaluator: Evaluator, *teams: Team) -> None:
        for team in teams:
            self.db.add(EvaluatorAssignment(evaluator_id=evaluator.id, team_id=team.id))
        self.db.commit()

    def raw_evaluation(self, evaluator: Evaluator, team: Team, scores, status=EvaluationStatus.SUBMITTED) -> Evaluation:
        """Bypasses validation, as admin tooling would."""
        evaluation = Evaluation(
            team_id=team.id,
            evaluator_id=evaluator.id,
            scores=scores,
            comments="",
            status=status,
        )
        self.db.add(evaluation)
        self.db.commit()
        return evaluation


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {generate_token(user)}"}
