import pytest

from app.models.evaluator import EvaluatorAssignment
from app.models.launch import Launch
from app.models.release import ReleaseGate
from app.models.user import User, RoleType
from app.services import release_gate
from conftest import auth_headers, full_scores

API = "/api/admin"


@pytest.fixture
def admin_headers(factory):
    return auth_headers(factory.admin())


def test_admin_routes_refuse_other_roles(client, factory):
    evaluator = factory.evaluator()
    response = client.get(f"{API}/dashboard", headers=auth_headers(evaluator.user))
    assert response.status_code == 403


def test_create_team_issues_credentials(client, admin_headers, factory, db):
    profile, _ = factory.faculty()
    response = client.post(
        f"{API}/teams",
        json={
            "name": "Nebula",
            "leader_name": "Ada",
            "leader_email": "ada@example.com",
            "faculty_id": profile.id,
            "poster_url": "https://cdn.example.com/nebula.png",
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["team"]["category"] == "general"
    assert body["team"]["faculty_id"] == profile.id
    assert body["credentials"]["username"].startswith("nebula_")
    assert len(body["credentials"]["password"]) == 10

    team_user = db.query(User).filter(User.id == body["team"]["user_id"]).one()
    assert team_user.role == RoleType.TEAM
    login = client.post(
        "/api/auth/login",
        json={"email": "ada@example.com", "password": body["login"]["password"], "role": "team"},
    )
    assert login.status_code == 200


def test_create_team_duplicate_name(client, admin_headers, factory):
    factory.team(name="Nova")
    response = client.post(
        f"{API}/teams",
        json={"name": "Nova", "leader_name": "B", "leader_email": "b@example.com"},
        headers=admin_headers,
    )
    assert response.status_code == 409


def test_create_team_unknown_faculty(client, admin_headers):
    response = client.post(
        f"{API}/teams",
        json={"name": "Orbit", "leader_name": "C", "leader_email": "c@example.com", "faculty_id": 99},
        headers=admin_headers,
    )
    assert response.status_code == 404


def test_list_and_update_teams(client, admin_headers, factory):
    factory.team(name="Alpha", category="finals")
    beta = factory.team(name="Beta")

    listing = client.get(f"{API}/teams", params={"category": "finals"}, headers=admin_headers).json()
    assert [t["name"] for t in listing["items"]] == ["Alpha"]
    assert listing["pagination"]["total_items"] == 1

    response = client.put(
        f"{API}/teams/{beta.id}", json={"category": "finals"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["category"] == "finals"


@pytest.mark.parametrize("field", ["name", "category", "leader_name", "leader_email"])
def test_update_team_refuses_clearing_required_fields(client, admin_headers, factory, field):
    team = factory.team()
    response = client.put(f"{API}/teams/{team.id}", json={field: None}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"
    assert field in response.json()["message"]


def test_update_team_name_is_stripped_and_non_empty(client, admin_headers, factory):
    team = factory.team()

    blank = client.put(f"{API}/teams/{team.id}", json={"name": "   "}, headers=admin_headers)
    assert blank.status_code == 422

    renamed = client.put(f"{API}/teams/{team.id}", json={"name": " Comet "}, headers=admin_headers)
    assert renamed.json()["name"] == "Comet"


def test_delete_team_with_evaluations_conflicts(client, admin_headers, factory):
    team = factory.team()
    factory.raw_evaluation(factory.evaluator(), team, full_scores())

    response = client.delete(f"{API}/teams/{team.id}", headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"


def test_delete_team_removes_assignments_and_login(client, admin_headers, factory, db):
    team = factory.team()
    evaluator = factory.evaluator()
    factory.assign(evaluator, team)
    user_id = team.user_id

    response = client.delete(f"{API}/teams/{team.id}", headers=admin_headers)

    assert response.status_code == 200
    assert db.query(EvaluatorAssignment).count() == 0
    assert db.query(User).filter(User.id == user_id).first() is None


def test_faculty_crud(client, admin_headers, factory, db):
    response = client.post(
        f"{API}/faculty",
        json={"name": "Dr. Grace", "email": "grace@example.com", "department": "EE"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    faculty_id = response.json()["faculty"]["id"]

    duplicate = client.post(
        f"{API}/faculty", json={"name": "Again", "email": "grace@example.com"}, headers=admin_headers
    )
    assert duplicate.status_code == 409

    updated = client.put(
        f"{API}/faculty/{faculty_id}", json={"designation": "Professor"}, headers=admin_headers
    )
    assert updated.json()["designation"] == "Professor"

    team = factory.team()
    client.put(f"{API}/teams/{team.id}", json={"faculty_id": faculty_id}, headers=admin_headers)

    assert client.delete(f"{API}/faculty/{faculty_id}", headers=admin_headers).status_code == 200
    db.refresh(team)
    assert team.faculty_id is None
    assert db.query(User).filter(User.role == RoleType.FACULTY).count() == 0


def test_evaluator_can_share_faculty_email(client, admin_headers, factory):
    factory.faculty(email="turing@example.com")

    response = client.post(
        f"{API}/evaluators",
        json={"name": "Alan", "email": "turing@example.com", "expertise": "AI"},
        headers=admin_headers,
    )
    assert response.status_code == 201

    again = client.post(
        f"{API}/evaluators", json={"name": "Alan", "email": "turing@example.com"}, headers=admin_headers
    )
    assert again.status_code == 409


def test_assign_and_unassign_teams(client, admin_headers, factory):
    evaluator = factory.evaluator()
    t1, t2 = factory.team(), factory.team()

    response = client.post(
        f"{API}/evaluators/{evaluator.id}/assign-teams",
        json={"team_ids": [t1.id, t2.id]},
        headers=admin_headers,
    )
    assert response.json()["team_ids"] == [t1.id, t2.id]

    missing = client.post(
        f"{API}/evaluators/{evaluator.id}/assign-teams",
        json={"team_ids": [t1.id, 404]},
        headers=admin_headers,
    )
    assert missing.status_code == 404
    assert missing.json()["kind"] == "not_found"

    response = client.delete(f"{API}/evaluators/{evaluator.id}/teams/{t1.id}", headers=admin_headers)
    assert response.json() == {"removed": True, "evaluator_id": evaluator.id, "team_ids": [t2.id]}

    listing = client.get(f"{API}/evaluators", headers=admin_headers).json()
    assert listing[0]["team_ids"] == [t2.id]


def test_evaluation_listings(client, admin_headers, factory):
    team = factory.team()
    factory.raw_evaluation(factory.evaluator(), team, full_scores(3))

    assert len(client.get(f"{API}/evaluations", headers=admin_headers).json()) == 1
    by_team = client.get(f"{API}/evaluations/team/{team.id}", headers=admin_headers).json()
    assert by_team[0]["scores"] == full_scores(3)
    assert client.get(f"{API}/evaluations/team/999", headers=admin_headers).status_code == 404


def test_user_management(client, factory):
    admin = factory.admin()
    headers = auth_headers(admin)
    evaluator = factory.evaluator()

    users = client.get(f"{API}/users", params={"role": "evaluator"}, headers=headers).json()
    assert [u["id"] for u in users] == [evaluator.user_id]

    renamed = client.put(f"{API}/users/{evaluator.user_id}", json={"name": "Renamed"}, headers=headers)
    assert renamed.json()["name"] == "Renamed"

    assert client.delete(f"{API}/users/{admin.id}", headers=headers).status_code == 409
    assert client.delete(f"{API}/users/{evaluator.user_id}", headers=headers).status_code == 200
    assert client.delete(f"{API}/users/{evaluator.user_id}", headers=headers).status_code == 404


def test_dashboard(client, admin_headers, factory):
    factory.team()
    stats = client.get(f"{API}/dashboard", headers=admin_headers).json()
    assert stats["stats"]["teams"] == 1
    assert stats["stats"]["active_launches"] == 0
    assert stats["release_gates"] == {}


def test_poster_launch_lifecycle(client, admin_headers, factory):
    team = factory.team(poster_url="https://cdn.example.com/p.png", project_title="Solar Kite")
    bare = factory.team()

    posters = client.get(f"{API}/poster-launch/posters", headers=admin_headers).json()
    assert [t["id"] for t in posters] == [team.id]

    refused = client.post(f"{API}/poster-launch/launch", json={"team_id": bare.id}, headers=admin_headers)
    assert refused.status_code == 400

    launched = client.post(
        f"{API}/poster-launch/launch",
        json={"team_id": team.id, "duration_minutes": 5},
        headers=admin_headers,
    )
    assert launched.status_code == 201
    launch = launched.json()
    assert launch["title"] == "Solar Kite"
    assert launch["kind"] == "poster"

    updated = client.put(
        f"{API}/poster-launch/launched/{launch['id']}", json={"duration_minutes": 10}, headers=admin_headers
    )
    assert updated.json()["duration_minutes"] == 10

    # Poster launches are not visible through the video routes
    assert client.delete(
        f"{API}/video-launch/launched/{launch['id']}", headers=admin_headers
    ).status_code == 404

    stopped = client.delete(f"{API}/poster-launch/launched/{launch['id']}", headers=admin_headers)
    assert stopped.json()["is_active"] is False
    assert client.get(f"{API}/poster-launch/launched", headers=admin_headers).json() == []


def test_reset_launches(client, admin_headers, factory):
    team = factory.team(poster_url="p.png", video_url="v.mp4")
    client.post(f"{API}/poster-launch/launch", json={"team_id": team.id}, headers=admin_headers)
    client.post(f"{API}/video-launch/launch", json={"team_id": team.id}, headers=admin_headers)

    response = client.delete(f"{API}/video-launch/reset-all", headers=admin_headers)
    assert response.json()["stopped"] == 1
    assert len(client.get(f"{API}/poster-launch/launched", headers=admin_headers).json()) == 1

    response = client.delete(f"{API}/reset-all-launches", headers=admin_headers)
    assert response.json()["stopped"] == 1
    assert client.get(f"{API}/poster-launch/launched", headers=admin_headers).json() == []


def test_delete_user_keeps_release_and_launch_history(enforce_foreign_keys, client, factory, db):
    headers = auth_headers(factory.admin())
    other = factory.admin()
    team = factory.team(poster_url="p.png")
    release_gate.release(db, "general", released_by=other.id)
    client.post(f"{API}/poster-launch/launch", json={"team_id": team.id}, headers=auth_headers(other))

    response = client.delete(f"{API}/users/{other.id}", headers=headers)

    assert response.status_code == 200
    db.expire_all()
    gate = db.query(ReleaseGate).filter(ReleaseGate.category == "general").one()
    assert gate.is_open is True
    assert gate.released_by is None
    assert db.query(Launch).one().launched_by is None


def test_deletes_succeed_with_foreign_keys_enforced(enforce_foreign_keys, client, factory, db):
    headers = auth_headers(factory.admin())
    profile, _ = factory.faculty()
    team = factory.team(faculty=profile)
    factory.assign(factory.evaluator(), team)

    assert client.delete(f"{API}/faculty/{profile.id}", headers=headers).status_code == 200
    assert client.delete(f"{API}/teams/{team.id}", headers=headers).status_code == 200
    db.expire_all()
    assert db.query(User).filter(User.role == RoleType.TEAM).count() == 0
