import logging
from datetime import datetime

import pytest

from app.models import Task, Team, User, UserRole
from app.services.user_service import UserService
from app.utils.errors import Conflict, NotFound, ValidationError


def test_create_user_requires_unique_email(db, make_user):
    make_user(email="taken@company.com")

    with pytest.raises(Conflict):
        UserService(db).create_user("Dup", "taken@company.com", password="pw")


def test_create_user_with_unknown_team(db):
    with pytest.raises(NotFound):
        UserService(db).create_user("New", "new@company.com", password="pw", team_id=404)


def test_self_update_only_touches_name_and_email(db, make_user, make_team):
    team = make_team("Engineering")
    user = make_user(role=UserRole.EMPLOYEE)

    updated = UserService(db).update_self(
        user.id, {"name": "Renamed", "role": UserRole.ADMIN, "team_id": team.id}
    )

    assert updated.name == "Renamed"
    assert updated.role == UserRole.EMPLOYEE
    assert updated.team_id is None


def test_self_update_with_nothing_allowed_is_rejected(db, make_user):
    user = make_user()

    with pytest.raises(ValidationError):
        UserService(db).update_self(user.id, {"role": UserRole.ADMIN})


def test_email_change_revalidates_uniqueness_excluding_self(db, make_user):
    user = make_user(email="me@company.com")
    make_user(email="other@company.com")
    service = UserService(db)

    assert service.update_self(user.id, {"email": "me@company.com"}).email == "me@company.com"
    with pytest.raises(Conflict):
        service.update_self(user.id, {"email": "other@company.com"})


def test_admin_update_accepts_any_field(db, make_user, make_team):
    team = make_team("Engineering")
    user = make_user()

    updated = UserService(db).update_user(
        user.id, {"role": UserRole.MANAGER, "team_id": team.id, "password": "new-password"}
    )

    assert updated.role == UserRole.MANAGER
    assert updated.team_id == team.id
    assert UserService(db).get_user(user.id).hashed_password != "new-password"


def test_delete_user_nulls_every_reference(db, make_user, make_team, make_task):
    manager = make_user(role=UserRole.MANAGER)
    team = make_team("Engineering", lead=manager)
    worker = make_user(team=team)
    assigned = make_task(team, creator=manager, assignee=worker)
    created = make_task(team, creator=manager)
    ids = (manager.id, team.id, assigned.id, created.id)

    UserService(db).delete_user(manager.id)

    assert db.get(User, ids[0]) is None
    assert db.get(Team, ids[1]).lead_id is None
    assert db.get(Task, ids[2]).assigned_by is None
    assert db.get(Task, ids[2]).assigned_to == worker.id
    assert db.get(Task, ids[3]).assigned_by is None


def test_delete_assignee_unassigns_tasks(db, make_user, make_team, make_task):
    manager = make_user(role=UserRole.MANAGER)
    team = make_team("Engineering")
    worker = make_user(team=team)
    task = make_task(team, creator=manager, assignee=worker)

    UserService(db).delete_user(worker.id)

    assert db.get(Task, task.id).assigned_to is None


def test_delete_missing_user(db):
    with pytest.raises(NotFound):
        UserService(db).delete_user(404)


# HTTP surface

def test_requests_without_cookie_are_unauthenticated(client_for):
    response = client_for().get("/users/me")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "No token found"}


def test_list_users_is_admin_only_and_hides_admins(client_for, make_user):
    admin = make_user(role=UserRole.ADMIN)
    employee = make_user(role=UserRole.EMPLOYEE)
    manager = make_user(role=UserRole.MANAGER)

    response = client_for(admin).get("/users/")
    denied = client_for(manager).get("/users/")

    assert response.status_code == 200
    assert [u["id"] for u in response.json()["data"]] == [employee.id, manager.id]
    assert denied.status_code == 403
    assert denied.json() == {"success": False, "error": "Access denied"}


def test_admin_creates_user(client_for, make_user):
    admin = make_user(role=UserRole.ADMIN)
    client = client_for(admin)
    payload = {"name": "Dana", "email": "dana@company.com", "password": "pw123456", "role": "manager"}

    created = client.post("/users/", json=payload)
    duplicate = client.post("/users/", json=payload)

    assert created.status_code == 201
    assert created.json()["data"]["role"] == "manager"
    assert duplicate.status_code == 409


def test_me_returns_profile_with_tasks_by_due_date(client_for, make_user, make_team, make_task):
    manager = make_user(role=UserRole.MANAGER)
    team = make_team("Engineering")
    worker = make_user(team=team)
    undated = make_task(team, manager, assignee=worker, title="Undated")
    later = make_task(team, manager, assignee=worker, title="Later", due_date=datetime(2030, 5, 1))
    sooner = make_task(team, manager, assignee=worker, title="Sooner", due_date=datetime(2030, 1, 1))

    body = client_for(worker).get("/users/me").json()

    assert body["data"]["team"]["name"] == "Engineering"
    assert [t["id"] for t in body["data"]["assigned_tasks"]] == [sooner.id, later.id, undated.id]


def test_put_me_drops_role(client_for, make_user):
    user = make_user(role=UserRole.EMPLOYEE)

    response = client_for(user).put("/users/me", json={"name": "New Name", "role": "admin"})

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "New Name"
    assert response.json()["data"]["role"] == "employee"


def test_put_me_without_fields_is_400(client_for, make_user):
    response = client_for(make_user()).put("/users/me", json={"role": "admin"})

    assert response.status_code == 400
    assert response.json()["error"] == "No valid fields to update"


def test_get_user_is_self_or_privileged(client_for, make_user):
    me = make_user()
    other = make_user()
    manager = make_user(role=UserRole.MANAGER)

    assert client_for(me).get(f"/users/{me.id}").status_code == 200
    assert client_for(me).get(f"/users/{other.id}").status_code == 403
    assert client_for(manager).get(f"/users/{other.id}").status_code == 200
    assert client_for(manager).get("/users/404").status_code == 404


def test_only_admin_updates_and_deletes_users(client_for, make_user):
    admin = make_user(role=UserRole.ADMIN)
    manager = make_user(role=UserRole.MANAGER)
    target = make_user()

    assert client_for(manager).put(f"/users/{target.id}", json={"role": "manager"}).status_code == 403
    assert client_for(manager).delete(f"/users/{target.id}").status_code == 403

    updated = client_for(admin).put(f"/users/{target.id}", json={"role": "manager"})
    deleted = client_for(admin).delete(f"/users/{target.id}")

    assert updated.json()["data"]["role"] == "manager"
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "User deleted successfully"


def test_user_mutations_log_the_acting_admin(client_for, make_user, caplog):
    admin = make_user(role=UserRole.ADMIN)
    target = make_user()
    client = client_for(admin)
    caplog.set_level(logging.INFO, logger="app.services.user_service")

    client.put(f"/users/{target.id}", json={"name": "Renamed"})
    client.delete(f"/users/{target.id}")

    assert f"User {target.id} updated by user {admin.id}: ['name']" in caplog.text
    assert f"User {target.id} deleted by user {admin.id}" in caplog.text
