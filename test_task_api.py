import pytest

from conftest import API
from taskman.models.task import Task, TaskComment

STATUSES = ["pending", "in-progress", "completed", "on-hold"]
NON_ADMIN_ROLES = [
    ("designer", "Design"),
    ("project_manager", "Project Management"),
    ("sales_representative", "Sales"),
    ("employee", "Other"),
]


@pytest.fixture
def project(admin, create_project):
    return create_project(admin["id"])


def test_only_admin_creates_tasks(client, employee, project, create_task):
    payload = {"title": "Sneaky", "description": "Not allowed", "project_id": project["id"]}
    assert client.post(f"{API}/tasks", json=payload, headers=employee["headers"]).status_code == 403

    task = create_task(project["id"], assigned_to=employee["id"])
    assert task["status"] == "pending"
    assert task["priority"] == "high"
    assert task["project"] == {"id": project["id"], "name": project["name"]}
    assert task["assignee"]["id"] == employee["id"]
    assert task["creator"]["email"].startswith("admin")
    assert task["comments"] == []


def test_create_task_checks_references(client, admin, project):
    missing_project = {"title": "Orphan", "description": "No project", "project_id": 999}
    response = client.post(f"{API}/tasks", json=missing_project, headers=admin["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"

    missing_user = {"title": "Ghost", "description": "No assignee", "project_id": project["id"], "assigned_to": 999}
    response = client.post(f"{API}/tasks", json=missing_user, headers=admin["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Assigned user not found"


def test_create_task_rejects_unknown_priority(client, admin, project):
    payload = {"title": "Odd", "description": "Bad priority", "project_id": project["id"], "priority": "critical"}

    response = client.post(f"{API}/tasks", json=payload, headers=admin["headers"])

    assert response.status_code == 400


@pytest.mark.parametrize("role, department", NON_ADMIN_ROLES)
def test_assignee_can_set_every_status(client, make_user, project, create_task, role, department):
    assignee = make_user(role, department=department)
    task = create_task(project["id"], assigned_to=assignee["id"])

    for status in STATUSES + ["pending"]:
        response = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": status}, headers=assignee["headers"])
        assert response.status_code == 200, response.text
        assert response.json()["status"] == status


@pytest.mark.parametrize("role, department", NON_ADMIN_ROLES)
def test_non_assignee_cannot_change_status(client, make_user, employee, project, create_task, role, department):
    actor = make_user(role, department=department)
    task = create_task(project["id"], assigned_to=employee["id"])

    response = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": "completed"}, headers=actor["headers"])

    assert response.status_code == 403
    assert response.json()["message"] == "You are not authorized to update this task status"
    assert client.get(f"{API}/tasks/{task['id']}", headers=actor["headers"]).json()["status"] == "pending"


def test_unassigned_task_status_is_admin_only(client, admin, employee, project, create_task):
    task = create_task(project["id"])

    denied = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": "on-hold"}, headers=employee["headers"])
    assert denied.status_code == 403

    allowed = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": "on-hold"}, headers=admin["headers"])
    assert allowed.status_code == 200
    assert allowed.json()["status"] == "on-hold"


def test_any_status_can_follow_any_other(client, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"], status="completed")

    response = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": "pending"}, headers=employee["headers"])

    assert response.status_code == 200
    assert response.json()["status"] == "pending"


def test_invalid_status_is_rejected_before_any_write(client, employee, project, create_task, db_session):
    task = create_task(project["id"], assigned_to=employee["id"])

    response = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": "done"}, headers=employee["headers"])

    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid status value")
    stored = db_session.query(Task).filter(Task.id == task["id"]).one()
    assert stored.status == "pending"


def test_invalid_status_wins_over_missing_task(client, employee):
    response = client.patch(f"{API}/tasks/999/status", json={"status": "done"}, headers=employee["headers"])

    assert response.status_code == 400


def test_missing_status(client, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])

    response = client.patch(f"{API}/tasks/{task['id']}/status", json={}, headers=employee["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "Status is required"


def test_same_status_is_idempotent(client, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])

    response = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": "pending"}, headers=employee["headers"])

    assert response.status_code == 200
    assert response.json()["status"] == "pending"
    assert response.json()["updated_at"] == task["updated_at"]


def test_status_response_is_populated(client, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])
    client.post(f"{API}/tasks/{task['id']}/comments", json={"text": "Starting now"}, headers=employee["headers"])

    response = client.patch(f"{API}/tasks/{task['id']}/status", json={"status": "in-progress"}, headers=employee["headers"])

    body = response.json()
    assert body["project"]["name"] == project["name"]
    assert body["assignee"]["id"] == employee["id"]
    assert body["creator"] is not None
    assert body["comments"][0]["author"]["id"] == employee["id"]


def test_status_of_missing_task(client, admin):
    response = client.patch(f"{API}/tasks/999/status", json={"status": "completed"}, headers=admin["headers"])

    assert response.status_code == 404
    assert response.json()["message"] == "Task not found"


def test_any_user_can_comment(client, make_user, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])
    bystander = make_user("sales_representative", department="Sales")

    first = client.post(f"{API}/tasks/{task['id']}/comments", json={"text": "Client asked for blue"}, headers=bystander["headers"])
    second = client.post(f"{API}/tasks/{task['id']}/comments", json={"text": "Noted"}, headers=employee["headers"])

    assert first.status_code == 200
    comments = second.json()["comments"]
    assert [c["text"] for c in comments] == ["Client asked for blue", "Noted"]
    assert [c["posted_by"] for c in comments] == [bystander["id"], employee["id"]]


def test_empty_comment_is_rejected(client, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])

    response = client.post(f"{API}/tasks/{task['id']}/comments", json={"text": "   "}, headers=employee["headers"])

    assert response.status_code == 400


def test_assigned_to_me_lists_only_own_tasks(client, make_user, employee, project, create_task):
    other = make_user("employee")
    mine = create_task(project["id"], assigned_to=employee["id"], title="Mine")
    create_task(project["id"], assigned_to=other["id"], title="Theirs")
    create_task(project["id"], title="Nobody's")

    response = client.get(f"{API}/tasks/assigned-to-me", headers=employee["headers"])

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [mine["id"]]


def test_full_task_list_only_needs_authentication(client, employee, project, create_task):
    create_task(project["id"], title="One")
    create_task(project["id"], title="Two")

    assert client.get(f"{API}/tasks").status_code == 401

    response = client.get(f"{API}/tasks", headers=employee["headers"])
    assert response.status_code == 200
    assert len(response.json()) == 2


def test_full_update_is_admin_only(client, admin, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])

    denied = client.put(f"{API}/tasks/{task['id']}", json={"title": "Renamed"}, headers=employee["headers"])
    assert denied.status_code == 403

    response = client.put(
        f"{API}/tasks/{task['id']}",
        json={"title": "Renamed", "priority": "urgent", "assigned_to": None},
        headers=admin["headers"],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Renamed"
    assert body["priority"] == "urgent"
    assert body["assignee"] is None
    assert body["description"] == task["description"]


def test_update_rejects_unknown_fields(client, admin, project, create_task):
    task = create_task(project["id"])

    response = client.put(f"{API}/tasks/{task['id']}", json={"created_by": 1}, headers=admin["headers"])

    assert response.status_code == 400


def test_delete_task_is_admin_only(client, admin, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])

    assert client.delete(f"{API}/tasks/{task['id']}", headers=employee["headers"]).status_code == 403

    response = client.delete(f"{API}/tasks/{task['id']}", headers=admin["headers"])
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}
    assert client.get(f"{API}/tasks/{task['id']}", headers=admin["headers"]).status_code == 404


@pytest.mark.parametrize("column", [
    Task.__table__.c.due_date,
    Task.__table__.c.created_at,
    Task.__table__.c.updated_at,
    TaskComment.__table__.c.created_at,
])
def test_task_timestamps_are_timezone_aware(column):
    assert column.type.timezone is True


def test_new_task_and_comment_carry_timestamps(client, employee, project, create_task):
    task = create_task(project["id"], assigned_to=employee["id"])
    assert task["created_at"] is not None
    assert task["updated_at"] is not None

    response = client.post(f"{API}/tasks/{task['id']}/comments", json={"text": "On it"}, headers=employee["headers"])

    assert response.json()["comments"][0]["created_at"] is not None
