import itertools

import pytest
from fastapi.testclient import TestClient

from main import create_app
from taskman.config.settings import Settings
from taskman.database import Database
from taskman.services.auth_service import AuthService

API = "/api"
PASSWORD = "secret123"
SECRET_KEY = "test-secret"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        secret_key=SECRET_KEY,
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def database(settings):
    database = Database(settings)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(settings, database):
    app = create_app(settings, database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(database, settings):
    """Register a user straight through the auth service and hand back its token"""
    counter = itertools.count(1)

    def _make_user(role="employee", department="Other", name=None, password=PASSWORD):
        n = next(counter)
        session = database.session()
        try:
            service = AuthService(session, settings)
            user = service.register(
                name=name or f"{role.title()} {n}",
                email=f"{role}{n}@example.com",
                password=password,
                department=department,
                role=role,
            )
            token = service.issue_token(user)
            return {
                "id": user.id,
                "email": user.email,
                "role": user.role,
                "token": token,
                "headers": {"Authorization": f"Bearer {token}"},
            }
        finally:
            session.close()

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("admin", department="Administration")


@pytest.fixture
def employee(make_user):
    return make_user("employee")


@pytest.fixture
def create_project(client, admin):
    def _create_project(manager_id, team=None, name="Website Redesign", **overrides):
        payload = {
            "name": name,
            "description": "Rebuild the marketing site",
            "client": {"name": "Acme Corp", "email": "contact@acme.example.com", "phone": "555-0100"},
            "start_date": "2026-01-05T09:00:00",
            "end_date": "2026-03-30T17:00:00",
            "budget": 12000,
            "project_manager_id": manager_id,
            "team": team or [],
        }
        payload.update(overrides)
        response = client.post(f"{API}/projects", json=payload, headers=admin["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create_project


@pytest.fixture
def create_task(client, admin):
    def _create_task(project_id, assigned_to=None, title="Draft homepage copy", **overrides):
        payload = {
            "title": title,
            "description": "First pass at the hero section",
            "project_id": project_id,
            "assigned_to": assigned_to,
            "priority": "high",
            "due_date": "2026-02-01T12:00:00",
        }
        payload.update(overrides)
        response = client.post(f"{API}/tasks", json=payload, headers=admin["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create_task
