from fastapi.testclient import TestClient

from portal.main import create_app
from portal.repository import MemoryRepository


def _login(client, email, password):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _admin(client):
    return _login(client, "admin@webstudio.com", "admin123")


def _manager(client):
    return _login(client, "manager@webstudio.com", "manager123")


def _client(client):
    return _login(client, "client@example.com", "client123")


def test_health(client, repository):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["storage"] == repository.backend_name


def test_login_me_logout(client):
    headers = _client(client)

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "client@example.com"
    assert "password_hash" not in me.json()

    assert client.post("/api/auth/logout", headers=headers).status_code == 204
    after = client.get("/api/auth/me", headers=headers)
    assert after.status_code == 401
    assert after.json() == {"detail": "Not authenticated"}


def test_missing_or_garbage_token_is_401(client):
    assert client.get("/api/projects").status_code == 401
    assert client.get("/api/projects", headers={"Authorization": "Bearer nope"}).status_code == 401
    assert client.post("/api/auth/logout").status_code == 401


def test_bad_credentials_give_one_generic_error(client):
    wrong = client.post("/api/auth/login", json={"email": "client@example.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"detail": "Invalid email or password"}


def test_register_then_duplicate_is_409(client):
    payload = {"email": "new@example.com", "password": "password1", "first_name": "New", "last_name": "Client"}
    created = client.post("/api/auth/register", json=payload)
    assert created.status_code == 201
    assert created.json()["role"] == "client"

    duplicate = client.post("/api/auth/register", json={**payload, "email": "NEW@example.com"})
    assert duplicate.status_code == 409


def test_validation_errors_are_structured(client):
    response = client.post("/api/auth/register", json={"email": "nope"})
    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Invalid data"
    assert {"email", "password", "first_name", "last_name"} <= {error["field"] for error in body["errors"]}


def test_password_reset_is_generic(client):
    known = client.post("/api/auth/password-reset", json={"email": "client@example.com"})
    unknown = client.post("/api/auth/password-reset", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json() == {"message": "If the email exists, a reset link has been sent"}


def test_project_access_scenario(client):
    project = client.post(
        "/api/projects",
        json={"name": "P1", "start_date": "2024-01-01T00:00:00"},
        headers=_client(client),
    )
    assert project.status_code == 201
    project_id = project.json()["id"]

    assert client.get(f"/api/projects/{project_id}", headers=_manager(client)).status_code == 403
    admin_view = client.get(f"/api/projects/{project_id}", headers=_admin(client))
    assert admin_view.status_code == 200
    assert admin_view.json()["name"] == "P1"
    assert client.get("/api/projects/999", headers=_admin(client)).status_code == 404


def test_task_comment_flow(client):
    admin = _admin(client)
    owner = _client(client)
    client_id = client.get("/api/auth/me", headers=owner).json()["id"]
    project_id = client.post(
        "/api/projects",
        json={"name": "Shop", "start_date": "2024-01-01T00:00:00", "client_id": client_id},
        headers=admin,
    ).json()["id"]

    task = client.post("/api/tasks", json={"title": "Checkout", "project_id": project_id}, headers=owner)
    assert task.status_code == 201
    task_id = task.json()["id"]

    comment = client.post(f"/api/tasks/{task_id}/comments", json={"content": "Ship it"}, headers=owner)
    assert comment.status_code == 201
    assert client.get(f"/api/tasks/{task_id}", headers=owner).json()["comment_count"] == 1
    assert client.get(f"/api/tasks/{task_id}", headers=_manager(client)).status_code == 403

    feed = client.get("/api/activities", headers=owner).json()
    assert [entry["action_type"] for entry in feed] == ["comment_added", "task_created", "project_created"]
    assert feed[0]["metadata"] == {"task_id": task_id}


def test_message_flow(client):
    manager = _manager(client)
    manager_id = client.get("/api/auth/me", headers=manager).json()["id"]
    owner = _client(client)

    sent = client.post("/api/messages", json={"receiver_id": manager_id, "content": "Hi"}, headers=owner)
    assert sent.status_code == 201
    message_id = sent.json()["id"]

    assert client.post(f"/api/messages/{message_id}/read", headers=owner).status_code == 403
    read = client.post(f"/api/messages/{message_id}/read", headers=manager)
    assert read.json()["is_read"] is True
    assert client.get("/api/messages", headers=manager).json()[0]["is_read"] is True


def test_admin_user_management(client):
    admin = _admin(client)
    assert client.get("/api/users", headers=_client(client)).status_code == 403

    created = client.post(
        "/api/users",
        json={"email": "pm@example.com", "password": "password1", "first_name": "P", "last_name": "M", "role": "manager"},
        headers=admin,
    )
    assert created.status_code == 201
    user_id = created.json()["id"]

    managers = client.get("/api/users", params={"role": "manager"}, headers=admin).json()
    assert {user["email"] for user in managers} == {"manager@webstudio.com", "pm@example.com"}

    admin_id = client.get("/api/auth/me", headers=admin).json()["id"]
    assert client.delete(f"/api/users/{admin_id}", headers=admin).status_code == 403
    assert client.delete(f"/api/users/{user_id}", headers=admin).status_code == 204
    assert client.delete(f"/api/users/{user_id}", headers=admin).status_code == 404


def test_change_password_endpoint(client):
    owner = _client(client)
    wrong = client.post(
        "/api/auth/change-password",
        json={"current_password": "nope", "new_password": "another1"},
        headers=owner,
    )
    assert wrong.status_code == 422
    assert wrong.json()["errors"][0]["field"] == "current_password"

    ok = client.post(
        "/api/auth/change-password",
        json={"current_password": "client123", "new_password": "another1"},
        headers=owner,
    )
    assert ok.status_code == 200
    _login(client, "client@example.com", "another1")


def test_finance_and_support_endpoints(client):
    owner = _client(client)
    document = client.post(
        "/api/finance-documents",
        json={"type": "invoice", "name": "INV-7", "path": "/inv/7.pdf", "amount": 500},
        headers=owner,
    )
    assert document.status_code == 201
    assert client.get("/api/finance-documents", headers=_manager(client)).json() == []

    ticket = client.post(
        "/api/support-tickets", json={"title": "Bug", "description": "Broken form"}, headers=owner
    ).json()
    manager = _manager(client)
    closed = client.patch(f"/api/support-tickets/{ticket['id']}", json={"status": "closed"}, headers=manager)
    assert closed.status_code == 200
    assert closed.json()["closed_at"] is not None
    reopened = client.patch(f"/api/support-tickets/{ticket['id']}", json={"status": "open"}, headers=manager)
    assert reopened.status_code == 422
    assert [t["status"] for t in client.get("/api/support-tickets", params={"status": "closed"}, headers=owner).json()] == [
        "closed"
    ]


def test_create_app_builds_its_own_repository(settings):
    app = create_app(settings=settings.model_copy(update={"SEED_DEMO_USERS": True}))
    assert isinstance(app.state.repository, MemoryRepository)
    with TestClient(app) as test_client:
        assert test_client.post(
            "/api/auth/login", json={"email": "admin@webstudio.com", "password": "admin123"}
        ).status_code == 200
