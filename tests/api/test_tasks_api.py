"""HTTP tests for task endpoints and ownership."""

from uuid import uuid4

import pytest

TASK = {"title": "T", "date": "2024-01-01", "time": "10:00", "status": "Pending"}


@pytest.fixture
def logged_in(register, login):
    register()
    assert login().status_code == 200


def test_end_to_end_scenario(client, register, login):
    """Register, log in, create a task and find it in the list."""
    assert register(email="a@b.com", password="Abcdef1!").status_code == 201
    assert login(email="a@b.com", password="Abcdef1!").status_code == 200

    created = client.post("/api/v1/tasks", json=TASK)
    assert created.status_code == 201
    task_id = created.json()["id"]

    listed = client.get("/api/v1/tasks")
    assert listed.status_code == 200
    tasks = listed.json()
    assert [task["id"] for task in tasks] == [task_id]
    assert tasks[0]["status"] == "Pending"
    assert tasks[0]["title"] == "T"
    assert tasks[0]["date"] == "2024-01-01"
    assert tasks[0]["time"] == "10:00"


class TestAuthRequired:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/v1/tasks"),
            ("POST", "/api/v1/tasks"),
            ("GET", f"/api/v1/tasks/{uuid4()}"),
            ("PUT", f"/api/v1/tasks/{uuid4()}"),
            ("DELETE", f"/api/v1/tasks/{uuid4()}"),
        ],
    )
    def test_rejected_without_session(self, client, method, path):
        response = client.request(method, path, json=TASK)
        assert response.status_code == 401


@pytest.mark.usefixtures("logged_in")
class TestCreateTask:
    def test_missing_fields(self, client):
        response = client.post("/api/v1/tasks", json={"title": "T"})

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_title_too_long(self, client):
        response = client.post("/api/v1/tasks", json={**TASK, "title": "x" * 51})
        assert response.status_code == 400

    def test_owner_taken_from_session(self, client, database):
        stranger = str(uuid4())

        client.post("/api/v1/tasks", json={**TASK, "ownerId": stranger, "owner_id": stranger})

        assert str(database["tasks"].documents[0]["owner_id"]) != stranger
        assert database["tasks"].documents[0]["owner_id"] == database["users"].documents[0]["_id"]

    def test_list_filtered_by_status(self, client):
        client.post("/api/v1/tasks", json=TASK)
        client.post("/api/v1/tasks", json={**TASK, "status": "Completed"})

        response = client.get("/api/v1/tasks", params={"status": "Completed"})

        assert [task["status"] for task in response.json()] == ["Completed"]


@pytest.mark.usefixtures("logged_in")
class TestUpdateTask:
    def test_update_own_task(self, client):
        task_id = client.post("/api/v1/tasks", json=TASK).json()["id"]

        response = client.put(f"/api/v1/tasks/{task_id}", json={**TASK, "status": "In-progress", "details": "Notes"})

        assert response.status_code == 200
        assert response.json()["status"] == "In-progress"
        assert response.json()["details"] == "Notes"
        assert client.get(f"/api/v1/tasks/{task_id}").json()["status"] == "In-progress"

    def test_null_details_clears_them(self, client):
        task_id = client.post("/api/v1/tasks", json={**TASK, "details": "old"}).json()["id"]

        kept = client.put(f"/api/v1/tasks/{task_id}", json=TASK)
        cleared = client.put(f"/api/v1/tasks/{task_id}", json={**TASK, "details": None})

        assert kept.json()["details"] == "old"
        assert cleared.status_code == 200
        assert cleared.json()["details"] is None

    def test_completed_can_go_back_to_pending(self, client):
        task_id = client.post("/api/v1/tasks", json={**TASK, "status": "Completed"}).json()["id"]

        response = client.put(f"/api/v1/tasks/{task_id}", json=TASK)

        assert response.json()["status"] == "Pending"

    def test_missing_fields(self, client):
        task_id = client.post("/api/v1/tasks", json=TASK).json()["id"]
        response = client.put(f"/api/v1/tasks/{task_id}", json={"title": "Only title"})
        assert response.status_code == 400

    def test_unknown_task(self, client):
        response = client.put(f"/api/v1/tasks/{uuid4()}", json=TASK)

        assert response.status_code == 404
        assert response.json() == {"message": "Task not found", "type": "not_found"}

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_malformed_id_is_not_found(self, client, method):
        response = client.request(method, "/api/v1/tasks/not-a-uuid", json=TASK)

        assert response.status_code == 404
        assert response.json() == {"message": "Task not found", "type": "not_found"}


@pytest.mark.usefixtures("logged_in")
class TestDeleteTask:
    def test_delete_twice(self, client):
        task_id = client.post("/api/v1/tasks", json=TASK).json()["id"]

        first = client.delete(f"/api/v1/tasks/{task_id}")
        second = client.delete(f"/api/v1/tasks/{task_id}")

        assert first.status_code == 200
        assert second.status_code == 404
        assert client.get("/api/v1/tasks").json() == []


class TestOwnership:
    def test_other_users_task_is_not_found(self, client, register, login, database):
        register(email="a@b.com")
        register(email="c@d.com")

        login(email="a@b.com")
        task_id = client.post("/api/v1/tasks", json=TASK).json()["id"]

        login(email="c@d.com")
        read = client.get(f"/api/v1/tasks/{task_id}")
        update = client.put(f"/api/v1/tasks/{task_id}", json={**TASK, "title": "Hijacked"})
        delete = client.delete(f"/api/v1/tasks/{task_id}")
        missing = client.get(f"/api/v1/tasks/{uuid4()}")

        assert read.status_code == update.status_code == delete.status_code == 404
        assert read.json() == update.json() == delete.json() == missing.json()
        assert client.get("/api/v1/tasks").json() == []
        assert database["tasks"].documents[0]["title"] == "T"

        login(email="a@b.com")
        assert client.get(f"/api/v1/tasks/{task_id}").status_code == 200
        assert client.put(f"/api/v1/tasks/{task_id}", json={**TASK, "title": "Mine"}).status_code == 200
        assert client.delete(f"/api/v1/tasks/{task_id}").status_code == 200
