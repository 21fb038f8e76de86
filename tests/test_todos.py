from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.todo import Todo, TodoPriority, TodoStatus


def _create_todo(client: TestClient, headers: dict, **fields):
    payload = {"title": "Write report"}
    payload.update(fields)
    response = client.post("/api/v1/todos/", json=payload, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def test_todo_routes_require_authentication(client: TestClient):
    assert client.get("/api/v1/todos/").status_code == 401
    assert client.post("/api/v1/todos/", json={"title": "Nope"}).status_code == 401


def test_create_todo_defaults(client: TestClient, create_user, auth_headers):
    user = create_user()
    todo = _create_todo(client, auth_headers(user), title="  Buy milk  ", tags=["home"])

    assert todo["title"] == "Buy milk"
    assert todo["status"] == "pending"
    assert todo["priority"] == "medium"
    assert todo["tags"] == ["home"]
    assert todo["user_id"] == user.id
    assert todo["completed_at"] is None
    assert todo["is_overdue"] is False


def test_create_todo_validation(client: TestClient, create_user, auth_headers):
    headers = auth_headers(create_user())

    too_short = client.post("/api/v1/todos/", json={"title": "a"}, headers=headers)
    assert too_short.status_code == 422

    bad_priority = client.post(
        "/api/v1/todos/", json={"title": "Valid", "priority": "urgent"}, headers=headers
    )
    assert bad_priority.status_code == 422

    long_tag = client.post(
        "/api/v1/todos/", json={"title": "Valid", "tags": ["x" * 21]}, headers=headers
    )
    assert long_tag.status_code == 422


def test_list_todos_is_scoped_to_owner(client: TestClient, create_user, auth_headers):
    alice = create_user("alice@example.com")
    bob = create_user("bob@example.com")
    _create_todo(client, auth_headers(alice), title="Alice task")
    _create_todo(client, auth_headers(bob), title="Bob task")

    response = client.get("/api/v1/todos/", headers=auth_headers(alice))

    assert response.status_code == 200
    payload = response.json()
    assert [todo["title"] for todo in payload["data"]] == ["Alice task"]
    assert payload["meta"] == {"total": 1, "page": 1, "limit": 10, "total_pages": 1}


def test_list_todos_filters_search_and_pagination(client: TestClient, create_user, auth_headers):
    headers = auth_headers(create_user())
    _create_todo(client, headers, title="Groceries", description="milk and eggs", priority="low")
    _create_todo(client, headers, title="Tax return", priority="high", status="in-progress")
    _create_todo(client, headers, title="Dentist", priority="medium", status="completed")

    by_status = client.get("/api/v1/todos/?status=in-progress", headers=headers).json()
    assert [todo["title"] for todo in by_status["data"]] == ["Tax return"]

    by_priority = client.get("/api/v1/todos/?priority=low", headers=headers).json()
    assert [todo["title"] for todo in by_priority["data"]] == ["Groceries"]

    search = client.get("/api/v1/todos/?search=EGGS", headers=headers).json()
    assert [todo["title"] for todo in search["data"]] == ["Groceries"]

    ignored = client.get("/api/v1/todos/?status=archived", headers=headers).json()
    assert ignored["meta"]["total"] == 3

    page_two = client.get("/api/v1/todos/?limit=2&page=2&sortBy=title", headers=headers).json()
    assert [todo["title"] for todo in page_two["data"]] == ["Tax return"]
    assert page_two["meta"] == {"total": 3, "page": 2, "limit": 2, "total_pages": 2}


def test_list_todos_sorting(client: TestClient, create_user, auth_headers):
    headers = auth_headers(create_user())
    now = datetime.utcnow()
    _create_todo(client, headers, title="Bravo", priority="low", due_date=(now + timedelta(days=3)).isoformat())
    _create_todo(client, headers, title="Alpha", priority="high", due_date=(now + timedelta(days=5)).isoformat())
    _create_todo(client, headers, title="Charlie", priority="medium", due_date=(now + timedelta(days=1)).isoformat())

    def titles(sort_by):
        response = client.get(f"/api/v1/todos/?sortBy={sort_by}", headers=headers)
        return [todo["title"] for todo in response.json()["data"]]

    assert titles("title") == ["Alpha", "Bravo", "Charlie"]
    assert titles("priority") == ["Alpha", "Charlie", "Bravo"]
    assert titles("dueDate") == ["Charlie", "Bravo", "Alpha"]


def test_list_todos_rejects_bad_pagination(client: TestClient, create_user, auth_headers):
    headers = auth_headers(create_user())

    assert client.get("/api/v1/todos/?page=0", headers=headers).status_code == 422
    assert client.get("/api/v1/todos/?limit=1000", headers=headers).status_code == 422


def test_get_todo_ownership(client: TestClient, create_user, auth_headers):
    owner = create_user("owner@example.com")
    intruder = create_user("intruder@example.com")
    todo = _create_todo(client, auth_headers(owner))

    assert client.get(f"/api/v1/todos/{todo['id']}", headers=auth_headers(owner)).status_code == 200

    denied = client.get(f"/api/v1/todos/{todo['id']}", headers=auth_headers(intruder))
    assert denied.status_code == 401
    assert denied.json()["message"] == "Not authorized to access this todo"

    missing = client.get("/api/v1/todos/9999", headers=auth_headers(owner))
    assert missing.status_code == 404
    assert missing.json()["message"] == "Todo not found"


def test_update_todo(client: TestClient, create_user, auth_headers):
    headers = auth_headers(create_user())
    todo = _create_todo(client, headers, description="first draft")

    response = client.put(
        f"/api/v1/todos/{todo['id']}",
        json={"title": "Write final report", "priority": "high"},
        headers=headers,
    )

    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["title"] == "Write final report"
    assert updated["priority"] == "high"
    assert updated["description"] == "first draft"


def test_update_todo_of_other_user_is_denied(client: TestClient, create_user, auth_headers):
    owner = create_user("owner@example.com")
    intruder = create_user("intruder@example.com")
    todo = _create_todo(client, auth_headers(owner))

    response = client.put(
        f"/api/v1/todos/{todo['id']}", json={"title": "Hijacked"}, headers=auth_headers(intruder)
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized to update this todo"


def test_status_transitions_track_completion(client: TestClient, create_user, auth_headers):
    headers = auth_headers(create_user())
    todo = _create_todo(client, headers)

    completed = client.patch(
        f"/api/v1/todos/{todo['id']}/status", json={"status": "completed"}, headers=headers
    ).json()["data"]
    assert completed["status"] == "completed"
    assert completed["completed_at"] is not None

    reopened = client.patch(
        f"/api/v1/todos/{todo['id']}/status", json={"status": "in-progress"}, headers=headers
    ).json()["data"]
    assert reopened["status"] == "in-progress"
    assert reopened["completed_at"] is None

    invalid = client.patch(
        f"/api/v1/todos/{todo['id']}/status", json={"status": "done"}, headers=headers
    )
    assert invalid.status_code == 422


def test_delete_todo(client: TestClient, db_session: Session, create_user, auth_headers):
    user = create_user()
    headers = auth_headers(user)
    todo = _create_todo(client, headers)

    response = client.delete(f"/api/v1/todos/{todo['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"] == {}
    assert db_session.query(Todo).filter(Todo.user_id == user.id).count() == 0


def test_todo_stats(client: TestClient, db_session: Session, create_user, auth_headers):
    user = create_user()
    now = datetime.utcnow()
    db_session.add_all(
        [
            Todo(user_id=user.id, title="Overdue", status=TodoStatus.PENDING, due_date=now - timedelta(days=1)),
            Todo(user_id=user.id, title="Soon", status=TodoStatus.IN_PROGRESS, due_date=now + timedelta(days=1)),
            Todo(user_id=user.id, title="Later", status=TodoStatus.PENDING, due_date=now + timedelta(days=10)),
            Todo(
                user_id=user.id,
                title="Done late",
                status=TodoStatus.COMPLETED,
                priority=TodoPriority.HIGH,
                due_date=now - timedelta(days=2),
            ),
        ]
    )
    db_session.commit()

    response = client.get("/api/v1/todos/stats", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["data"] == {
        "total": 4,
        "pending": 2,
        "in-progress": 1,
        "completed": 1,
        "overdue": 1,
        "upcoming": 1,
    }


def test_overdue_flag(client: TestClient, create_user, auth_headers):
    headers = auth_headers(create_user())
    past = (datetime.utcnow() - timedelta(days=1)).isoformat() + "Z"

    todo = _create_todo(client, headers, due_date=past)

    assert todo["is_overdue"] is True
