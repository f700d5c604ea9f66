import pytest

from kanban.models import TaskAttachment


def _create(client, headers, **payload):
    response = client.post("/api/tasks", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_tasks_require_authentication(client):
    for method, path in [
        ("get", "/api/tasks"),
        ("post", "/api/tasks"),
        ("get", "/api/tasks/1"),
        ("put", "/api/tasks/1"),
        ("delete", "/api/tasks/1"),
        ("get", "/api/tasks/1/attachments"),
    ]:
        response = getattr(client, method)(path)
        assert response.status_code == 401, f"{method} {path}"


def test_empty_board(client, auth_headers):
    response = client.get("/api/tasks", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "message": "Tasks retrieved successfully",
        "data": [],
    }


def test_create_task_defaults_to_todo_and_owner(client, auth_headers, admin_id):
    response = client.post(
        "/api/tasks", json={"name": "Write docs"}, headers=auth_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Task created successfully"
    task = body["data"]
    assert task["status"] == "TO_DO"
    assert task["created_by"] == admin_id
    assert task["teams"] == []
    assert task["attachments"] == []
    assert task["description"] is None


def test_created_by_comes_from_token_not_body(client, auth_headers, admin_id):
    task = _create(client, auth_headers, name="Spoof", created_by=12345)

    assert task["created_by"] == admin_id


def test_invalid_status_is_rejected_without_writing(client, auth_headers):
    response = client.post(
        "/api/tasks",
        json={"name": "Bad", "status": "INVALID"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {
        "status": "error",
        "message": "Invalid task status. Must be one of: TO_DO, DOING, DONE",
    }
    assert client.get("/api/tasks", headers=auth_headers).json()["data"] == []


@pytest.mark.parametrize("payload", [{}, {"name": ""}, {"name": "   "}])
def test_missing_name_is_rejected(client, auth_headers, payload):
    response = client.post("/api/tasks", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["status"] == "error"


def test_malformed_json_is_a_400(client, auth_headers):
    response = client.post(
        "/api/tasks",
        content="{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["status"] == "error"


def test_team_round_trip(client, auth_headers):
    created = _create(client, auth_headers, name="API", teams=["BACKEND"])
    assert created["teams"] == ["BACKEND"]

    response = client.put(
        f"/api/tasks/{created['id']}",
        json={"teams": ["FRONTEND", "DESIGN"]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Task updated successfully"
    assert response.json()["data"]["teams"] == ["DESIGN", "FRONTEND"]

    fetched = client.get(f"/api/tasks/{created['id']}", headers=auth_headers).json()
    assert fetched["message"] == "Task retrieved successfully"
    assert fetched["data"]["teams"] == ["DESIGN", "FRONTEND"]


def test_unknown_team_is_a_400(client, auth_headers):
    response = client.post(
        "/api/tasks",
        json={"name": "QA pass", "teams": ["QA"]},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Team 'QA' not found"}
    assert client.get("/api/tasks", headers=auth_headers).json()["data"] == []


def test_partial_update_only_touches_given_fields(client, auth_headers):
    created = _create(
        client,
        auth_headers,
        name="Landing",
        description="Hero",
        external_link="https://docs.example/landing",
        teams=["DESIGN"],
    )

    updated = client.put(
        f"/api/tasks/{created['id']}",
        json={"status": "DONE"},
        headers=auth_headers,
    ).json()["data"]

    assert updated["status"] == "DONE"
    for field in ("name", "description", "external_link", "teams", "created_by"):
        assert updated[field] == created[field]


def test_update_with_null_name_is_rejected(client, auth_headers):
    created = _create(client, auth_headers, name="Keep me")

    response = client.put(
        f"/api/tasks/{created['id']}", json={"name": None}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Task name is required"


def test_get_missing_task_is_null(client, auth_headers):
    response = client.get("/api/tasks/999", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "message": "Task not found",
        "data": None,
    }


def test_update_and_delete_missing_task_are_404(client, auth_headers):
    put = client.put("/api/tasks/999", json={"name": "x"}, headers=auth_headers)
    delete = client.delete("/api/tasks/999", headers=auth_headers)

    for response in (put, delete):
        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Task not found"}


def test_delete_twice(client, auth_headers):
    created = _create(client, auth_headers, name="Temp", teams=["BACKEND"])

    first = client.delete(f"/api/tasks/{created['id']}", headers=auth_headers)
    second = client.delete(f"/api/tasks/{created['id']}", headers=auth_headers)

    assert first.status_code == 200
    assert first.json() == {
        "status": "success",
        "message": "Task deleted successfully",
        "data": True,
    }
    assert second.status_code == 404
    assert client.get(f"/api/tasks/{created['id']}", headers=auth_headers).json()[
        "data"
    ] is None


def test_non_integer_id_is_a_400(client, auth_headers):
    response = client.get("/api/tasks/abc", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["status"] == "error"


@pytest.mark.parametrize("task_id", [0, -1, 2**31, 2**64])
def test_out_of_range_id_is_a_400(client, auth_headers, task_id):
    path = f"/api/tasks/{task_id}"
    responses = [
        client.get(path, headers=auth_headers),
        client.put(path, json={"name": "x"}, headers=auth_headers),
        client.delete(path, headers=auth_headers),
        client.get(f"{path}/attachments", headers=auth_headers),
    ]

    for response in responses:
        assert response.status_code == 400, response.request.method
        assert response.json()["status"] == "error"


def test_largest_id_is_looked_up(client, auth_headers):
    response = client.get(f"/api/tasks/{2**31 - 1}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"] is None


def test_list_keeps_creation_order(client, auth_headers):
    for name in ("one", "two", "three"):
        _create(client, auth_headers, name=name)

    data = client.get("/api/tasks", headers=auth_headers).json()["data"]

    assert [task["name"] for task in data] == ["one", "two", "three"]


def test_attachments(client, app, auth_headers, admin_id):
    created = _create(client, auth_headers, name="Brief")

    async def _attach():
        async with app.state.session_factory() as session:
            session.add(
                TaskAttachment(
                    task_id=created["id"],
                    file_name="brief.pdf",
                    file_size=512,
                    mime_type="application/pdf",
                    cloudinary_public_id="kanban/brief",
                    cloudinary_url="http://cdn.example/kanban/brief.pdf",
                    cloudinary_secure_url="https://cdn.example/kanban/brief.pdf",
                    uploaded_by=admin_id,
                )
            )
            await session.commit()

    client.portal.call(_attach)

    response = client.get(
        f"/api/tasks/{created['id']}/attachments", headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "message": "Attachments retrieved successfully",
        "data": [{"name": "brief.pdf", "url": "https://cdn.example/kanban/brief.pdf"}],
    }
    task = client.get(f"/api/tasks/{created['id']}", headers=auth_headers).json()
    assert task["data"]["attachments"] == response.json()["data"]


def test_attachments_of_missing_task_is_404(client, auth_headers):
    response = client.get("/api/tasks/999/attachments", headers=auth_headers)

    assert response.status_code == 404
