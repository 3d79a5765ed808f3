import httpx
import pytest

from task_tracker.app import create_app
from task_tracker.services.task_store import InMemoryTaskStore


@pytest.mark.asyncio
async def test_task_lifecycle_end_to_end(http):
    """
    Walk one task through create -> list -> done -> delete -> list and check
    the envelope at every step.
    """
    response = await http.post("/tasks", json={"title": "Buy milk", "description": "2%"})
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {
        "id": "1",
        "title": "Buy milk",
        "description": "2%",
        "status": "pending",
    }

    response = await http.get("/tasks")
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["count"] == 1
    assert [t["id"] for t in body["data"]] == ["1"]

    response = await http.patch("/tasks/1", json={"status": "done"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "done"
    assert response.json()["data"]["title"] == "Buy milk"

    response = await http.delete("/tasks/1")
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = await http.get("/tasks")
    assert response.json()["count"] == 0
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_delete_unknown_id_is_404(http):
    response = await http.delete("/tasks/999")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Not Found"
    assert body["message"] == "Task with ID 999 not found"


@pytest.mark.asyncio
async def test_patch_unknown_id_is_404(http):
    response = await http.patch("/tasks/7", json={"status": "done"})

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"title": "", "description": "x"},
        {"title": "   "},
        {"description": "no title"},
        {"title": "t" * 101},
        {"title": "ok", "description": "d" * 501},
        {"title": "ok", "status": "archived"},
    ],
)
async def test_create_validation_errors_are_400(http, store, payload):
    response = await http.post("/tasks", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Validation Error"
    assert body["message"].startswith("Invalid input: ")
    assert await store.count_tasks() == 0


@pytest.mark.asyncio
async def test_create_validation_message_names_the_field(http):
    response = await http.post("/tasks", json={"title": ""})
    assert response.json()["message"].startswith("Invalid input: title: ")


@pytest.mark.asyncio
async def test_create_without_body_is_400(http):
    response = await http.post("/tasks")
    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"


@pytest.mark.asyncio
async def test_description_is_optional(http):
    response = await http.post("/tasks", json={"title": "Only a title"})
    assert response.status_code == 201
    assert response.json()["data"]["description"] == ""


@pytest.mark.asyncio
async def test_patch_validates_body_before_lookup(http):
    # Unknown id *and* bad status: validation wins
    response = await http.patch("/tasks/999", json={"status": "archived"})
    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(http):
    response = await http.get("/nope")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": "Not Found",
        "message": "Route GET /nope not found",
    }


@pytest.mark.asyncio
async def test_health_and_root(http):
    health = await http.get("/health")
    assert health.status_code == 200
    assert health.json()["success"] is True
    assert "timestamp" in health.json()

    root = await http.get("/")
    assert root.status_code == 200
    assert "GET /tasks" in root.json()["endpoints"]


@pytest.mark.asyncio
async def test_unexpected_error_is_a_generic_500():
    """Internal detail must not leak into the response."""
    class BrokenStore(InMemoryTaskStore):
        async def list_tasks(self):
            raise RuntimeError("database password is hunter2")

    app = create_app(task_store=BrokenStore())
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/tasks")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal Server Error",
        "message": "An unexpected error occurred",
    }


@pytest.mark.asyncio
async def test_each_app_owns_its_store():
    first = create_app()
    second = create_app()
    assert first.state.task_store is not second.state.task_store
