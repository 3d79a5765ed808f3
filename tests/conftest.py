import os

# Keep tests independent of any local .env file.
os.environ.setdefault("TASK_TRACKER_SKIP_DOTENV", "1")
os.environ.setdefault("TASK_STORE_BACKEND", "memory")

import httpx
import pytest
import pytest_asyncio

from task_tracker.app import create_app
from task_tracker.services.client import TaskApiClient
from task_tracker.services.sync import UIState
from task_tracker.services.task_store import InMemoryTaskStore

from .fakes import FakeTaskClient


@pytest.fixture()
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture()
def app(store):
    return create_app(task_store=store)


@pytest_asyncio.fixture()
async def http(app):
    """Raw HTTP client talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture()
async def api_client(app):
    """The real TaskApiClient, wired to the app instead of the network."""
    client = TaskApiClient(
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=app),
        retry_delay=0,
    )
    yield client
    await client.close()


@pytest.fixture()
def fake_client() -> FakeTaskClient:
    return FakeTaskClient()


@pytest.fixture()
def ui_state() -> UIState:
    return UIState()
