"""
Async client for the task tracker HTTP API.

Every call returns typed models and maps failures onto the shared error
taxonomy, so the sync cache never has to look at status codes.
"""

import asyncio
import logging
import os
import re
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import ValidationError

from task_tracker.models import CreateTaskInput, Task, TaskStatus, UpdateTaskInput
from task_tracker.services.errors import (
    TaskTrackerError,
    TaskNotFoundError,
    TaskValidationError,
    TransportError,
)
from task_tracker.utils import env_float

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"

# Attempts per call, first try included. A retried create can double-insert.
QUERY_RETRIES = 3
MUTATION_RETRIES = 2
RETRY_DELAY = 1.0  # seconds, multiplied by the attempt number

TASK_PATH = re.compile(r"^/tasks/([^/]+)/?$")


class TaskApiClient:
    """An async wrapper around the task tracker REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_delay: float = RETRY_DELAY,
    ):
        self.base_url = (base_url or os.getenv("TASK_API_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else env_float("TASK_API_TIMEOUT", 10.0)
        self.retry_delay = retry_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create httpx client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        json: Optional[Dict[str, Any]] = None,
        retries: int = QUERY_RETRIES,
    ) -> Dict[str, Any]:
        """
        Issue a request with bounded retry and return the decoded envelope.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            action: Human phrase used in the generic failure message
                ("create task" -> "Failed to create task. Please try again.")
            json: Optional JSON body
            retries: Total attempts for network errors and 5xx responses

        Raises:
            TaskValidationError: server answered 400
            TaskNotFoundError: server answered 404
            TransportError: unreachable, 5xx after all attempts, or any other
                unexpected response
        """
        client = await self._get_client()
        failure = f"Failed to {action}. Please try again."

        for attempt in range(1, retries + 1):
            try:
                logger.debug("Request: %s %s (attempt %d/%d)", method, path, attempt, retries)
                response = await client.request(method, path, json=json)
            except httpx.RequestError as exc:
                if attempt < retries:
                    logger.warning("Request error: %s, retrying %s %s", exc, method, path)
                    await asyncio.sleep(self.retry_delay * attempt)
                    continue
                logger.error("Request error after %d attempts: %s", retries, exc)
                raise TransportError(failure) from exc

            if response.status_code >= 500:
                if attempt < retries:
                    logger.warning(
                        "Request failed with status %d, retrying %s %s",
                        response.status_code, method, path,
                    )
                    await asyncio.sleep(self.retry_delay * attempt)
                    continue
                logger.error(
                    "Request failed after %d attempts with status %d",
                    retries, response.status_code,
                )
                raise TransportError(failure, status_code=response.status_code)

            return self._decode(response, path, failure)

        raise TransportError(failure)

    @staticmethod
    def _decode(response: httpx.Response, path: str, failure: str) -> Dict[str, Any]:
        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code == 400:
            raise TaskValidationError.from_message(body.get("message") or "Invalid task data")
        if response.status_code == 404:
            match = TASK_PATH.match(path)
            if match:
                raise TaskNotFoundError(
                    match.group(1), message=body.get("message") or "Task not found"
                )
            raise TransportError(failure, status_code=404)
        if response.is_error:
            raise TransportError(failure, status_code=response.status_code)
        return body

    @staticmethod
    def _parse_task(data: Any) -> Task:
        if data is None:
            raise TransportError("Invalid response from server")
        try:
            return Task.model_validate(data)
        except ValidationError as exc:
            raise TransportError("Invalid response from server") from exc

    async def list_tasks(self) -> List[Task]:
        """Fetch every task from the server."""
        body = await self._request("GET", "/tasks", "load tasks")
        return [self._parse_task(item) for item in body.get("data") or []]

    async def create_task(self, task: Union[CreateTaskInput, Dict[str, Any]]) -> Task:
        """
        Create a task.

        Args:
            task: Input model or plain dict with title, description, status

        Returns:
            The stored task, carrying its server-assigned id
        """
        if isinstance(task, CreateTaskInput):
            payload = task.model_dump(mode="json")
        else:
            payload = dict(task)
        body = await self._request(
            "POST", "/tasks", "create task", json=payload, retries=MUTATION_RETRIES
        )
        return self._parse_task(body.get("data"))

    async def update_task_status(
        self,
        task_id: str,
        update: Union[UpdateTaskInput, TaskStatus, str, Dict[str, Any]],
    ) -> Task:
        """Change the status of a task and return the updated task."""
        if isinstance(update, UpdateTaskInput):
            payload = update.model_dump(mode="json")
        elif isinstance(update, dict):
            payload = dict(update)
        else:
            try:
                payload = {"status": TaskStatus(update).value}
            except ValueError as exc:
                raise TaskValidationError("status", f"Invalid status '{update}'") from exc
        body = await self._request(
            "PATCH", f"/tasks/{task_id}", "update task", json=payload, retries=MUTATION_RETRIES
        )
        return self._parse_task(body.get("data"))

    async def delete_task(self, task_id: str) -> None:
        await self._request(
            "DELETE", f"/tasks/{task_id}", "delete task", retries=MUTATION_RETRIES
        )

    async def health_check(self) -> bool:
        """True if the API answers its health endpoint."""
        try:
            body = await self._request("GET", "/health", "reach the server", retries=1)
        except TaskTrackerError as exc:
            logger.error("API health check failed: %s", exc)
            return False
        return bool(body.get("success"))

    async def close(self):
        """Close httpx client connection"""
        if self._client:
            await self._client.aclose()
            self._client = None
