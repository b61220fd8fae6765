"""Response mirroring tests."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from taskhub.api import create_app
from taskhub.api.response_queue import ResponseMirror
from taskhub.config import Settings
from taskhub.container import AppContainer
from taskhub.repositories import InMemoryTaskRepository


@pytest.fixture
def mirror_client(
    queue_settings: Settings,
    mock_event_publisher: AsyncMock,
    mock_queue_publisher: AsyncMock,
) -> Iterator[TestClient]:
    """Client for an app with the queue enabled."""
    container = AppContainer(
        settings=queue_settings,
        repository=InMemoryTaskRepository(),
        event_publisher=mock_event_publisher,
        queue_publisher=mock_queue_publisher,
    )
    with TestClient(create_app(container=container), raise_server_exceptions=False) as client:
        yield client


def _messages(publisher: AsyncMock) -> list[dict]:
    return [call.args[0] for call in publisher.send.await_args_list]


class TestResponseQueueMiddleware:
    """Tests for the HTTP response mirror."""

    def test_mirrors_success(
        self, mirror_client: TestClient, mock_queue_publisher: AsyncMock
    ) -> None:
        """A created task is mirrored with status and decoded body."""
        response = mirror_client.post(
            "/api/tasks", json={"title": "t", "description": "d"}
        )

        [message] = _messages(mock_queue_publisher)
        assert message["eventType"] == "http.response"
        assert message["method"] == "POST"
        assert message["path"] == "/api/tasks"
        assert message["status"] == 201
        assert message["response"] == response.json()

    def test_mirrors_errors_and_query_string(
        self, mirror_client: TestClient, mock_queue_publisher: AsyncMock
    ) -> None:
        """Error responses are mirrored with the full path."""
        mirror_client.get("/api/tasks/missing?verbose=1")

        [message] = _messages(mock_queue_publisher)
        assert message["path"] == "/api/tasks/missing?verbose=1"
        assert message["status"] == 404
        assert message["response"]["success"] is False

    def test_publish_failure_keeps_response(
        self, mirror_client: TestClient, mock_queue_publisher: AsyncMock
    ) -> None:
        """A broken queue never changes the client's response."""
        mock_queue_publisher.send.side_effect = RuntimeError("queue down")

        response = mirror_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_not_installed_without_queue(
        self, client: TestClient, mock_queue_publisher: AsyncMock
    ) -> None:
        """Without queue settings nothing is mirrored."""
        client.get("/health")

        mock_queue_publisher.send.assert_not_awaited()

    def test_unhandled_exception_mirrored_as_500(
        self,
        queue_settings: Settings,
        mock_event_publisher: AsyncMock,
        mock_queue_publisher: AsyncMock,
    ) -> None:
        """Crashing requests are mirrored with the 500 envelope the client got."""
        repository = AsyncMock()
        repository.find_all.side_effect = RuntimeError("db exploded")
        container = AppContainer(
            settings=queue_settings,
            repository=repository,
            event_publisher=mock_event_publisher,
            queue_publisher=mock_queue_publisher,
        )
        client = TestClient(create_app(container=container), raise_server_exceptions=False)

        response = client.get("/api/tasks")

        assert response.status_code == 500
        [message] = _messages(mock_queue_publisher)
        assert message["status"] == 500
        assert message["response"] == response.json()
        assert message["response"] == {
            "success": False,
            "message": "Internal server error",
            "error": "db exploded",
        }


class TestResponseMirror:
    """Tests for ResponseMirror directly."""

    @pytest.mark.asyncio
    async def test_non_json_body_is_kept_as_text(self) -> None:
        """Bodies that are not JSON are sent as strings."""
        publisher = AsyncMock()

        await ResponseMirror(publisher).publish("GET", "/x", 200, b"plain text")

        [message] = publisher.send.await_args.args
        assert message["response"] == "plain text"

    @pytest.mark.asyncio
    async def test_empty_body_is_none(self) -> None:
        """Empty bodies are sent as null."""
        publisher = AsyncMock()

        await ResponseMirror(publisher).publish("DELETE", "/x", 204, b"")

        [message] = publisher.send.await_args.args
        assert message["response"] is None
