"""MongoDB repository tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import AutoReconnect, OperationFailure, ServerSelectionTimeoutError
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from taskhub.domain.task import Task
from taskhub.exceptions import DuplicateKeyError, StorageConnectionError
from taskhub.repositories import MongoConnection, MongoTaskRepository


def _mock_collection() -> MagicMock:
    collection = MagicMock()
    collection.create_index = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.find.return_value.to_list = AsyncMock(return_value=[])
    return collection


def _mock_client(collection: MagicMock) -> MagicMock:
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.close = AsyncMock()
    database = MagicMock()
    database.__getitem__.return_value = collection
    client.__getitem__.return_value = database
    return client


@pytest.fixture
def collection() -> MagicMock:
    """Mock tasks collection."""
    return _mock_collection()


@pytest.fixture
def mongo_client(collection: MagicMock) -> Any:
    """Patch AsyncMongoClient to return a mock client."""
    client = _mock_client(collection)
    with patch(
        "taskhub.repositories.mongo.AsyncMongoClient", return_value=client
    ) as client_class:
        client_class.instance = client
        yield client_class


@pytest.fixture
def connection() -> MongoConnection:
    """Connection settings pointing at a local server."""
    return MongoConnection(
        url="mongodb://localhost:27017",
        database="tasks_db",
        collection="tasks",
        server_selection_timeout_ms=100,
    )


def _document(task: Task) -> dict[str, Any]:
    return task.to_document()


class TestMongoConnection:
    """Tests for MongoConnection."""

    def test_init_does_not_connect(self, connection: MongoConnection) -> None:
        """Nothing is opened until first use."""
        assert connection.is_connected is False
        assert connection._client is None

    @pytest.mark.asyncio
    async def test_get_collection_connects_once(
        self, connection: MongoConnection, mongo_client: Any, collection: MagicMock
    ) -> None:
        """First use pings and indexes; later uses reuse the handle."""
        first = await connection.get_collection()
        second = await connection.get_collection()

        assert first is collection
        assert second is collection
        mongo_client.assert_called_once_with(
            "mongodb://localhost:27017",
            serverSelectionTimeoutMS=100,
            tz_aware=True,
        )
        mongo_client.instance.admin.command.assert_awaited_once_with("ping")
        collection.create_index.assert_awaited_once_with("id", unique=True)

    @pytest.mark.asyncio
    async def test_connect_failure_raises_and_retries(
        self, connection: MongoConnection, mongo_client: Any
    ) -> None:
        """Unreachable server raises StorageConnectionError and leaves no state."""
        client = mongo_client.instance
        client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(StorageConnectionError):
            await connection.get_collection()

        client.close.assert_awaited_once()
        assert connection.is_connected is False

        client.admin.command.side_effect = None
        await connection.get_collection()
        assert connection.is_connected is True

    @pytest.mark.asyncio
    async def test_index_failure_is_not_fatal(
        self, connection: MongoConnection, mongo_client: Any, collection: MagicMock
    ) -> None:
        """Index creation errors are logged, not raised."""
        collection.create_index.side_effect = OperationFailure("not authorized")

        assert await connection.get_collection() is collection

    @pytest.mark.asyncio
    async def test_close_is_idempotent(
        self, connection: MongoConnection, mongo_client: Any
    ) -> None:
        """Close releases the client once and tolerates repeats."""
        await connection.get_collection()

        await connection.close()
        await connection.close()

        mongo_client.instance.close.assert_awaited_once()
        assert connection.is_connected is False


class TestMongoTaskRepository:
    """Tests for MongoTaskRepository."""

    @pytest.fixture
    def repo(self, connection: MongoConnection, mongo_client: Any) -> MongoTaskRepository:
        return MongoTaskRepository(connection)

    @pytest.mark.asyncio
    async def test_find_all_excludes_internal_id(
        self, repo: MongoTaskRepository, collection: MagicMock, sample_task: Task
    ) -> None:
        """Documents are read without _id and mapped to tasks."""
        collection.find.return_value.to_list.return_value = [_document(sample_task)]

        tasks = await repo.find_all()

        collection.find.assert_called_once_with({}, {"_id": 0})
        assert tasks == [sample_task]

    @pytest.mark.asyncio
    async def test_find_by_id(
        self, repo: MongoTaskRepository, collection: MagicMock, sample_task: Task
    ) -> None:
        """Lookup filters on the task id field."""
        collection.find_one.return_value = _document(sample_task)

        found = await repo.find_by_id(sample_task.id)

        collection.find_one.assert_awaited_once_with({"id": sample_task.id}, {"_id": 0})
        assert found == sample_task

    @pytest.mark.asyncio
    async def test_find_by_id_missing(
        self, repo: MongoTaskRepository, collection: MagicMock
    ) -> None:
        """Missing document returns None."""
        assert await repo.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_create_inserts_document(
        self, repo: MongoTaskRepository, collection: MagicMock, sample_task: Task
    ) -> None:
        """Create writes the camelCase document."""
        created = await repo.create(sample_task)

        collection.insert_one.assert_awaited_once_with(_document(sample_task))
        assert created is sample_task

    @pytest.mark.asyncio
    async def test_create_duplicate_maps_error(
        self, repo: MongoTaskRepository, collection: MagicMock, sample_task: Task
    ) -> None:
        """Unique index violations become DuplicateKeyError."""
        collection.insert_one.side_effect = MongoDuplicateKeyError("E11000 duplicate key")

        with pytest.raises(DuplicateKeyError) as exc_info:
            await repo.create(sample_task)

        assert exc_info.value.task_id == sample_task.id

    @pytest.mark.asyncio
    async def test_update_matched(
        self, repo: MongoTaskRepository, collection: MagicMock, sample_task: Task
    ) -> None:
        """Update sets every field on the matching document."""
        collection.update_one.return_value = MagicMock(matched_count=1)

        updated = await repo.update(sample_task.id, sample_task)

        collection.update_one.assert_awaited_once_with(
            {"id": sample_task.id},
            {"$set": _document(sample_task)},
        )
        assert updated is sample_task

    @pytest.mark.asyncio
    async def test_update_unmatched_returns_none(
        self, repo: MongoTaskRepository, collection: MagicMock, sample_task: Task
    ) -> None:
        """No matching document means not found."""
        collection.update_one.return_value = MagicMock(matched_count=0)

        assert await repo.update(sample_task.id, sample_task) is None

    @pytest.mark.asyncio
    async def test_delete_reports_count(
        self, repo: MongoTaskRepository, collection: MagicMock
    ) -> None:
        """Delete is True only when a document was removed."""
        collection.delete_one.return_value = MagicMock(deleted_count=1)
        assert await repo.delete("task-1") is True

        collection.delete_one.return_value = MagicMock(deleted_count=0)
        assert await repo.delete("task-1") is False

    @pytest.mark.asyncio
    async def test_lost_connection_maps_error(
        self, repo: MongoTaskRepository, collection: MagicMock
    ) -> None:
        """Connection failures during an operation become StorageConnectionError."""
        collection.find_one.side_effect = AutoReconnect("connection reset")

        with pytest.raises(StorageConnectionError):
            await repo.find_by_id("task-1")

    @pytest.mark.asyncio
    async def test_close_delegates_to_connection(
        self, repo: MongoTaskRepository, mongo_client: Any
    ) -> None:
        """Closing the repository closes the client."""
        await repo.find_all()

        await repo.close()

        mongo_client.instance.close.assert_awaited_once()
