"""MongoDB-backed task repository.

Persists one document per task with fields
``id, title, description, completed, createdAt, updatedAt``.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import ConnectionFailure, PyMongoError
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from taskhub.domain.task import Task
from taskhub.exceptions import DuplicateKeyError, StorageConnectionError

logger = structlog.get_logger()

# Keep Mongo's internal _id out of every read.
_PROJECTION = {"_id": 0}


class MongoConnection:
    """Lazily connected MongoDB client with a memoized tasks collection.

    The first call to ``get_collection`` connects, pings the server and
    creates the unique index on ``id``. A failed connect leaves no state
    behind, so the next call tries again.
    """

    def __init__(
        self,
        url: str,
        database: str,
        collection: str,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        """Initialize connection settings.

        Args:
            url: MongoDB connection string
            database: Database name
            collection: Tasks collection name
            server_selection_timeout_ms: Client server selection timeout
        """
        self.url = url
        self.database = database
        self.collection_name = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: AsyncMongoClient[dict[str, Any]] | None = None
        self._collection: AsyncCollection[dict[str, Any]] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """Check if the collection handle is available."""
        return self._collection is not None

    async def get_collection(self) -> AsyncCollection[dict[str, Any]]:
        """Return the tasks collection, connecting on first use.

        Raises:
            StorageConnectionError: If the server cannot be reached
        """
        if self._collection is not None:
            return self._collection

        async with self._lock:
            if self._collection is None:
                await self._connect()
        assert self._collection is not None
        return self._collection

    async def _connect(self) -> None:
        client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(
            self.url,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            tz_aware=True,
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            await client.close()
            logger.error(
                "mongo_connect_failed",
                database=self.database,
                error=str(e),
            )
            raise StorageConnectionError("Failed to connect to MongoDB", cause=e) from e

        collection = client[self.database][self.collection_name]
        logger.info(
            "mongo_connected",
            database=self.database,
            collection=self.collection_name,
        )

        await self._ensure_indexes(collection)

        self._client = client
        self._collection = collection

    async def _ensure_indexes(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        try:
            await collection.create_index("id", unique=True)
        except PyMongoError as e:
            # Duplicate checks then rely on the application-generated ids
            logger.warning(
                "mongo_index_creation_failed",
                collection=self.collection_name,
                error=str(e),
            )
        else:
            logger.info("mongo_indexes_ensured", collection=self.collection_name)

    async def close(self) -> None:
        """Close the client. Safe to call when not connected."""
        client, self._client = self._client, None
        self._collection = None
        if client is not None:
            await client.close()
            logger.info("mongo_disconnected", database=self.database)


@asynccontextmanager
async def _storage_errors() -> AsyncIterator[None]:
    try:
        yield
    except ConnectionFailure as e:
        raise StorageConnectionError("MongoDB is unreachable", cause=e) from e


class MongoTaskRepository:
    """Task repository backed by a MongoDB collection.

    ``find_all`` returns documents in store-native order. Updates are
    last-write-wins on ``id``.
    """

    def __init__(self, connection: MongoConnection) -> None:
        """Initialize repository.

        Args:
            connection: Shared lazily connected MongoDB handle
        """
        self.connection = connection

    async def find_all(self) -> list[Task]:
        """Return all stored tasks."""
        collection = await self.connection.get_collection()
        async with _storage_errors():
            documents = await collection.find({}, _PROJECTION).to_list(length=None)
        return [Task.from_document(doc) for doc in documents]

    async def find_by_id(self, task_id: str) -> Task | None:
        """Find a task by id.

        Args:
            task_id: Task identifier

        Returns:
            Task or None if not found
        """
        collection = await self.connection.get_collection()
        async with _storage_errors():
            document = await collection.find_one({"id": task_id}, _PROJECTION)
        return Task.from_document(document) if document else None

    async def create(self, task: Task) -> Task:
        """Insert a new task document.

        Args:
            task: Task to store

        Returns:
            The stored task

        Raises:
            DuplicateKeyError: If the unique index rejects the id
        """
        collection = await self.connection.get_collection()
        async with _storage_errors():
            try:
                await collection.insert_one(task.to_document())
            except MongoDuplicateKeyError as e:
                raise DuplicateKeyError(task.id, cause=e) from e
        return task

    async def update(self, task_id: str, task: Task) -> Task | None:
        """Overwrite the stored fields of a task.

        Args:
            task_id: Task identifier
            task: New task state

        Returns:
            The stored task or None if no document matched
        """
        collection = await self.connection.get_collection()
        async with _storage_errors():
            result = await collection.update_one(
                {"id": task_id},
                {"$set": task.to_document()},
            )
        if result.matched_count == 0:
            return None
        return task

    async def delete(self, task_id: str) -> bool:
        """Delete a task document.

        Args:
            task_id: Task identifier

        Returns:
            True if a document was removed
        """
        collection = await self.connection.get_collection()
        async with _storage_errors():
            result = await collection.delete_one({"id": task_id})
        return result.deleted_count > 0

    async def close(self) -> None:
        """Close the underlying connection."""
        await self.connection.close()
