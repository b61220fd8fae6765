"""Task entity and its state transitions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

# Millisecond precision matches what document stores persist.
_MIN_TICK = timedelta(milliseconds=1)


def _utcnow() -> datetime:
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def isoformat_utc(value: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a ``Z`` suffix.

    Every outbound channel (HTTP bodies, queue messages) uses this form.
    """
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Task:
    """A unit of work with title, description and completion state.

    ``id`` and ``created_at`` are fixed at construction. Every mutation goes
    through one of the transition methods so ``updated_at`` is refreshed.
    """

    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, title: str, description: str) -> Task:
        """Build a new, not yet persisted task.

        Args:
            title: Task title
            description: Task description

        Returns:
            Task with a fresh id and ``created_at == updated_at``
        """
        now = _utcnow()
        return cls(
            id=str(uuid4()),
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    def update(self, title: str, description: str) -> None:
        """Edit the text fields."""
        self.title = title
        self.description = description
        self._touch()

    def complete(self) -> None:
        """Mark the task as completed."""
        self.completed = True
        self._touch()

    def uncomplete(self) -> None:
        """Mark the task as not completed."""
        self.completed = False
        self._touch()

    def _touch(self) -> None:
        # updated_at must strictly increase, even when the clock has not moved
        now = _utcnow()
        if now <= self.updated_at:
            now = self.updated_at + _MIN_TICK
        self.updated_at = now

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire representation."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }

    def to_document(self) -> dict[str, Any]:
        """Serialize to the document-store representation."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Task:
        """Rebuild a task from a stored document.

        Naive datetimes (as returned by drivers without tz awareness) are
        interpreted as UTC.
        """
        return cls(
            id=document["id"],
            title=document["title"],
            description=document["description"],
            completed=bool(document["completed"]),
            created_at=_as_utc(document["createdAt"]),
            updated_at=_as_utc(document["updatedAt"]),
        )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
