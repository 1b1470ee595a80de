"""
Pending Faculty Notifications

Process-local queue of completed submissions waiting for the next faculty
batch email. Entries are appended by the submission pipeline and removed
only by a successful batch flush; they are lost on restart.

States:
    EMPTY -> ACCUMULATING on enqueue
    ACCUMULATING -> FLUSHING while a flush holds the flush slot
    FLUSHING -> EMPTY (or ACCUMULATING if entries arrived meanwhile) on success
    FLUSHING -> ACCUMULATING on failure, contents retained

A flush works on a snapshot and afterwards discards exactly the entries it
sent, so an entry enqueued while a flush is in progress survives into the
next flush instead of being cleared with the batch.
"""

import asyncio
import enum
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime


class QueueState(str, enum.Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    FLUSHING = "flushing"


@dataclass(frozen=True)
class PendingNotification:
    """A submission awaiting the faculty batch email."""

    serial_number: str
    applicant_name: str
    certificate_url: str | None
    application_form_url: str | None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class PendingQueue:
    def __init__(self):
        self._items: list[PendingNotification] = []
        # Guards every read-modify-write of _items; never held across I/O
        self._lock = asyncio.Lock()
        # Held for the whole duration of a flush
        self._flush_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._items)

    @property
    def state(self) -> QueueState:
        if self._flush_lock.locked():
            return QueueState.FLUSHING
        return QueueState.ACCUMULATING if self._items else QueueState.EMPTY

    async def enqueue(self, notification: PendingNotification) -> int:
        """Append one entry. Returns the queue length afterwards."""
        async with self._lock:
            self._items.append(notification)
            return len(self._items)

    async def snapshot(self) -> list[PendingNotification]:
        """Copy of the current entries, oldest first."""
        async with self._lock:
            return list(self._items)

    async def discard(self, count: int) -> None:
        """Remove the ``count`` oldest entries (the ones a flush just sent)."""
        async with self._lock:
            del self._items[:count]

    @asynccontextmanager
    async def flush_slot(self) -> AsyncIterator[bool]:
        """
        Claim the right to flush.

        Yields False without waiting when another flush is running, so a
        scheduler tick that fires during a slow flush is skipped.
        """
        if self._flush_lock.locked():
            yield False
            return
        async with self._flush_lock:
            yield True
