"""
Unit tests for the pending faculty notification queue.
"""

import asyncio

import pytest

from citd_registration.modules.registrations.queue import (
    PendingNotification,
    PendingQueue,
    QueueState,
)


def _item(serial: str) -> PendingNotification:
    return PendingNotification(
        serial_number=serial,
        applicant_name=f"Student {serial}",
        certificate_url=f"https://cdn.example.com/{serial}/certificate.pdf",
        application_form_url=None,
    )


class TestPendingQueue:
    """Tests for PendingQueue."""

    @pytest.mark.asyncio
    async def test_new_queue_is_empty(self):
        queue = PendingQueue()
        assert len(queue) == 0
        assert queue.state == QueueState.EMPTY
        assert await queue.snapshot() == []

    @pytest.mark.asyncio
    async def test_enqueue_returns_length_and_keeps_order(self):
        queue = PendingQueue()
        assert await queue.enqueue(_item("000819")) == 1
        assert await queue.enqueue(_item("000820")) == 2

        assert queue.state == QueueState.ACCUMULATING
        assert [item.serial_number for item in await queue.snapshot()] == ["000819", "000820"]

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self):
        queue = PendingQueue()
        await queue.enqueue(_item("000819"))

        snapshot = await queue.snapshot()
        snapshot.clear()

        assert len(queue) == 1

    @pytest.mark.asyncio
    async def test_discard_removes_only_oldest_entries(self):
        """Entries enqueued after a snapshot survive the discard."""
        queue = PendingQueue()
        await queue.enqueue(_item("000819"))
        await queue.enqueue(_item("000820"))
        sent = await queue.snapshot()

        await queue.enqueue(_item("000821"))
        await queue.discard(len(sent))

        assert [item.serial_number for item in await queue.snapshot()] == ["000821"]

    @pytest.mark.asyncio
    async def test_discard_all_empties_queue(self):
        queue = PendingQueue()
        await queue.enqueue(_item("000819"))
        await queue.discard(1)

        assert queue.state == QueueState.EMPTY

    @pytest.mark.asyncio
    async def test_state_is_flushing_inside_flush_slot(self):
        queue = PendingQueue()
        await queue.enqueue(_item("000819"))

        async with queue.flush_slot() as acquired:
            assert acquired is True
            assert queue.state == QueueState.FLUSHING

        assert queue.state == QueueState.ACCUMULATING

    @pytest.mark.asyncio
    async def test_second_flush_slot_is_refused(self):
        """An overlapping flush does not wait; it is told to skip."""
        queue = PendingQueue()

        async with queue.flush_slot() as first:
            async with queue.flush_slot() as second:
                assert first is True
                assert second is False

        async with queue.flush_slot() as again:
            assert again is True

    @pytest.mark.asyncio
    async def test_enqueue_does_not_wait_for_flush(self):
        queue = PendingQueue()

        async with queue.flush_slot():
            await asyncio.wait_for(queue.enqueue(_item("000819")), timeout=1)

        assert len(queue) == 1
