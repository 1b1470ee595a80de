"""
Serial Number Allocation

Serial numbers are derived from the registrations table: the next serial is
one past the highest stored serial, zero-padded to six digits. The first
registration on an empty table gets ``000819``.

Within one process, allocation is serialized and remembers the last value
it handed out, so submissions still in flight (allocated but not yet
persisted) never share a serial. Across processes the unique constraint on
``registrations.serial_number`` is the backstop.
"""

import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from citd_registration.modules.registrations import repository

logger = logging.getLogger(__name__)

SERIAL_SEED = 818
SERIAL_WIDTH = 6


def format_serial(number: int) -> str:
    return str(number).zfill(SERIAL_WIDTH)


def parse_serial(value: str | None) -> int | None:
    """Parse a stored serial; returns None for missing or corrupt values."""
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)


class SerialAllocator:
    """Hands out unique, increasing registration serial numbers."""

    def __init__(self, seed: int = SERIAL_SEED):
        self.seed = seed
        self._last_issued: int | None = None
        self._lock = asyncio.Lock()

    async def _stored_max(self, db: AsyncSession) -> int:
        try:
            stored = await repository.get_max_serial_number(db)
        except SQLAlchemyError as e:
            logger.warning(
                f"Could not read the highest serial number, using seed {self.seed}: {e}"
            )
            await db.rollback()
            return self.seed

        number = parse_serial(stored)
        if stored is not None and number is None:
            logger.warning(f"Stored serial number {stored!r} is not numeric, using seed {self.seed}")
        return number if number is not None else self.seed

    async def next_serial_number(self, db: AsyncSession) -> str:
        """
        Allocate the next serial number.

        Never fails: an unreadable or corrupt counter source falls back to
        the seed, so the result is ``seed + 1`` in that case.
        """
        async with self._lock:
            current = await self._stored_max(db)
            if self._last_issued is not None:
                current = max(current, self._last_issued)
            self._last_issued = current + 1
            serial = format_serial(self._last_issued)

        logger.info(f"Allocated serial number {serial}")
        return serial
