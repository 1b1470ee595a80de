"""
Export Registrations

Writes every stored registration to an .xlsx workbook, in the same layout
as the report attached to the faculty batch email.

Usage:
    cd apps/api
    python scripts/export_registrations.py [output.xlsx]
"""

import asyncio
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from citd_registration.core.database import async_session_maker, close_db
from citd_registration.modules.registrations import repository
from citd_registration.modules.registrations.export import (
    REPORT_ATTACHMENT_NAME,
    build_registrations_workbook,
)


async def export_registrations(path: Path) -> None:
    """Export all registrations to ``path``."""
    async with async_session_maker() as db:
        registrations = await repository.list_all(db)

    if not registrations:
        print("No registrations found, writing an empty report")

    build_registrations_workbook(registrations, path)

    print("Registrations exported successfully!")
    print(f"  Rows: {len(registrations)}")
    print(f"  File: {path.resolve()}")

    await close_db()


if __name__ == "__main__":
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(REPORT_ATTACHMENT_NAME)
    asyncio.run(export_registrations(output))
