"""
Command line entry point for the preview database reaper.

Every failure funnels through run(): the message is reported to the CI
platform and the process exits 1.
"""

import asyncio
import sys
from typing import Optional

import httpx
from pydantic import ValidationError

from preview_reaper.config import Settings
from preview_reaper.services.reaper import PreviewDatabaseReaper
from preview_reaper.utils.actions import set_failed, set_output
from preview_reaper.utils.logging import get_logger, setup_logging


logger = get_logger(__name__)


async def run(settings: Settings, reaper: Optional[PreviewDatabaseReaper] = None) -> int:
    """
    Run the reaper once and report the outcome.

    Returns:
        Process exit code
    """
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
            reaper = reaper or PreviewDatabaseReaper(settings, client)
            result = await reaper.run()
    except Exception as e:
        logger.error(f"Preview database cleanup failed: {e}", exc_info=True)
        return set_failed(str(e) or "An error occurred")

    set_output("database-name", result.database)
    print(f"Database {result.database} deleted (if it existed)")
    return 0


def main() -> int:
    """Console script entry point."""
    try:
        settings = Settings()
    except ValidationError as e:
        return set_failed(f"Invalid configuration: {e}")

    setup_logging(settings.log_level.upper())
    return asyncio.run(run(settings))


if __name__ == "__main__":
    sys.exit(main())
