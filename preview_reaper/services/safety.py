"""
Safety gate for destructive operations.

Runs on the derived database name before credentials are parsed or any
external command is issued.
"""

import re

from preview_reaper.utils.errors import UnsafeDatabaseError
from preview_reaper.utils.logging import get_logger


logger = get_logger(__name__)

PROTECTED_SUFFIX = re.compile(r"_(dev|staging|prod)$")
PREVIEW_SUFFIX = re.compile(r"_preview$")
SAFE_IDENTIFIER = re.compile(r"[A-Za-z0-9_]+")


class SafetyGate:
    """Refuses to let anything but an ephemeral preview database through."""

    def __init__(self, require_preview_suffix: bool = True):
        self.require_preview_suffix = require_preview_suffix

    def check(self, database: str) -> None:
        """
        Validate database as a drop target.

        Raises:
            UnsafeDatabaseError: If the name is protected, lacks the preview
                suffix (when required), or is not a plain identifier
        """
        if PROTECTED_SUFFIX.search(database):
            raise UnsafeDatabaseError(database, "a protected database")

        if self.require_preview_suffix and not PREVIEW_SUFFIX.search(database):
            raise UnsafeDatabaseError(database, "a non-preview database")

        # The name is interpolated into DROP DATABASE, which takes no parameters.
        if not SAFE_IDENTIFIER.fullmatch(database):
            raise UnsafeDatabaseError(database, "a database with an unsafe name")

        logger.info(f"Safety checks passed for {database}", extra={"database": database})
