"""Error types for the preview database reaper.

Every failure is fatal for the run. Services raise these and the entry
point turns them into a failed CI step.
"""

from typing import Optional


class ReaperError(Exception):
    """Base exception for reaper errors."""

    pass


class ConfigurationError(ReaperError):
    """Raised when a required credential or runner variable is missing."""

    def __init__(self, name: str):
        super().__init__(f"{name} is not set")
        self.name = name


class PullRequestResolutionError(ReaperError):
    """Raised when the pull request for this run cannot be determined."""

    pass


class SecretRetrievalError(ReaperError):
    """Raised when the secret bundle is unusable."""

    pass


class UnsafeDatabaseError(ReaperError):
    """Raised when the safety gate refuses a database name."""

    def __init__(self, database: str, reason: str):
        super().__init__(f"Error: Attempting to drop {reason} ({database}). Operation aborted.")
        self.database = database


class InvalidDatabaseURLError(ReaperError):
    """Raised when a connection URL matches no known engine grammar."""

    def __init__(self):
        super().__init__("Invalid database URL format")


class UnsupportedEngineError(ReaperError):
    """Raised when no drop command exists for an engine."""

    def __init__(self, engine: object):
        super().__init__(f"Unsupported database type: {engine}")
        self.engine = engine


class CommandFailedError(ReaperError):
    """Raised when an external command cannot start or exits non-zero."""

    def __init__(self, command: str, exit_code: Optional[int], stderr: str = ""):
        detail = stderr.strip() or "no output"
        if exit_code is None:
            message = f"{command} could not be started: {detail}"
        else:
            message = f"{command} exited with code {exit_code}: {detail}"
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
