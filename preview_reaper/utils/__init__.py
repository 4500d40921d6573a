"""
Utility modules for the preview database reaper.
"""

from preview_reaper.utils.errors import (
    ReaperError,
    ConfigurationError,
    PullRequestResolutionError,
    SecretRetrievalError,
    UnsafeDatabaseError,
    InvalidDatabaseURLError,
    UnsupportedEngineError,
    CommandFailedError,
)
from preview_reaper.utils.logging import (
    get_logger,
    setup_logging,
    log_phase_transition,
    log_api_call,
    log_command,
)

__all__ = [
    "ReaperError",
    "ConfigurationError",
    "PullRequestResolutionError",
    "SecretRetrievalError",
    "UnsafeDatabaseError",
    "InvalidDatabaseURLError",
    "UnsupportedEngineError",
    "CommandFailedError",
    "get_logger",
    "setup_logging",
    "log_phase_transition",
    "log_api_call",
    "log_command",
]
