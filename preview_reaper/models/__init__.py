"""Data models for the preview database reaper."""

from .connection import ConnectionDescriptor, DatabaseEngine
from .pull_request import PullRequestContext
from .result import ReapResult

__all__ = [
    # Pull request models
    "PullRequestContext",
    # Connection models
    "DatabaseEngine",
    "ConnectionDescriptor",
    # Result models
    "ReapResult",
]
