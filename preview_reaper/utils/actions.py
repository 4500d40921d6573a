"""
GitHub Actions workflow commands.

The runner reads `::command::` lines from stdout and step outputs from the
file named by GITHUB_OUTPUT.
"""

import os
import sys
from typing import Optional, TextIO


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(command: str, message: str, stream: Optional[TextIO] = None) -> None:
    """Write a single workflow command line."""
    stream = stream or sys.stdout
    stream.write(f"::{command}::{_escape_data(message)}\n")
    stream.flush()


def set_failed(message: str, stream: Optional[TextIO] = None) -> int:
    """
    Report the step as failed.

    Returns:
        The exit code the process should terminate with
    """
    issue_command("error", message, stream)
    return 1


def add_mask(value: str, stream: Optional[TextIO] = None) -> None:
    """Ask the runner to redact value from all later log output."""
    if value:
        issue_command("add-mask", value, stream)


def set_output(name: str, value: str) -> None:
    """Append a step output; does nothing outside a runner."""
    path = os.environ.get("GITHUB_OUTPUT")
    if not path:
        return
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{name}={value}\n")
