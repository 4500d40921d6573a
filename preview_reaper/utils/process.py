"""
External process execution.

Commands run from an argument vector, never through a shell, so branch-derived
text and secret values are passed to the child verbatim.
"""

import asyncio
import os
from typing import Dict, Optional, Sequence

from preview_reaper.utils.errors import CommandFailedError
from preview_reaper.utils.logging import get_logger, log_command


logger = get_logger(__name__)


async def run_command(
    argv: Sequence[str],
    env: Optional[Dict[str, str]] = None,
    secrets: Sequence[str] = (),
) -> str:
    """
    Run a command to completion and return its decoded stdout.

    Args:
        argv: Program and arguments
        env: Variables added to the child environment only; the parent
            process environment is left untouched
        secrets: Values masked when the command line is logged

    Returns:
        Standard output of the command

    Raises:
        CommandFailedError: If the program is missing or exits non-zero
    """
    child_env = dict(os.environ)
    if env:
        child_env.update(env)

    log_command(logger, argv, secrets)

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=child_env,
        )
    except OSError as e:
        raise CommandFailedError(argv[0], None, str(e)) from e

    stdout, stderr = await process.communicate()
    output = stdout.decode("utf-8", errors="replace")
    error_output = stderr.decode("utf-8", errors="replace")

    if process.returncode != 0:
        log_command(logger, argv, secrets, exit_code=process.returncode)
        raise CommandFailedError(argv[0], process.returncode, error_output)

    return output
