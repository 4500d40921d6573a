"""
Drop executor.

Issues `DROP DATABASE IF EXISTS` through the engine's command line client.
The statement is idempotent: a database that is already gone is not an error.
"""

from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from preview_reaper.models.connection import ConnectionDescriptor, DatabaseEngine
from preview_reaper.services.safety import SAFE_IDENTIFIER
from preview_reaper.utils.errors import UnsafeDatabaseError, UnsupportedEngineError
from preview_reaper.utils.logging import get_logger
from preview_reaper.utils.process import run_command


logger = get_logger(__name__)

Command = Tuple[List[str], Optional[Dict[str, str]]]


def build_drop_statement(database: str) -> str:
    if not SAFE_IDENTIFIER.fullmatch(database):
        raise UnsafeDatabaseError(database, "a database with an unsafe name")
    return f"DROP DATABASE IF EXISTS {database}"


def _postgres_command(descriptor: ConnectionDescriptor, statement: str) -> Command:
    argv = [
        "psql",
        "-h", descriptor.host,
        "-p", descriptor.port,
        "-U", descriptor.user,
        "-c", statement,
    ]
    return argv, {"PGPASSWORD": descriptor.password.get_secret_value()}


def _mysql_command(descriptor: ConnectionDescriptor, statement: str) -> Command:
    argv = [
        "mysql",
        "-h", descriptor.host,
        "-P", descriptor.port,
        "-u", descriptor.user,
        f"-p{descriptor.password.get_secret_value()}",
        "-e", statement,
    ]
    return argv, None


COMMAND_BUILDERS: Dict[DatabaseEngine, Callable[[ConnectionDescriptor, str], Command]] = {
    DatabaseEngine.POSTGRES: _postgres_command,
    DatabaseEngine.MYSQL: _mysql_command,
}


def build_command(descriptor: ConnectionDescriptor) -> Command:
    """
    Build the client invocation that drops descriptor.database.

    Returns:
        Argument vector and the extra child environment (None when unused)

    Raises:
        UnsupportedEngineError: If the engine has no client command
    """
    builder = COMMAND_BUILDERS.get(descriptor.engine)
    if builder is None:
        raise UnsupportedEngineError(descriptor.engine)
    return builder(descriptor, build_drop_statement(descriptor.database))


class DropExecutor:
    """Drops a database through the engine's command line client."""

    def __init__(self, runner: Callable[..., Awaitable[str]] = run_command):
        self.runner = runner

    async def drop(self, descriptor: ConnectionDescriptor) -> None:
        """
        Drop descriptor.database.

        Raises:
            UnsupportedEngineError: If the engine is not supported
            CommandFailedError: If the client exits non-zero
        """
        argv, env = build_command(descriptor)
        logger.info(
            f"Dropping database {descriptor.database}",
            extra={"database": descriptor.database, "engine": descriptor.engine.value},
        )
        await self.runner(argv, env=env, secrets=(descriptor.password.get_secret_value(),))
