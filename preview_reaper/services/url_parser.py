"""
Connection URL parsing.

Each engine has its own grammar, `<scheme>://<user>:<password>@<host>:<port>/<database>`,
tried in a fixed order: postgres first, then mysql.
"""

import re
from typing import List, Pattern, Tuple
from urllib.parse import unquote

from preview_reaper.models.connection import ConnectionDescriptor, DatabaseEngine
from preview_reaper.utils.errors import InvalidDatabaseURLError


def _grammar(scheme: str) -> Pattern[str]:
    return re.compile(
        rf"^{scheme}://(?P<user>[^:@/]+):(?P<password>[^@/]+)@(?P<host>[^:/?#]+):(?P<port>\d+)"
        r"/(?P<database>[^/?#]+)(?:[?#].*)?$"
    )


GRAMMARS: List[Tuple[DatabaseEngine, Pattern[str]]] = [
    (DatabaseEngine.POSTGRES, _grammar(r"postgres(?:ql)?")),
    (DatabaseEngine.MYSQL, _grammar(r"mysql")),
]


def parse_database_url(url: str) -> ConnectionDescriptor:
    """
    Parse a connection URL into a ConnectionDescriptor.

    User and password are percent-decoded; a trailing query string is ignored.

    Raises:
        InvalidDatabaseURLError: If no engine grammar matches
    """
    for engine, pattern in GRAMMARS:
        match = pattern.match(url)
        if match:
            return ConnectionDescriptor(
                engine=engine,
                user=unquote(match.group("user")),
                password=unquote(match.group("password")),
                host=match.group("host"),
                port=match.group("port"),
                database=match.group("database"),
            )
    raise InvalidDatabaseURLError()
