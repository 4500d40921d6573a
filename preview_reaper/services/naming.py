"""
Per-branch database naming.

A preview database is named after the base database in DATABASE_URL with its
trailing `_<suffix>` segment replaced by the sanitized branch name:
`app_staging` on branch `Feature/ABC-123` becomes `app_feature_abc_123`.
"""

import re
from typing import NamedTuple

from preview_reaper.utils.errors import InvalidDatabaseURLError, UnsafeDatabaseError


_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")
_TRAILING_SEGMENT = re.compile(r"_[^_]*$")
# scheme://authority/ | database | ?query or #fragment
_URL_PARTS = re.compile(r"^(?P<prefix>[^:/?#]+://[^/?#]*/)(?P<database>[^?#]*)(?P<suffix>[?#].*)?$")


class UrlParts(NamedTuple):
    prefix: str
    database: str
    suffix: str


def sanitize_branch_name(branch: str) -> str:
    """Lower-case branch and replace every non-alphanumeric character with `_`."""
    return _NON_ALPHANUMERIC.sub("_", branch).lower()


def split_database_url(url: str) -> UrlParts:
    """Split a connection URL around its database path component."""
    match = _URL_PARTS.match(url)
    if not match or not match.group("database"):
        raise InvalidDatabaseURLError()
    return UrlParts(match.group("prefix"), match.group("database"), match.group("suffix") or "")


def derive_database_name(url: str, branch: str) -> str:
    """
    Derive the preview database name for branch from the base URL.

    Only the database component is rewritten, so underscores in the
    credentials or host never take part in the substitution.

    Raises:
        InvalidDatabaseURLError: If the URL has no database component
        UnsafeDatabaseError: If the base name has no `_<suffix>` segment to
            replace, which would make the base database the target
    """
    base = split_database_url(url).database
    if not _TRAILING_SEGMENT.search(base):
        raise UnsafeDatabaseError(base, "a base database with no _<suffix> segment to replace")
    return _TRAILING_SEGMENT.sub(lambda _: f"_{sanitize_branch_name(branch)}", base)


def derive_database_url(url: str, branch: str) -> str:
    """Return url pointing at the preview database for branch."""
    parts = split_database_url(url)
    return f"{parts.prefix}{derive_database_name(url, branch)}{parts.suffix}"
