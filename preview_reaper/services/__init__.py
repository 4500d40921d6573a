"""Reaper services package."""

from preview_reaper.services.drop_executor import DropExecutor, build_command, build_drop_statement
from preview_reaper.services.naming import (
    derive_database_name,
    derive_database_url,
    sanitize_branch_name
)
from preview_reaper.services.pull_request import PullRequestResolver
from preview_reaper.services.reaper import PreviewDatabaseReaper
from preview_reaper.services.safety import SafetyGate
from preview_reaper.services.secrets import (
    DopplerSecretProvider,
    SecretProvider,
    VaultCliSecretProvider,
    extract_database_url,
    select_secret_provider
)
from preview_reaper.services.url_parser import parse_database_url

__all__ = [
    'DropExecutor',
    'build_command',
    'build_drop_statement',
    'derive_database_name',
    'derive_database_url',
    'sanitize_branch_name',
    'PullRequestResolver',
    'PreviewDatabaseReaper',
    'SafetyGate',
    'SecretProvider',
    'DopplerSecretProvider',
    'VaultCliSecretProvider',
    'extract_database_url',
    'select_secret_provider',
    'parse_database_url'
]
