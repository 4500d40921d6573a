"""
Secret retrieval.

Two interchangeable providers return the env-formatted secret bundle:
- VaultCliSecretProvider shells out to the dotenv-vault CLI
- DopplerSecretProvider downloads the bundle from the Doppler API

Only the DATABASE_URL line of the bundle is used.
"""

import re
import time
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Sequence

import httpx

from preview_reaper.config import Settings
from preview_reaper.utils.errors import ConfigurationError, SecretRetrievalError
from preview_reaper.utils.logging import get_logger, log_api_call
from preview_reaper.utils.process import run_command


logger = get_logger(__name__)

CommandRunner = Callable[..., Awaitable[str]]

DATABASE_URL_PATTERN = re.compile(r"^DATABASE_URL=(.*)$", re.MULTILINE)


class SecretProvider(ABC):
    """Source of the env-formatted secret bundle."""

    name: str = "secrets"

    @abstractmethod
    async def fetch(self) -> str:
        """Return the secret bundle as text."""


class VaultCliSecretProvider(SecretProvider):
    """Decrypts the CI environment with the dotenv-vault CLI."""

    name = "dotenv-vault"

    def __init__(self, dotenv_me: str, runner: CommandRunner = run_command):
        self.dotenv_me = dotenv_me
        self.runner = runner

    async def fetch(self) -> str:
        env = {"DOTENV_ME": self.dotenv_me}
        secrets: Sequence[str] = (self.dotenv_me,)

        ci_key = (await self.runner(["dotenv-vault", "keys", "ci"], env=env, secrets=secrets)).strip()
        if not ci_key:
            raise SecretRetrievalError("dotenv-vault returned no CI key")

        return await self.runner(
            ["dotenv-vault", "decrypt", ci_key],
            env=env,
            secrets=(self.dotenv_me, ci_key),
        )


class DopplerSecretProvider(SecretProvider):
    """Downloads the config's secrets from the Doppler API in env format."""

    name = "doppler"
    DOWNLOAD_ENDPOINT = "/v3/configs/config/secrets/download"

    def __init__(
        self,
        token: str,
        project: str,
        config: str,
        client: httpx.AsyncClient,
        api_url: str = "https://api.doppler.com",
    ):
        self.token = token
        self.project = project
        self.config = config
        self.client = client
        self.api_url = api_url.rstrip("/")

    async def fetch(self) -> str:
        start_time = time.time()
        response = await self.client.get(
            f"{self.api_url}{self.DOWNLOAD_ENDPOINT}",
            params={"project": self.project, "config": self.config, "format": "env"},
            headers={"Authorization": f"Bearer {self.token}"},
        )
        duration_ms = (time.time() - start_time) * 1000

        if response.is_error:
            log_api_call(
                logger, service="doppler", endpoint=self.DOWNLOAD_ENDPOINT, method="GET",
                status_code=response.status_code, duration_ms=duration_ms,
                error=response.reason_phrase,
            )
            response.raise_for_status()

        log_api_call(
            logger, service="doppler", endpoint=self.DOWNLOAD_ENDPOINT, method="GET",
            status_code=response.status_code, duration_ms=duration_ms,
        )
        return response.text


def select_secret_provider(
    settings: Settings,
    client: httpx.AsyncClient,
    runner: CommandRunner = run_command,
) -> SecretProvider:
    """
    Pick the provider whose credential is configured.

    Doppler wins when both credentials are present.

    Raises:
        ConfigurationError: If no provider credential is configured, or the
            Doppler project cannot be determined
    """
    if settings.doppler_token:
        project = settings.doppler_project_name
        if not project:
            raise ConfigurationError("DOPPLER_PROJECT")
        return DopplerSecretProvider(
            token=settings.doppler_token,
            project=project,
            config=settings.doppler_config,
            client=client,
            api_url=settings.doppler_api_url,
        )
    if settings.dotenv_me:
        return VaultCliSecretProvider(settings.dotenv_me, runner=runner)
    raise ConfigurationError("DOPPLER_TOKEN or DOTENV_ME")


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def extract_database_url(bundle: str) -> str:
    """
    Pull the DATABASE_URL value out of an env-formatted bundle.

    Raises:
        SecretRetrievalError: If no non-empty DATABASE_URL line exists
    """
    match = DATABASE_URL_PATTERN.search(bundle)
    value: Optional[str] = _strip_quotes(match.group(1).strip()) if match else None
    if not value:
        raise SecretRetrievalError("Failed to extract DATABASE_URL")
    return value


async def fetch_database_url(provider: SecretProvider) -> str:
    """Fetch the bundle from provider and return its DATABASE_URL."""
    logger.info(f"Fetching secrets with {provider.name}")
    return extract_database_url(await provider.fetch())
