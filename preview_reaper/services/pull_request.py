"""
Pull request resolution.

The pull request comes from the triggering event payload when the workflow
runs on a pull_request event, or is fetched from the GitHub REST API by number
otherwise (e.g. workflow_dispatch with a PR_NUMBER input).
"""

import json
import time
from typing import Any, Dict, Optional

import httpx

from preview_reaper.config import Settings
from preview_reaper.models.pull_request import PullRequestContext
from preview_reaper.utils.errors import ConfigurationError, PullRequestResolutionError
from preview_reaper.utils.logging import get_logger, log_api_call


logger = get_logger(__name__)


class PullRequestResolver:
    """Resolves the pull request context for the current run."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    def load_event_payload(self) -> Dict[str, Any]:
        """Read the triggering event payload; empty when the runner provides none."""
        path = self.settings.github_event_path
        if not path:
            return {}
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    async def resolve(self, payload: Optional[Dict[str, Any]] = None) -> PullRequestContext:
        """
        Resolve the pull request.

        Args:
            payload: Event payload; read from GITHUB_EVENT_PATH when omitted

        Returns:
            PullRequestContext for the run

        Raises:
            PullRequestResolutionError: If neither the payload nor PR_NUMBER
                identifies a pull request
            ConfigurationError: If the API lookup is needed but GITHUB_TOKEN
                or GITHUB_REPOSITORY is missing
            httpx.HTTPStatusError: If the API lookup fails
        """
        if payload is None:
            payload = self.load_event_payload()

        pull_request = payload.get("pull_request")
        if pull_request:
            context = PullRequestContext.from_github(pull_request)
            logger.info(f"Using pull request #{context.number} from event payload")
            return context

        if self.settings.pr_number is None:
            raise PullRequestResolutionError(
                "Could not determine pull request: event has no pull_request and PR_NUMBER is not set"
            )

        return await self.fetch(self.settings.pr_number)

    async def fetch(self, number: int) -> PullRequestContext:
        """Fetch a pull request by number from the GitHub REST API."""
        if not self.settings.github_token:
            raise ConfigurationError("GITHUB_TOKEN")
        if not self.settings.github_repository:
            raise ConfigurationError("GITHUB_REPOSITORY")

        endpoint = f"/repos/{self.settings.github_repository}/pulls/{number}"
        start_time = time.time()
        response = await self.client.get(
            f"{self.settings.github_api_url.rstrip('/')}{endpoint}",
            headers={
                "Authorization": f"Bearer {self.settings.github_token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )
        duration_ms = (time.time() - start_time) * 1000

        if response.is_error:
            log_api_call(
                logger, service="github", endpoint=endpoint, method="GET",
                status_code=response.status_code, duration_ms=duration_ms,
                error=response.reason_phrase,
            )
            response.raise_for_status()

        log_api_call(
            logger, service="github", endpoint=endpoint, method="GET",
            status_code=response.status_code, duration_ms=duration_ms,
        )
        return PullRequestContext.from_github(response.json())
