"""
Preview database reaper.

Runs the cleanup flow for one pull request, strictly in order:
resolve pull request, fetch DATABASE_URL, derive the preview database name,
safety gate, parse the connection URL, drop.
"""

from typing import Optional

import httpx

from preview_reaper.config import Settings
from preview_reaper.models.result import ReapResult
from preview_reaper.services.drop_executor import DropExecutor
from preview_reaper.services.naming import derive_database_name, derive_database_url
from preview_reaper.services.pull_request import PullRequestResolver
from preview_reaper.services.safety import SafetyGate
from preview_reaper.services.secrets import SecretProvider, fetch_database_url, select_secret_provider
from preview_reaper.services.url_parser import parse_database_url
from preview_reaper.utils.actions import add_mask
from preview_reaper.utils.logging import get_logger, log_phase_transition


class PreviewDatabaseReaper:
    """Deletes the preview database belonging to a pull request branch."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        secret_provider: Optional[SecretProvider] = None,
        executor: Optional[DropExecutor] = None,
        safety_gate: Optional[SafetyGate] = None,
    ):
        """
        Args:
            settings: Run configuration
            client: HTTP client shared by the GitHub and Doppler calls
            secret_provider: Provider override; selected from settings when omitted
            executor: Drop executor override
            safety_gate: Safety gate override; built from settings when omitted
        """
        self.settings = settings
        self.client = client
        self.resolver = PullRequestResolver(settings, client)
        self.secret_provider = secret_provider
        self.executor = executor or DropExecutor()
        self.safety_gate = safety_gate or SafetyGate(settings.require_preview_suffix)
        self.logger = get_logger(__name__)

    async def run(self) -> ReapResult:
        """
        Execute the cleanup flow.

        Returns:
            ReapResult naming the dropped database

        Raises:
            ReaperError: On any failed step
            httpx.HTTPError: If a GitHub or Doppler API call fails
        """
        log_phase_transition(self.logger, "resolve_pull_request", "started")
        pull_request = await self.resolver.resolve()
        self.logger = self.logger.with_context(pr_number=pull_request.number)
        log_phase_transition(self.logger, "resolve_pull_request", "completed")

        log_phase_transition(self.logger, "fetch_secrets", "started")
        provider = self.secret_provider or select_secret_provider(self.settings, self.client)
        base_url = await fetch_database_url(provider)
        log_phase_transition(self.logger, "fetch_secrets", "completed")

        database = derive_database_name(base_url, pull_request.head_ref)
        self.logger = self.logger.with_context(database=database)
        self.logger.info(f"Derived database name {database} from branch {pull_request.head_ref}")

        log_phase_transition(self.logger, "safety_check", "started")
        self.safety_gate.check(database)
        log_phase_transition(self.logger, "safety_check", "completed")

        descriptor = parse_database_url(derive_database_url(base_url, pull_request.head_ref))
        add_mask(descriptor.password.get_secret_value())

        log_phase_transition(self.logger, "drop", "started")
        await self.executor.drop(descriptor)
        log_phase_transition(self.logger, "drop", "completed")

        return ReapResult(
            pr_number=pull_request.number,
            branch=pull_request.head_ref,
            database=descriptor.database,
            engine=descriptor.engine,
        )
