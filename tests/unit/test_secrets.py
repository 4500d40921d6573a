"""Unit tests for secret retrieval."""

import httpx
import pytest
from unittest.mock import AsyncMock

from preview_reaper.services.secrets import (
    DopplerSecretProvider,
    VaultCliSecretProvider,
    extract_database_url,
    fetch_database_url,
    select_secret_provider,
)
from preview_reaper.utils.errors import (
    CommandFailedError,
    ConfigurationError,
    SecretRetrievalError,
)


BUNDLE = "API_KEY=abc\nDATABASE_URL=postgres://u:p@h:5432/app_preview\nDEBUG=false\n"


class TestExtractDatabaseUrl:
    """Tests for extract_database_url."""

    def test_plain_value(self):
        assert extract_database_url(BUNDLE) == "postgres://u:p@h:5432/app_preview"

    @pytest.mark.parametrize("quote", ["'", '"'])
    def test_strips_surrounding_quotes(self, quote):
        bundle = f"DATABASE_URL={quote}postgres://u:p@h:5432/app_preview{quote}\n"
        assert extract_database_url(bundle) == "postgres://u:p@h:5432/app_preview"

    def test_handles_crlf_line_endings(self):
        bundle = "A=1\r\nDATABASE_URL=mysql://u:p@h:3306/app_preview\r\n"
        assert extract_database_url(bundle) == "mysql://u:p@h:3306/app_preview"

    def test_ignores_prefixed_keys(self):
        bundle = "SHADOW_DATABASE_URL=postgres://u:p@h:5432/shadow_dev\n"
        with pytest.raises(SecretRetrievalError, match="Failed to extract DATABASE_URL"):
            extract_database_url(bundle)

    @pytest.mark.parametrize("bundle", ["", "API_KEY=abc\n", "DATABASE_URL=\n", "DATABASE_URL=''\n"])
    def test_missing_value_fails(self, bundle):
        with pytest.raises(SecretRetrievalError, match="Failed to extract DATABASE_URL"):
            extract_database_url(bundle)


class TestDopplerSecretProvider:
    """Tests for the Doppler HTTP provider."""

    @pytest.mark.asyncio
    async def test_downloads_env_formatted_secrets(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text=BUNDLE)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            provider = DopplerSecretProvider(
                token="dp.st.token", project="web", config="dev", client=client
            )
            assert await provider.fetch() == BUNDLE

        request = requests[0]
        assert request.method == "GET"
        assert request.url.host == "api.doppler.com"
        assert request.url.path == "/v3/configs/config/secrets/download"
        assert request.url.params["project"] == "web"
        assert request.url.params["config"] == "dev"
        assert request.url.params["format"] == "env"
        assert request.headers["Authorization"] == "Bearer dp.st.token"

    @pytest.mark.asyncio
    async def test_error_status_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"messages": ["Invalid token"]})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            provider = DopplerSecretProvider(
                token="bad", project="web", config="dev", client=client
            )
            with pytest.raises(httpx.HTTPStatusError):
                await provider.fetch()


class TestVaultCliSecretProvider:
    """Tests for the dotenv-vault CLI provider."""

    @pytest.mark.asyncio
    async def test_decrypts_with_ci_key(self):
        runner = AsyncMock(side_effect=["dotenv://:key_1234@dotenv.org/vault/.env.vault?environment=ci\n", BUNDLE])
        provider = VaultCliSecretProvider("me_secret", runner=runner)

        assert await provider.fetch() == BUNDLE

        first, second = runner.await_args_list
        assert first.args[0] == ["dotenv-vault", "keys", "ci"]
        assert first.kwargs["env"] == {"DOTENV_ME": "me_secret"}
        assert second.args[0] == [
            "dotenv-vault", "decrypt",
            "dotenv://:key_1234@dotenv.org/vault/.env.vault?environment=ci",
        ]
        assert "me_secret" in second.kwargs["secrets"]

    @pytest.mark.asyncio
    async def test_empty_key_fails(self):
        runner = AsyncMock(return_value="  \n")
        provider = VaultCliSecretProvider("me_secret", runner=runner)

        with pytest.raises(SecretRetrievalError):
            await provider.fetch()
        runner.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_command_failure_propagates(self):
        runner = AsyncMock(side_effect=CommandFailedError("dotenv-vault", 1, "not logged in"))
        provider = VaultCliSecretProvider("me_secret", runner=runner)

        with pytest.raises(CommandFailedError, match="not logged in"):
            await provider.fetch()


class TestSelectSecretProvider:
    """Tests for provider selection."""

    def test_doppler_selected_when_token_set(self, make_settings):
        settings = make_settings(doppler_token="dp", github_repository="acme/web", dotenv_me="me")
        provider = select_secret_provider(settings, client=AsyncMock())

        assert isinstance(provider, DopplerSecretProvider)
        assert provider.project == "web"
        assert provider.config == "dev"

    def test_vault_selected_when_only_dotenv_me_set(self, make_settings):
        provider = select_secret_provider(make_settings(dotenv_me="me"), client=AsyncMock())

        assert isinstance(provider, VaultCliSecretProvider)
        assert provider.dotenv_me == "me"

    def test_no_credential_fails(self, make_settings):
        with pytest.raises(ConfigurationError, match="DOPPLER_TOKEN or DOTENV_ME is not set"):
            select_secret_provider(make_settings(), client=AsyncMock())

    def test_doppler_without_project_fails(self, make_settings):
        with pytest.raises(ConfigurationError, match="DOPPLER_PROJECT is not set"):
            select_secret_provider(make_settings(doppler_token="dp"), client=AsyncMock())


@pytest.mark.asyncio
async def test_fetch_database_url_uses_provider():
    provider = VaultCliSecretProvider("me", runner=AsyncMock(side_effect=["key\n", BUNDLE]))

    assert await fetch_database_url(provider) == "postgres://u:p@h:5432/app_preview"
