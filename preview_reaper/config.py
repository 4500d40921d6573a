"""
Reaper configuration management.
"""

from typing import Optional

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings


def _ci_input(name: str) -> AliasChoices:
    # Action inputs arrive as INPUT_<NAME>; the plain variable is the fallback.
    return AliasChoices(f"INPUT_{name}", name)


class Settings(BaseSettings):
    """Reaper settings loaded from action inputs and environment variables."""

    # Credentials
    github_token: Optional[str] = Field(default=None, validation_alias=_ci_input("GITHUB_TOKEN"))
    doppler_token: Optional[str] = Field(default=None, validation_alias=_ci_input("DOPPLER_TOKEN"))
    dotenv_me: Optional[str] = Field(default=None, validation_alias=_ci_input("DOTENV_ME"))

    # Secrets provider
    doppler_project: Optional[str] = Field(default=None, validation_alias=_ci_input("DOPPLER_PROJECT"))
    doppler_config: str = Field(default="dev", validation_alias=_ci_input("DOPPLER_CONFIG"))
    doppler_api_url: str = Field(default="https://api.doppler.com", validation_alias="DOPPLER_API_URL")

    # Pull request context
    pr_number: Optional[int] = Field(default=None, validation_alias=_ci_input("PR_NUMBER"))
    github_repository: Optional[str] = Field(default=None, validation_alias="GITHUB_REPOSITORY")
    github_event_path: Optional[str] = Field(default=None, validation_alias="GITHUB_EVENT_PATH")
    github_api_url: str = Field(default="https://api.github.com", validation_alias="GITHUB_API_URL")

    # Safety
    require_preview_suffix: bool = Field(
        default=True, validation_alias=_ci_input("REQUIRE_PREVIEW_SUFFIX")
    )

    # Application
    http_timeout_seconds: float = Field(default=30.0, validation_alias="HTTP_TIMEOUT_SECONDS")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    class Config:
        case_sensitive = False
        extra = "ignore"
        env_ignore_empty = True
        populate_by_name = True

    @field_validator(
        "github_token", "doppler_token", "dotenv_me", "doppler_project", "pr_number",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, value):
        # Actions exports every declared input, empty when not provided.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("doppler_config", "require_preview_suffix", mode="before")
    @classmethod
    def _blank_uses_default(cls, value, info: ValidationInfo):
        if isinstance(value, str) and not value.strip():
            return cls.model_fields[info.field_name].default
        return value

    @property
    def doppler_project_name(self) -> Optional[str]:
        """Doppler project, defaulting to the repository name."""
        if self.doppler_project:
            return self.doppler_project
        if self.github_repository and "/" in self.github_repository:
            return self.github_repository.split("/", 1)[1]
        return None

