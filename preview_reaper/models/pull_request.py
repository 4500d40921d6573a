"""Pull request data models."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class PullRequestContext(BaseModel):
    """Pull request the run is cleaning up after."""

    model_config = ConfigDict(frozen=True)

    number: int
    base_ref: str
    head_ref: str

    @classmethod
    def from_github(cls, pull_request: Dict[str, Any]) -> "PullRequestContext":
        """Build from a GitHub pull request object (event payload or REST API)."""
        return cls(
            number=pull_request["number"],
            base_ref=pull_request["base"]["ref"],
            head_ref=pull_request["head"]["ref"],
        )
