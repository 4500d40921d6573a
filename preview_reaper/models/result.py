"""Run result data models."""

from pydantic import BaseModel

from preview_reaper.models.connection import DatabaseEngine


class ReapResult(BaseModel):
    """Outcome of a successful reaper run."""

    pr_number: int
    branch: str
    database: str
    engine: DatabaseEngine
