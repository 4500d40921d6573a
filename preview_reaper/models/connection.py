"""Database connection data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, SecretStr


class DatabaseEngine(str, Enum):
    """Database engines the reaper can drop databases on."""

    POSTGRES = "postgres"
    MYSQL = "mysql"


class ConnectionDescriptor(BaseModel):
    """Parsed components of a database connection URL."""

    model_config = ConfigDict(frozen=True)

    engine: DatabaseEngine
    user: str
    password: SecretStr
    host: str
    port: str
    database: str
