"""Configuration settings for the ApoloHRA service.

Settings are read from the process environment once, at start-up, and the
resulting objects are passed by reference to whatever needs them.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import URL


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings for the Esmeralda monitor database."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    database: str = "testEsmeraldos"
    password: str = ""
    driver: str = "mysql+pymysql"

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Build database settings from DBHOST, DBPORT, DBUSER, DB, DBPASSWORD and DBDRIVER."""
        return cls(
            host=os.environ.get("DBHOST", "localhost"),
            port=int(os.environ.get("DBPORT", "3306")),
            user=os.environ.get("DBUSER", "root"),
            database=os.environ.get("DB", "testEsmeraldos"),
            password=os.environ.get("DBPASSWORD", ""),
            driver=os.environ.get("DBDRIVER", "mysql+pymysql"),
        )

    @property
    def uri(self) -> URL:
        return URL.create(
            drivername=self.driver,
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def safe_uri(self) -> str:
        """Connection URI with the password masked, for logging."""
        return self.uri.render_as_string(hide_password=True)


@dataclass(frozen=True)
class AuthConfig:
    """Bearer token validation settings."""
    secret: str = ""
    algorithm: str = "HS256"
    audience: Optional[str] = None
    issuer: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AuthConfig":
        return cls(
            secret=os.environ.get("APOLOHRA_JWT_SECRET", ""),
            algorithm=os.environ.get("APOLOHRA_JWT_ALGORITHM", "HS256"),
            audience=os.environ.get("APOLOHRA_JWT_AUDIENCE") or None,
            issuer=os.environ.get("APOLOHRA_JWT_ISSUER") or None,
        )


@dataclass(frozen=True)
class ApiConfig:
    """Top-level settings handed to the API factory."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    expose_error_detail: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ApiConfig":
        return cls(
            database=DatabaseConfig.from_env(),
            auth=AuthConfig.from_env(),
            expose_error_detail=_env_flag("APOLOHRA_EXPOSE_ERROR_DETAIL"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
