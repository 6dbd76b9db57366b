"""Process settings for the QuickBase MCP server and HTTP API."""

from __future__ import annotations

from typing import Any, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from QBMCP.client import QuickBaseConfig
from QBMCP.policy import ToolPolicy
from QBMCP.utils.env_config import load_env_file, parse_flag

REQUIRED_ENV_VARS = ("QB_REALM", "QB_USER_TOKEN", "QB_APP_ID")


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing."""
    pass


class Settings(BaseSettings):
    """Application settings.

    Read from the process environment; ``load_env_file`` fills the environment
    from a .env file (working directory first, then the project root) before
    this class is instantiated.
    """
    
    model_config = SettingsConfigDict(
        extra="ignore"  # Ignore extra environment variables
    )
    
    # QuickBase
    qb_realm: str = ""
    qb_user_token: str = ""
    qb_app_id: str = ""
    qb_default_timeout: int = 30000  # milliseconds
    qb_max_retries: int = 3
    
    # Access policy
    qb_readonly: bool = False
    qb_allow_destructive: bool = False
    
    # Server identity
    mcp_server_name: str = "quickbase-mcp"
    mcp_server_version: str = "1.0.0"
    qb_log_level: str = "INFO"
    
    # HTTP API
    api_title: str = "QuickBase MCP HTTP API"
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    
    @field_validator("qb_readonly", "qb_allow_destructive", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> bool:
        # Unknown spellings mean "off"
        return parse_flag(value, default=False)
    
    @field_validator("qb_default_timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> int:
        try:
            parsed = int(str(value).strip())
        except (TypeError, ValueError):
            return 30000
        return parsed if parsed > 0 else 30000
    
    @field_validator("qb_max_retries", mode="before")
    @classmethod
    def _parse_retries(cls, value: Any) -> int:
        try:
            parsed = int(str(value).strip())
        except (TypeError, ValueError):
            return 3
        return min(max(parsed, 0), 10)
    
    def missing_credentials(self) -> List[str]:
        values = (self.qb_realm, self.qb_user_token, self.qb_app_id)
        return [name for name, value in zip(REQUIRED_ENV_VARS, values) if not value.strip()]
    
    def require_credentials(self) -> None:
        if self.missing_credentials():
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(REQUIRED_ENV_VARS)}"
            )
    
    def to_quickbase_config(self) -> QuickBaseConfig:
        self.require_credentials()
        return QuickBaseConfig(
            realm=self.qb_realm.strip(),
            user_token=self.qb_user_token.strip(),
            app_id=self.qb_app_id.strip(),
            timeout=self.qb_default_timeout,
            max_retries=self.qb_max_retries,
        )
    
    def to_policy(self) -> ToolPolicy:
        return ToolPolicy(read_only=self.qb_readonly, allow_destructive=self.qb_allow_destructive)


def load_settings() -> Settings:
    """Load .env (if any) into the environment, then read settings."""
    load_env_file()
    return Settings()


settings = load_settings()
