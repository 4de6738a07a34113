"""Configuration models and loading."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "telegram-api-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_UPSTREAM_URL = "https://api.telegram.org"


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    dashboard: bool = True


class UpstreamSettings(BaseModel):
    base_url: str = DEFAULT_UPSTREAM_URL
    timeout: float = 120.0
    max_connections: int = 100
    max_keepalive_connections: int = 20

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class AccessSettings(BaseModel):
    allowed_tokens: list[str] = Field(default_factory=list)

    @field_validator("allowed_tokens", mode="before")
    @classmethod
    def _split_tokens(cls, value: Any) -> Any:
        """Accept the comma-separated form used by ALLOWED_TOKENS."""
        if value is None:
            return []
        if isinstance(value, str):
            return parse_token_list(value)
        if isinstance(value, list):
            return [str(item).strip() for item in value]
        return value


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    access: AccessSettings = Field(default_factory=AccessSettings)


def parse_token_list(raw: str) -> list[str]:
    """Split a comma-separated token list, trimming each entry.

    An empty string means no allowlist. Blank entries are kept, so a value such
    as " , " yields an allowlist that permits no token.
    """
    if not raw:
        return []
    return [token.strip() for token in raw.split(",")]


def load_config(env: dict[str, str] | None = None) -> Config:
    """Load configuration from JSON file, creating default if needed.

    Environment overrides (ALLOWED_TOKENS, TELEGRAM_API_URL, PROXY_HOST,
    PROXY_PORT, UPSTREAM_TIMEOUT) are applied on top of the file.
    """
    config = _load_file_config()
    return apply_env_overrides(config, os.environ if env is None else env)


def apply_env_overrides(config: Config, env: dict[str, str]) -> Config:
    """Return a copy of config with environment overrides applied."""
    data = config.model_dump()

    if "ALLOWED_TOKENS" in env:
        data["access"]["allowed_tokens"] = env["ALLOWED_TOKENS"]
    if env.get("TELEGRAM_API_URL"):
        data["upstream"]["base_url"] = env["TELEGRAM_API_URL"]
    if env.get("PROXY_HOST"):
        data["proxy"]["host"] = env["PROXY_HOST"]
    if env.get("PROXY_PORT"):
        data["proxy"]["port"] = env["PROXY_PORT"]
    if env.get("UPSTREAM_TIMEOUT"):
        data["upstream"]["timeout"] = env["UPSTREAM_TIMEOUT"]

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid environment override: {e}") from e


def _load_file_config() -> Config:
    if not CONFIG_FILE.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(CONFIG_FILE.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = CONFIG_FILE.with_suffix(".json.bak")
        CONFIG_FILE.rename(backup)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default
