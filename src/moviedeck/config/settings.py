from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

CONFIG_PATH_ENV = "MOVIEDECK_CONFIG"
DEFAULT_BASE_URL = "https://api4.thetvdb.com/v4"


class Settings(BaseModel):
    """Application configuration resolved from env vars and optional TOML files."""

    tvdb_api_key: str | None = Field(default=None, alias="TVDB_API_KEY")
    tvdb_pin: str | None = Field(default=None, alias="TVDB_PIN")
    tvdb_base_url: str = Field(default=DEFAULT_BASE_URL, alias="TVDB_BASE_URL")
    request_timeout: float = Field(default=20.0, gt=0, alias="TVDB_TIMEOUT")
    retry_attempts: int = Field(default=2, ge=1, alias="TVDB_RETRY_ATTEMPTS")

    # TVDB tokens live for 24 hours; refresh an hour early
    token_lifetime_hours: float = Field(default=24.0, gt=0, alias="TVDB_TOKEN_LIFETIME_HOURS")
    token_margin_hours: float = Field(default=1.0, ge=0, alias="TVDB_TOKEN_MARGIN_HOURS")

    page_size: int = Field(default=10, ge=1, alias="MOVIEDECK_PAGE_SIZE")
    corpus_path: Path | None = Field(default=None, alias="MOVIEDECK_CORPUS_PATH")

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    def require_tvdb(self) -> None:
        """Ensure TVDB connection settings are available."""
        if not self.tvdb_api_key:
            raise SettingsError(
                "Missing TVDB_API_KEY. Configure environment or TOML file.",
            )


class SettingsError(RuntimeError):
    """Raised when configuration cannot be resolved."""


@dataclass(frozen=True)
class SettingsLoadResult:
    settings: Settings
    source_path: Path | None


def load_settings(config_path: Path | None = None, *, load_env: bool = True) -> SettingsLoadResult:
    """Load settings from .env files, environment variables, and optional TOML configuration."""

    if load_env:
        load_dotenv()

    resolved_path = _determine_config_path(config_path)
    config_data: dict[str, Any] = {}

    if resolved_path and resolved_path.exists():
        try:
            with resolved_path.open("rb") as handle:
                toml_payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise SettingsError(f"Invalid TOML in {resolved_path}: {exc}") from exc
        config_data = _flatten_toml(toml_payload)

    try:
        env_data = _collect_env_overrides()
    except ValueError as exc:
        raise SettingsError(f"Invalid environment override: {exc}") from exc
    merged = {**config_data, **env_data}

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as exc:  # pragma: no cover - surfaced via CLI messaging
        raise SettingsError(str(exc)) from exc

    return SettingsLoadResult(settings=settings, source_path=resolved_path)


def _determine_config_path(config_path: Path | None) -> Path | None:
    if config_path:
        return config_path

    env_override = os.getenv(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()

    default_path = Path.home() / ".config" / "moviedeck" / "config.toml"
    return default_path if default_path.exists() else None


def _flatten_toml(payload: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}

    tvdb_cfg = payload.get("tvdb", {})
    if "api_key" in tvdb_cfg:
        result["tvdb_api_key"] = tvdb_cfg.get("api_key")
    if "pin" in tvdb_cfg:
        result["tvdb_pin"] = tvdb_cfg.get("pin")
    if "base_url" in tvdb_cfg:
        result["tvdb_base_url"] = tvdb_cfg.get("base_url")
    if "timeout" in tvdb_cfg:
        result["request_timeout"] = float(tvdb_cfg.get("timeout"))
    if "retry_attempts" in tvdb_cfg:
        result["retry_attempts"] = int(tvdb_cfg.get("retry_attempts"))
    if "token_lifetime_hours" in tvdb_cfg:
        result["token_lifetime_hours"] = float(tvdb_cfg.get("token_lifetime_hours"))
    if "token_margin_hours" in tvdb_cfg:
        result["token_margin_hours"] = float(tvdb_cfg.get("token_margin_hours"))

    discovery_cfg = payload.get("discovery", {})
    if "page_size" in discovery_cfg:
        result["page_size"] = int(discovery_cfg.get("page_size"))
    if "corpus_path" in discovery_cfg:
        result["corpus_path"] = Path(str(discovery_cfg.get("corpus_path"))).expanduser()

    return result


def _collect_env_overrides() -> dict[str, Any]:
    mapping: dict[str, str] = {
        "TVDB_API_KEY": "tvdb_api_key",
        "TVDB_PIN": "tvdb_pin",
        "TVDB_BASE_URL": "tvdb_base_url",
        "TVDB_TIMEOUT": "request_timeout",
        "TVDB_RETRY_ATTEMPTS": "retry_attempts",
        "TVDB_TOKEN_LIFETIME_HOURS": "token_lifetime_hours",
        "TVDB_TOKEN_MARGIN_HOURS": "token_margin_hours",
        "MOVIEDECK_PAGE_SIZE": "page_size",
        "MOVIEDECK_CORPUS_PATH": "corpus_path",
    }

    result: dict[str, Any] = {}
    for env_name, field in mapping.items():
        if env_name not in os.environ:
            continue
        value = os.environ[env_name]
        if field in {"page_size", "retry_attempts"}:
            result[field] = int(value)
        elif field in {"request_timeout", "token_lifetime_hours", "token_margin_hours"}:
            result[field] = float(value)
        elif field == "corpus_path":
            result[field] = Path(value).expanduser() if value.strip() else None
        else:
            result[field] = value
    return result


__all__ = ["Settings", "SettingsError", "SettingsLoadResult", "load_settings"]
