"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    DEFAULT_BLOCKCHAIR_API_URL,
    DEFAULT_BLOCKCYPHER_API_URL,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_COINGECKO_API_URL,
)

load_dotenv()

SECRET_FIELDS = ("coingecko_api_key", "blockcypher_token", "blockchair_api_key")


class CoinwagonSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with COINWAGON_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- cache ---
    cache_ttl_seconds: float = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        gt=0,
        description="Maximum age of a cached price or balance.",
    )

    # --- timeouts and concurrency ---
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single provider request.",
    )
    global_timeout_seconds: float | None = 120.0
    max_concurrent_lookups: int = Field(default=5, ge=1)

    # --- provider endpoints ---
    coingecko_api_url: str = DEFAULT_COINGECKO_API_URL
    blockcypher_api_url: str = DEFAULT_BLOCKCYPHER_API_URL
    blockchair_api_url: str = DEFAULT_BLOCKCHAIR_API_URL

    # --- provider credentials (env / CLI only) ---
    coingecko_api_key: SecretStr | None = None
    blockcypher_token: SecretStr | None = None
    blockchair_api_key: SecretStr | None = None

    # --- fallback order per operation ---
    price_providers: list[str] = Field(default_factory=lambda: ["coingecko"])
    balance_providers: list[str] = Field(
        default_factory=lambda: ["blockcypher", "blockchair"]
    )

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="COINWAGON_",
        env_file=".env",
        extra="ignore",  # ignore unknown keys in env/config file
    )

    @field_validator(*SECRET_FIELDS, mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("price_providers", "balance_providers")
    @classmethod
    def normalize_provider_names(cls, v: list[str]) -> list[str]:
        names = [name.strip().lower() for name in v if name.strip()]
        if not names:
            raise ValueError("at least one provider must be configured")
        return names

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("COINWAGON_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("coinwagon.toml")
                    user_config = Path.home() / ".config" / "coinwagon" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [coinwagon]
                body = data.get("coinwagon", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,  # optional secrets dir
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump()
        for key in SECRET_FIELDS:
            if getattr(self, key):
                data[key] = "***redacted***"
        return data

    @property
    def global_timeout_enabled(self) -> bool:
        return (
            self.global_timeout_seconds is not None
            and self.global_timeout_seconds > 0
        )
