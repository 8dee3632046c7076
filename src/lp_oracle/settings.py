"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
from pathlib import Path
import tomllib
from typing import Any

from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from web3 import Web3

from .constants import (
    DEFAULT_CURRENT_FILENAME,
    DEFAULT_LAST_GOOD_FILENAME,
    DEFAULT_POLYGON_RPC_URL,
    DEFAULT_REFERENCE_SYMBOL,
    DEFAULT_TOKENS,
    DEXSCREENER_REFERENCE_PAIR_URL,
    POLYGON_CHAIN_ID,
    WPOL_ADDRESS,
    WPOL_DECIMALS,
)

load_dotenv()


def _require_address(value: str) -> str:
    # Checksum casing is not enforced
    if not Web3.is_address(value.lower()):
        raise ValueError(f"Invalid address: {value!r}")
    return value


class QuoteTokenSettings(BaseModel):
    """The asset every tracked pool pairs against."""

    address: str = WPOL_ADDRESS
    decimals: int = Field(default=WPOL_DECIMALS, ge=0)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _require_address(v)


class TokenSettings(BaseModel):
    """A tracked token and the pool pairing it with the quote token."""

    address: str
    decimals: int = Field(default=18, ge=0)
    pool: str

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("address", "pool")
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _require_address(v)


def _default_tokens() -> dict[str, TokenSettings]:
    return {
        symbol: TokenSettings(**values) for symbol, values in DEFAULT_TOKENS.items()
    }


class SnapshotSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with LP_ORACLE_)
    - Config file (TOML), lowest precedence

    Instances are frozen; build a new one to run with different tokens or
    endpoints. Do not read os.environ or files elsewhere in the codebase.
    """

    # --- on-chain data source ---
    rpc_url: str = DEFAULT_POLYGON_RPC_URL
    rpc_timeout: float = Field(default=15.0, gt=0)
    chain_id: int = POLYGON_CHAIN_ID
    block_number: int | None = Field(default=None, ge=0)

    # --- reference USD feed ---
    feed_url: str = DEXSCREENER_REFERENCE_PAIR_URL
    feed_timeout: float = Field(default=10.0, gt=0)
    reference_symbol: str = DEFAULT_REFERENCE_SYMBOL

    # --- tracked tokens ---
    quote_token: QuoteTokenSettings = Field(default_factory=QuoteTokenSettings)
    tokens: dict[str, TokenSettings] = Field(default_factory=_default_tokens)

    # --- output ---
    output_dir: Path = Path(".")
    current_filename: str = DEFAULT_CURRENT_FILENAME
    last_good_filename: str = DEFAULT_LAST_GOOD_FILENAME

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LP_ORACLE_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",  # ignore unknown keys in env/config file
        frozen=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_token_set(self) -> "SnapshotSettings":
        """Validate that the token set is non-empty and distinct from the reference."""
        if not self.tokens:
            raise ValueError("At least one token must be configured")
        if self.reference_symbol in self.tokens:
            raise ValueError(
                f"Token symbol {self.reference_symbol!r} collides with reference_symbol"
            )
        if self.current_filename == self.last_good_filename:
            raise ValueError("current_filename and last_good_filename must differ")
        return self

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
        env_cfg = os.environ.get("LP_ORACLE_CONFIG")
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
                    # Try default locations
                    local_config = Path("lp-oracle.toml")
                    user_config = Path.home() / ".config" / "lp-oracle" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [lp_oracle]
                body = data.get("lp_oracle", data)
                if not isinstance(body, dict):
                    return {}
                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,  # optional secrets dir
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a JSON-friendly dict."""
        return self.model_dump(mode="json")

    @property
    def current_path(self) -> Path:
        return self.output_dir / self.current_filename

    @property
    def last_good_path(self) -> Path:
        return self.output_dir / self.last_good_filename

    @property
    def tracked_symbols(self) -> list[str]:
        """Reference symbol first, then tokens in configuration order."""
        return [self.reference_symbol, *self.tokens]
