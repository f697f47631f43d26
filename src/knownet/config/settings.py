"""
Configuration management with environment variable and .env support.

Configuration precedence (highest to lowest):
1. Environment variables (KNOWNET_*)
2. User config file (~/.knownet/config/settings.toml)
3. Hardcoded constants (constants.py)

The loaded Config is an ordinary value handed to the components that need
it; nothing here is cached at module level.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import overload

import tomli
from dotenv import load_dotenv

from knownet.core.logging_config import LogConfig
from knownet.config.constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_CONFIG_SUBDIR,
    SETTINGS_FILE,
    ENV_FILE,
    DEFAULT_DATA_SUBDIR,
    DATA_FILE_NAME,
    # Defaults
    DEFAULT_MAX_BACKUPS,
    DEFAULT_CONFIDENCE_DISCOUNT,
    DEFAULT_OPPOSITE_THRESHOLD,
    DEFAULT_NEGATION_THRESHOLD,
    DEFAULT_SEMANTIC_THRESHOLD,
    DEFAULT_LLM_PROVIDER,
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_API_BASE,
    DEFAULT_LLM_TEMPERATURE,
    DEFAULT_LLM_TIMEOUT_SECONDS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    # Environment variable names
    ENV_DATA_DIR,
    ENV_DATA_FILE,
    ENV_MAX_BACKUPS,
    ENV_CONFIDENCE_DISCOUNT,
    ENV_OPPOSITE_THRESHOLD,
    ENV_NEGATION_THRESHOLD,
    ENV_SEMANTIC_THRESHOLD,
    ENV_LLM_PROVIDER,
    ENV_LLM_MODEL,
    ENV_LLM_API_BASE,
    ENV_LLM_API_KEY,
    ENV_LLM_TEMPERATURE,
    ENV_LLM_MAX_TOKENS,
    ENV_LLM_TIMEOUT,
    ENV_HOST,
    ENV_PORT,
    ENV_LOG_LEVEL,
    ERROR_NO_CONFIG,
)


def load_env_files() -> None:
    """Load .env files from the working directory and the data directory."""
    env_locations = [
        Path.cwd() / ENV_FILE,
        DEFAULT_DATA_DIR / ENV_FILE,
        DEFAULT_DATA_DIR / DEFAULT_CONFIG_SUBDIR / ENV_FILE,
    ]

    for env_path in env_locations:
        if env_path.exists():
            load_dotenv(env_path, override=False)  # Don't override already-set vars


@overload
def _get_env_str(key: str, default: str) -> str: ...


@overload
def _get_env_str(key: str, default: None = None) -> str | None: ...


def _get_env_str(key: str, default: str | None = None) -> str | None:
    """Get string value from environment variable. Empty strings are treated as missing."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    """Get float value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class StorageConfig:
    data_file: str
    max_backups: int

    @classmethod
    def from_dict(cls, data: dict) -> "StorageConfig":
        """Create StorageConfig from dict with environment variable overrides."""
        data_dir = Path(_get_env_str(ENV_DATA_DIR, str(DEFAULT_DATA_DIR))).expanduser()
        default_file = str(data_dir / DEFAULT_DATA_SUBDIR / DATA_FILE_NAME)
        return cls(
            data_file=_get_env_str(
                ENV_DATA_FILE,
                data.get("data_file", default_file),
            ) or default_file,
            max_backups=_get_env_int(
                ENV_MAX_BACKUPS,
                int(data.get("max_backups", DEFAULT_MAX_BACKUPS)),
            ),
        )

    @property
    def data_path(self) -> Path:
        return Path(self.data_file).expanduser()


@dataclass
class AnalysisConfig:
    confidence_discount: float
    opposite_threshold: float
    negation_threshold: float
    semantic_threshold: float

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisConfig":
        """Create AnalysisConfig from dict with environment variable overrides."""
        return cls(
            confidence_discount=_get_env_float(
                ENV_CONFIDENCE_DISCOUNT,
                float(data.get("confidence_discount", DEFAULT_CONFIDENCE_DISCOUNT)),
            ),
            opposite_threshold=_get_env_float(
                ENV_OPPOSITE_THRESHOLD,
                float(data.get("opposite_threshold", DEFAULT_OPPOSITE_THRESHOLD)),
            ),
            negation_threshold=_get_env_float(
                ENV_NEGATION_THRESHOLD,
                float(data.get("negation_threshold", DEFAULT_NEGATION_THRESHOLD)),
            ),
            semantic_threshold=_get_env_float(
                ENV_SEMANTIC_THRESHOLD,
                float(data.get("semantic_threshold", DEFAULT_SEMANTIC_THRESHOLD)),
            ),
        )


@dataclass
class LLMConfig:
    provider: str
    model: str
    api_base: str | None
    api_key: str | None
    temperature: float
    max_tokens: int | None
    timeout_seconds: int

    @classmethod
    def from_dict(cls, data: dict) -> "LLMConfig":
        """Create LLMConfig from dict with environment variable overrides."""
        max_tokens = _get_env_int(ENV_LLM_MAX_TOKENS, int(data.get("max_tokens", 0)))
        return cls(
            provider=_get_env_str(
                ENV_LLM_PROVIDER,
                data.get("provider", DEFAULT_LLM_PROVIDER),
            ) or DEFAULT_LLM_PROVIDER,
            model=_get_env_str(
                ENV_LLM_MODEL,
                data.get("model", DEFAULT_LLM_MODEL),
            ) or DEFAULT_LLM_MODEL,
            api_base=_get_env_str(
                ENV_LLM_API_BASE,
                data.get("api_base", DEFAULT_LLM_API_BASE),
            ),
            api_key=_get_env_str(ENV_LLM_API_KEY, data.get("api_key")),
            temperature=_get_env_float(
                ENV_LLM_TEMPERATURE,
                float(data.get("temperature", DEFAULT_LLM_TEMPERATURE)),
            ),
            max_tokens=max_tokens if max_tokens > 0 else None,
            timeout_seconds=_get_env_int(
                ENV_LLM_TIMEOUT,
                int(data.get("timeout_seconds", DEFAULT_LLM_TIMEOUT_SECONDS)),
            ),
        )


@dataclass
class ServerConfig:
    host: str
    port: int

    @classmethod
    def from_dict(cls, data: dict) -> "ServerConfig":
        """Create ServerConfig from dict with environment variable overrides."""
        return cls(
            host=_get_env_str(ENV_HOST, data.get("host", DEFAULT_HOST)) or DEFAULT_HOST,
            port=_get_env_int(ENV_PORT, int(data.get("port", DEFAULT_PORT))),
        )


@dataclass
class Config:
    storage: StorageConfig
    analysis: AnalysisConfig
    llm: LLMConfig
    server: ServerConfig
    logging: LogConfig = field(default_factory=LogConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """
        Load configuration with proper precedence.

        Args:
            config_path: Optional explicit config file path

        Returns:
            Loaded Config object

        Raises:
            FileNotFoundError: If an explicit config_path does not exist
        """
        load_env_files()

        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(
                    ERROR_NO_CONFIG.format(
                        path=config_path,
                        settings_file=SETTINGS_FILE,
                        config_dir=DEFAULT_DATA_DIR / DEFAULT_CONFIG_SUBDIR,
                    )
                )
            config_file = config_path
        else:
            base_data_dir = Path(os.getenv(ENV_DATA_DIR, str(DEFAULT_DATA_DIR))).expanduser()
            config_file = base_data_dir / DEFAULT_CONFIG_SUBDIR / SETTINGS_FILE

        data: dict = {}
        if config_file.exists():
            with open(config_file, "rb") as f:
                data = tomli.load(f)

        logging_data = dict(data.get("logging", {}))
        env_level = _get_env_str(ENV_LOG_LEVEL)
        if env_level:
            logging_data["level"] = env_level

        return cls(
            storage=StorageConfig.from_dict(data.get("storage", {})),
            analysis=AnalysisConfig.from_dict(data.get("analysis", {})),
            llm=LLMConfig.from_dict(data.get("llm", {})),
            server=ServerConfig.from_dict(data.get("server", {})),
            logging=LogConfig.from_dict(logging_data),
        )

    @classmethod
    def defaults(cls) -> "Config":
        """Config built from constants only (environment overrides still apply)."""
        return cls(
            storage=StorageConfig.from_dict({}),
            analysis=AnalysisConfig.from_dict({}),
            llm=LLMConfig.from_dict({}),
            server=ServerConfig.from_dict({}),
        )
