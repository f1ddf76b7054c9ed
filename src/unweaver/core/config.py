from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    # Segmentation defaults (used by the CLI; the core takes explicit arguments)
    DEFAULT_GRANULARITY: str = "PARAGRAPH"
    DEFAULT_HEADER_LEVEL: Optional[int] = Field(default=None, ge=1, le=6)  # None = suggested level
    DEFAULT_HIERARCHICAL: bool = False

    # Identifier generation
    ID_STRATEGY: str = "random"  # random|sequential
    ID_PREFIX: str = ""  # Only applied to sequential ids

    # Lexical analytics
    KWIC_WINDOW: int = Field(default=40, ge=0)
    NGRAM_TOP_N: int = Field(default=50, ge=1)
    STOP_WORDS: List[str] = []  # Empty = built-in stop-word list

    # Observability & UI
    LOG_FORMAT: str = "auto"  # json|plain|auto
    LOG_LEVEL: LogLevel = "INFO"
    NO_COLOR: bool = False  # Disable colored output

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        if config_file:
            config_path: Optional[Path] = Path(config_file)
        else:
            # Auto-discover .unweaver.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".unweaver.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        # Load config file if found
        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Environment variables win over config file values
        overridden = {key for key in config_data if key in _env_keys()}
        return cls(**{k: v for k, v in config_data.items() if k not in overridden})


def _env_keys() -> set[str]:
    import os

    return {key for key in Settings.model_fields if key in os.environ}

