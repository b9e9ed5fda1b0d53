"""
Configuration management for WebScribe using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from webscribe.exceptions import ConfigurationError

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class ExtractionSettings(BaseModel):
    """Heuristic thresholds for a single extraction context.

    The numeric defaults are empirical tuning values; they are kept as-is and
    exposed here so they can be overridden rather than re-derived.
    """

    parser: Literal["lxml", "html.parser", "html5lib"] = Field(
        default="lxml", description="BeautifulSoup tree builder used to parse documents."
    )
    min_text_length: int = Field(default=100, ge=0, description="Visible text below this scores 0.")
    max_link_ratio: float = Field(default=0.6, ge=0.0, le=1.0, description="Link-text ratio above this scores 0.")
    structural_bonus: int = Field(default=40, ge=0, description="Score bonus per structural descendant.")
    root_score_floor: int = Field(
        default=200, ge=0, description="Best curated-selector score below which all containers are scanned."
    )
    depth_limit: int = Field(default=20, ge=0, description="Maximum container nesting walked.")
    min_node_count: int = Field(
        default=3, ge=0, description="Walks producing fewer nodes than this try the readability fallback."
    )
    raw_block_min_length: int = Field(default=15, ge=0, description="Raw-text fallback block minimum length.")
    heading_min_length: int = Field(default=1, ge=0)
    paragraph_min_length: int = Field(default=5, ge=0)
    inline_code_min_length: int = Field(default=30, ge=0)
    use_readability: bool = Field(default=True, description="Enable the readability fallback tier.")


class ArbiterSettings(BaseModel):
    """Cross-frame arbitration settings."""

    main_preference_ratio: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Main frame wins while it has at least this fraction of the richest frame's nodes.",
    )
    retry_delay: float = Field(default=0.8, ge=0.0, description="Seconds to wait before retrying the main frame.")
    frame_timeout: float = Field(default=10.0, gt=0.0, description="Seconds to wait for one frame's response.")


class CrawlerConfig(BaseModel):
    """Page loader configuration."""

    timeout: float = Field(default=30.0, gt=0.0, description="HTTP request timeout in seconds.")
    user_agent: str = Field(
        default="WebScribe/0.1 (+https://github.com/webscribe/webscribe)",
        description="User-Agent string for HTTP requests.",
    )
    max_frames: int = Field(default=10, ge=0, description="Maximum number of iframes fetched per page.")
    max_bytes: int = Field(default=10_000_000, gt=0, description="Responses larger than this are truncated.")


class ExportSettings(BaseModel):
    """Defaults for rendering and writing documents."""

    default_format: Literal["markdown", "html"] = Field(default="markdown")
    output_dir: Path = Field(default_factory=Path.cwd, description="Directory exported files are written to.")
    include_toc: bool = True
    include_images: bool = True
    include_notes: bool = False

    @field_validator("output_dir", mode="before")
    @classmethod
    def expand_output_dir(cls, v: Any) -> Path:
        return Path(v).expanduser()


class MonitoringConfig(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="WARNING", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "WebScribe"
    version: str = "0.1.0"
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    arbiter: ArbiterSettings = Field(default_factory=ArbiterSettings)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    export: ExportSettings = Field(default_factory=ExportSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="WEBSCRIBE_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found or is not a file: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Configuration file is not valid YAML: {path}: {e}") from e
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        try:
            return cls.model_validate(yaml_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "webscribe.yaml",
        current_dir / "webscribe.yml",
        current_dir / "config.yaml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from an explicit path, a discovered file, or defaults."""
    if path is not None:
        return Config.from_yaml(path)
    discovered = find_config_file()
    if discovered:
        return Config.from_yaml(discovered)
    return Config()

