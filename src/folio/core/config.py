import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from folio.core.exceptions import ConfigError

CONFIG_FILENAME = ".folio.toml"


def _deep_merge(destination: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge source into destination, with source values overwriting."""
    for key, value in source.items():
        if isinstance(value, Mapping) and key in destination and isinstance(destination[key], Mapping):
            destination[key] = _deep_merge(dict(destination[key]), dict(value))
        else:
            destination[key] = value
    return destination


class ScanFailurePolicy(str, Enum):
    """What a generation pass does when some content files fail to decode."""

    FAIL = "fail"
    PROCEED = "proceed"


class SiteSettings(BaseModel):
    """Site-wide presentation settings."""

    title: str = Field(default="Folio", description="Site title shown on every page")
    root: str = Field(default="/", description="URL prefix the site is served under")
    link_extension: str = Field(
        default="",
        pattern=r"^(\.[A-Za-z0-9]+)?$",
        description="Suffix for post and tag links, e.g. \".html\" for hosts without URL rewriting",
    )


class MarkdownSettings(BaseModel):
    """Options passed to the markdown transform."""

    code_highlighting: bool = Field(default=False, description="Highlight fenced code blocks with Pygments")
    highlight_style: str = Field(default="monokai", description="Pygments style name")
    footnotes: bool = Field(default=False, description="Enable footnote syntax")


class GenerationSettings(BaseModel):
    """Settings for one scan + assembly pass."""

    raw_output: bool = Field(default=False, description="Emit bare post HTML without templates")
    on_scan_failure: ScanFailurePolicy = Field(
        default=ScanFailurePolicy.FAIL,
        description="Abort on any failed content file, or proceed with the valid ones",
    )
    templates_dir: Path | None = Field(default=None, description="Custom template directory")


class ServerSettings(BaseModel):
    """Live server settings."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=0, le=65535)
    shutdown_timeout: float = Field(default=10.0, gt=0, description="Seconds to drain requests on shutdown")
    watch_interval: float | None = Field(
        default=None, gt=0, description="Poll the content directory every N seconds and refresh on change"
    )


class FolioConfig(BaseSettings):
    """Root configuration for Folio.

    Supports environment variable overrides with the pattern:
    FOLIO_SECTION__KEY (e.g., FOLIO_SITE__TITLE)
    """

    site: SiteSettings = Field(default_factory=SiteSettings)
    markdown: MarkdownSettings = Field(default_factory=MarkdownSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="FOLIO_",
        env_nested_delimiter="__",
    )

    @classmethod
    def load(cls, site_root: Path | None = None, **overrides: Any) -> "FolioConfig":
        """Loads configuration from .folio.toml, environment variables and overrides.

        Priority (highest to lowest):
        1. Explicit overrides (nested dicts keyed by section, e.g. from CLI flags)
        2. Environment variables (FOLIO_SECTION__KEY)
        3. Config file (.folio.toml)
        4. Defaults
        """
        root_path = site_root if site_root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        file_settings: dict[str, Any] = {}
        if config_file.is_file():
            try:
                with config_file.open("rb") as f:
                    file_settings = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {config_file}: {exc}"
                raise ConfigError(msg) from exc

        # templates_dir in the file is relative to the file, not the working directory
        generation = file_settings.get("generation")
        if isinstance(generation, dict) and isinstance(generation.get("templates_dir"), str):
            generation["templates_dir"] = str(root_path / generation["templates_dir"])

        try:
            env_settings = cls().model_dump(exclude_unset=True)
            merged = _deep_merge(file_settings, env_settings)
            merged = _deep_merge(merged, overrides)
            return cls.model_validate(merged)
        except ValidationError as exc:
            msg = f"Invalid configuration: {exc}"
            raise ConfigError(msg) from exc
