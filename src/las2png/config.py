from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Final, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .point_source import DEFAULT_CHUNK_SIZE
from .zoom import DEFAULT_ZOOM_SPEC, parse_zoom_levels

DEFAULT_PIPELINE_CONFIG_NAME: Final[str] = "las2png.yaml"
DEFAULT_PIPELINE_CONFIG_ENV: Final[str] = "LAS2PNG_CONFIG"
DEFAULT_CONFIG_DIR_ENV: Final[str] = "LAS2PNG_CONFIG_DIR"

DEFAULT_SOURCE_CRS: Final[str] = "EPSG:2450"

_LOG_LEVELS: Final[set[str]] = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class PipelineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    zoom: tuple[int, ...] = Field(
        default_factory=lambda: parse_zoom_levels(DEFAULT_ZOOM_SPEC)
    )
    source_crs: Optional[str] = DEFAULT_SOURCE_CRS
    output_dir: Path = Path(".")
    inputs: list[Path] = Field(default_factory=list)

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    # Log read progress every N samples per input file.
    progress_log_every: int = Field(default=100_000, gt=0)
    log_level: str = "INFO"

    @field_validator("zoom", mode="before")
    @classmethod
    def _parse_zoom(cls, value: Any) -> tuple[int, ...]:
        return parse_zoom_levels(value)

    @field_validator("source_crs", mode="before")
    @classmethod
    def _normalize_crs(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(
                f"Unsupported log_level={value!r}; supported: {sorted(_LOG_LEVELS)}"
            )
        return normalized


class PipelineConfigFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    las2png: PipelineConfig = Field(default_factory=PipelineConfig)


def _absolute(path: Union[str, Path]) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = (Path.cwd() / candidate).resolve()
    return candidate


def _resolve_config_path(path: Optional[Union[str, Path]]) -> Optional[Path]:
    """Explicit path, then $LAS2PNG_CONFIG, then an existing default file."""

    if path is not None:
        return _absolute(path)

    explicit = os.environ.get(DEFAULT_PIPELINE_CONFIG_ENV)
    if explicit:
        return _absolute(explicit)

    config_dir = os.environ.get(DEFAULT_CONFIG_DIR_ENV)
    base = _absolute(config_dir) if config_dir else Path.cwd() / "config"
    candidate = base / DEFAULT_PIPELINE_CONFIG_NAME
    if candidate.is_file():
        return candidate
    return None


def _parse_yaml(text: str, *, source: Path) -> Mapping[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to load las2png YAML: {source}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValueError(f"las2png config must be a mapping: {source}")
    return data


def load_pipeline_config(
    path: Optional[Union[str, Path]] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> PipelineConfig:
    """Load the pipeline config, applying `overrides` on top of the file values.

    Without an explicit path or a discoverable config file the built-in
    defaults are used.
    """

    config_path = _resolve_config_path(path)
    document: dict[str, Any] = {}
    data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.is_file():
            raise FileNotFoundError(f"las2png config file not found: {config_path}")
        raw = config_path.read_text(encoding="utf-8")
        document = dict(_parse_yaml(raw, source=config_path))
        section = document.get("las2png") or {}
        if not isinstance(section, Mapping):
            raise ValueError(f"las2png section must be a mapping: {config_path}")
        data = dict(section)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    document["las2png"] = data
    try:
        parsed = PipelineConfigFile.model_validate(document)
    except ValidationError as exc:
        source = config_path if config_path is not None else "<defaults>"
        raise ValueError(f"Invalid las2png config ({source}): {exc}") from exc

    return parsed.las2png
