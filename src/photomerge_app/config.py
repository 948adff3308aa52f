"""Application configuration loaded from the environment."""
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

ENV_PREFIX = "PHOTOMERGE_"


class MergeStrategy(Enum):
    """Layout strategies available to the composer."""

    GRID = "grid"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    RENDER = "render"

    def __str__(self) -> str:  # pragma: no cover - user friendly label
        return self.value

    @property
    def label(self) -> str:
        return {
            MergeStrategy.GRID: "Two-Row Grid",
            MergeStrategy.VERTICAL: "Vertical Stack",
            MergeStrategy.HORIZONTAL: "Horizontal Strip",
            MergeStrategy.RENDER: "Thumbnail Snapshot",
        }[self]


class BatchPolicy(Enum):
    """How the composer checks the number of captured images."""

    AT_LEAST = "at_least"
    EXACT = "exact"
    NONE = "none"

    def __str__(self) -> str:  # pragma: no cover - user friendly label
        return self.value


def _default_gallery_dir() -> Path:
    return Path.home() / "Pictures" / "PhotoMerge"


def _default_capture_dir() -> Path:
    return Path(tempfile.gettempdir()) / "photomerge-captures"


@dataclass(slots=True)
class AppConfig:
    """Runtime settings for the capture and merge workflow."""

    batch_size: int = 4
    batch_policy: BatchPolicy = BatchPolicy.AT_LEAST
    strategy: MergeStrategy = MergeStrategy.GRID
    gallery_dir: Path = field(default_factory=_default_gallery_dir)
    capture_dir: Path = field(default_factory=_default_capture_dir)
    camera_index: int = 0
    save_captures_to_gallery: bool = True
    settle_delay_ms: int = 40
    thumbnail_size: int = 200
    output_format: str = "png"
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.settle_delay_ms < 0:
            raise ValueError(f"settle_delay_ms must not be negative, got {self.settle_delay_ms}")
        if self.thumbnail_size < 16:
            raise ValueError(f"thumbnail_size must be at least 16 px, got {self.thumbnail_size}")
        self.output_format = self.output_format.lower()
        if self.output_format not in {"png", "jpg", "jpeg"}:
            raise ValueError(f"Unsupported output format: {self.output_format}")


def load_config(environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> AppConfig:
    """Build an :class:`AppConfig` from ``PHOTOMERGE_*`` environment variables.

    When ``environ`` is omitted the process environment is used, after loading a
    ``.env`` file from the working directory if one exists.
    """
    if environ is None:
        if dotenv:
            load_dotenv()
        environ = os.environ

    def get(name: str) -> Optional[str]:
        value = environ.get(ENV_PREFIX + name)
        if value is None or not value.strip():
            return None
        return value.strip()

    defaults = AppConfig()
    log_file = get("LOG_FILE")
    return AppConfig(
        batch_size=_parse_int(get("BATCH_SIZE"), "BATCH_SIZE", defaults.batch_size),
        batch_policy=_parse_enum(get("BATCH_POLICY"), "BATCH_POLICY", BatchPolicy, defaults.batch_policy),
        strategy=_parse_enum(get("STRATEGY"), "STRATEGY", MergeStrategy, defaults.strategy),
        gallery_dir=_parse_path(get("GALLERY_DIR"), defaults.gallery_dir),
        capture_dir=_parse_path(get("CAPTURE_DIR"), defaults.capture_dir),
        camera_index=_parse_int(get("CAMERA_INDEX"), "CAMERA_INDEX", defaults.camera_index),
        save_captures_to_gallery=_parse_bool(
            get("SAVE_CAPTURES"), "SAVE_CAPTURES", defaults.save_captures_to_gallery
        ),
        settle_delay_ms=_parse_int(get("SETTLE_DELAY_MS"), "SETTLE_DELAY_MS", defaults.settle_delay_ms),
        thumbnail_size=_parse_int(get("THUMBNAIL_SIZE"), "THUMBNAIL_SIZE", defaults.thumbnail_size),
        output_format=get("OUTPUT_FORMAT") or defaults.output_format,
        log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
    )


def _parse_int(raw: Optional[str], name: str, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _parse_bool(raw: Optional[str], name: str, default: bool) -> bool:
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def _parse_enum(raw: Optional[str], name: str, enum_cls, default):
    if raw is None:
        return default
    try:
        return enum_cls(raw.lower())
    except ValueError as exc:
        options = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{ENV_PREFIX}{name} must be one of: {options}; got {raw!r}") from exc


def _parse_path(raw: Optional[str], default: Path) -> Path:
    if raw is None:
        return default
    return Path(raw).expanduser()
