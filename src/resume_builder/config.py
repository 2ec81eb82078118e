"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value < low or (high is not None and value > high):
        bound = f"[{low}, {high}]" if high is not None else f">= {low}"
        raise ValueError(f"{name} must be {bound}, got {value!r}")


@dataclass(frozen=True)
class LLMConfig:
    primary_model: str = "claude-sonnet-4-5-20250929"
    fallback_model: str = "claude-haiku-4-5-20251001"
    enhance_model: str = "claude-haiku-4-5-20251001"
    max_retries: int = 3
    retry_delay_base_ms: int = 1000
    retry_delay_max_ms: int = 30000
    default_retry_after: int = 60  # seconds
    timeout: int = 30

    def __post_init__(self) -> None:
        _check_range("max_retries", self.max_retries, 0, 10)
        _check_range("retry_delay_base_ms", self.retry_delay_base_ms, 0)
        _check_range("retry_delay_max_ms", self.retry_delay_max_ms, self.retry_delay_base_ms)
        _check_range("default_retry_after", self.default_retry_after, 1)
        _check_range("timeout", self.timeout, 1, 600)


@dataclass(frozen=True)
class ImportConfig:
    max_file_size_mb: int = 10
    page_timeout_ms: int = 30000
    settle_ms: int = 2000

    def __post_init__(self) -> None:
        _check_range("max_file_size_mb", self.max_file_size_mb, 1, 100)
        _check_range("page_timeout_ms", self.page_timeout_ms, 1000)
        _check_range("settle_ms", self.settle_ms, 0)

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@dataclass(frozen=True)
class MonitorConfig:
    backup_window_minutes: int = 5
    backup_threshold: float = 0.5
    retention_hours: int = 24
    cleanup_interval_minutes: int = 60

    def __post_init__(self) -> None:
        _check_range("backup_threshold", self.backup_threshold, 0.0, 1.0)
        _check_range("backup_window_minutes", self.backup_window_minutes, 1)
        _check_range("retention_hours", self.retention_hours, 1)
        _check_range("cleanup_interval_minutes", self.cleanup_interval_minutes, 1)


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.resume-builder/resumes.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AuthConfig:
    # Header populated by the upstream identity proxy
    user_header: str = "X-User-Id"


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    importer: ImportConfig = field(default_factory=ImportConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        importer=ImportConfig(**raw.get("import", {})),
        monitor=MonitorConfig(**raw.get("monitor", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        auth=AuthConfig(**raw.get("auth", {})),
    )
