"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    max_retries: int = 3
    timeout: int = 60
    max_tokens: int = 4096
    temperature: float = 0.3

    def __post_init__(self) -> None:
        if not 0 <= self.max_retries <= 10:
            raise ValueError(f"max_retries must be between 0 and 10, got {self.max_retries}")
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"timeout must be between 1 and 600 seconds, got {self.timeout}")
        if self.max_tokens < 256:
            raise ValueError(f"max_tokens must be at least 256, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1, got {self.temperature}")


@dataclass(frozen=True)
class PipelineConfig:
    time_budget_seconds: float = 170.0
    max_bullet_words: int = 35
    max_keywords_per_item: int = 3

    def __post_init__(self) -> None:
        if not 1 <= self.time_budget_seconds <= 900:
            raise ValueError(
                f"time_budget_seconds must be between 1 and 900, got {self.time_budget_seconds}"
            )
        if not 10 <= self.max_bullet_words <= 100:
            raise ValueError(f"max_bullet_words must be between 10 and 100, got {self.max_bullet_words}")
        if not 0 <= self.max_keywords_per_item <= 10:
            raise ValueError(
                f"max_keywords_per_item must be between 0 and 10, got {self.max_keywords_per_item}"
            )


@dataclass(frozen=True)
class CompanyConfig:
    lookup_timeout: float = 2.0

    def __post_init__(self) -> None:
        if not 0 < self.lookup_timeout <= 30:
            raise ValueError(f"lookup_timeout must be in (0, 30] seconds, got {self.lookup_timeout}")


@dataclass(frozen=True)
class CacheConfig:
    ttl_days: int = 30
    db_path: str = "~/.hybrid-tailor/company_cache.db"

    def __post_init__(self) -> None:
        if not 0 <= self.ttl_days <= 365:
            raise ValueError(f"ttl_days must be between 0 and 365, got {self.ttl_days}")

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    company: CompanyConfig = field(default_factory=CompanyConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
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
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        company=CompanyConfig(**raw.get("company", {})),
        cache=CacheConfig(**raw.get("cache", {})),
    )
