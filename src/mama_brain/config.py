"""Configuration helpers for Mama Brain."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional, cast

import yaml

from .utils.io import load_yaml_or_json


@dataclass
class PipelineConfig:
    """Configuration for the seven-step response pipeline."""

    # Seconds to pause while a step is active, keyed by step id.
    step_delays: dict[int, float] = field(default_factory=dict)
    faq_overrides_civic: bool = False

    def __post_init__(self) -> None:
        self.step_delays = {int(key): float(value) for key, value in self.step_delays.items()}
        for step_id, delay in self.step_delays.items():
            if delay < 0:
                msg = f"Delay for step {step_id} must not be negative"
                raise ValueError(msg)


# The pauses the chat client shows while the heartbeat indicator animates.
HEARTBEAT_DELAYS: dict[int, float] = {1: 0.15, 2: 0.2, 3: 0.25, 4: 0.2, 5: 0.18, 6: 0.15, 7: 0.12}


@dataclass
class ImportConfig:
    """Configuration for batched FAQ imports."""

    batch_size: int = 5
    batch_delay: float = 0.05

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.batch_delay < 0:
            raise ValueError("batch_delay must not be negative")


@dataclass
class PrivacyConfig:
    """Configuration for stored prompt excerpts."""

    prompt_excerpt_length: int = 50


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class MamaBrainConfig:
    """Top-level configuration for the Mama Brain engine."""

    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    faq_import: ImportConfig = field(default_factory=ImportConfig)
    privacy: PrivacyConfig = field(default_factory=PrivacyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MamaBrainConfig:
        return cls(
            pipeline=PipelineConfig(**data.get("pipeline", {})),
            faq_import=ImportConfig(**data.get("faq_import", {})),
            privacy=PrivacyConfig(**data.get("privacy", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf8") as handle:
            if path.suffix.lower() in {".yaml", ".yml"}:
                yaml.safe_dump(self.to_dict(), handle, allow_unicode=True, sort_keys=False)
            else:
                json.dump(self.to_dict(), handle, indent=2, ensure_ascii=False)


def _load_yaml_or_json(path: Path) -> dict[str, Any]:
    loaded = load_yaml_or_json(path)
    if loaded is None:
        return {}
    if isinstance(loaded, Mapping):
        return cast(dict[str, Any], dict(loaded))
    msg = f"Expected mapping at root of configuration file {path.name}"
    raise TypeError(msg)


def _merge_dict(base: dict[str, Any], overrides: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for override in overrides:
        for key, value in override.items():
            existing = result.get(key)
            if isinstance(value, Mapping) and isinstance(existing, Mapping):
                result[key] = _merge_dict(dict(existing), [value])
            else:
                result[key] = value
    return result


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Iterable[Mapping[str, Any]]] = None,
) -> MamaBrainConfig:
    """Load configuration from disk and merge overrides."""

    overrides = list(overrides or [])
    if path is None:
        base: dict[str, Any] = {}
    else:
        base = _load_yaml_or_json(Path(path))

    merged = _merge_dict(base, overrides)
    return MamaBrainConfig.from_dict(merged)
