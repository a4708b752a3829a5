"""Configuration helpers for the interlinking engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def weight(self, group: str, name: str) -> float:
        weights = self.raw.get("weights", {}).get(group, {})
        return float(weights.get(name, 0.0))

    def estimated_word_count(self, kind: str) -> int:
        estimates = self.raw.get("estimated_word_count", {})
        return int(estimates.get(kind, estimates.get("static", 0)))

    def enrichment(self, key: str, default: Any = None) -> Any:
        return self.raw.get("enrichment", {}).get(key, default)


DEFAULTS: Dict[str, Any] = {
    "weights": {
        "link_value": {"relevance": 0.6, "authority": 0.4},
        "phase1": {"keywords": 0.6, "title": 0.4},
        "enriched": {"keywords": 0.4, "title": 0.2, "content": 0.4},
    },
    "authority_word_count_norm": 2000,
    # Unverified heuristic used until the real body has been fetched.
    "estimated_word_count": {"cms": 1500, "static": 500},
    "topics_per_page": 3,
    "article_topic_limit": 5,
    "article_topic_min_length": 4,
    "significant_word_min_length": 4,
    "significant_word_limit": 100,
    "enrichment": {
        "max_workers": 4,
        "fetch_timeout": 8.0,
        "deadline": 20.0,
    },
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
