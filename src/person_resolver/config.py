"""
Configuration loading for person_resolver.

The configuration is a single YAML document. The packaged default lives in
``person_resolver/data/person_resolver.yml``; callers may load another file
with ``load_config(path)`` or derive a variant with ``with_overrides``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from person_resolver.core.exceptions import ConfigError
from person_resolver.matching.domains import domain_matches

CONFIG_PATH = Path(__file__).resolve().parent / "data" / "person_resolver.yml"


@dataclass(frozen=True)
class TierTable:
    """
    Ordered domain tiers. The first tier with a matching pattern wins;
    unknown domains get ``default``.
    """
    default: float
    tiers: Tuple[Tuple[str, float, Tuple[str, ...]], ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], default: float = 0) -> "TierTable":
        data = data or {}
        tiers = []
        for tier in data.get("tiers") or []:
            if not isinstance(tier, dict):
                continue
            tiers.append((
                str(tier.get("name", "")),
                tier.get("value", default),
                tuple(str(d) for d in tier.get("domains") or []),
            ))
        return cls(default=data.get("default", default), tiers=tuple(tiers))

    def tier_for(self, domain: str) -> Optional[str]:
        for name, _, patterns in self.tiers:
            if any(domain_matches(domain, p) for p in patterns):
                return name
        return None

    def value_for(self, domain: str) -> float:
        for _, value, patterns in self.tiers:
            if any(domain_matches(domain, p) for p in patterns):
                return value
        return self.default


@dataclass(frozen=True)
class KMeansSettings:
    max_k: int = 6
    k_cap: int = 3
    max_iter: int = 300
    elbow_max_iter: int = 100
    tol: float = 1e-4
    n_init: int = 10


@dataclass
class ResolverConfig:
    """
    Parsed configuration. ``raw`` keeps the original mapping so that
    ``with_overrides`` can rebuild a modified copy.
    """
    raw: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        data = self.raw
        self.debug: bool = bool(data.get("debug", False))
        self.logging: Dict[str, Any] = data.get("logging") or {}

        resolution = data.get("resolution") or {}
        self.strategy: str = str(resolution.get("strategy", "incremental"))
        self.order: str = str(resolution.get("order", "relevance"))
        self.random_seed: int = int(resolution.get("random_seed", 42))

        sources = data.get("sources") or {}
        self.exclude_snippet_only_domains: bool = bool(
            sources.get("exclude_snippet_only_domains", False)
        )
        self.snippet_only_domains: List[str] = list(sources.get("snippet_only_domains") or [])

        relevance = data.get("relevance") or {}
        self.domain_trust = TierTable.from_dict(relevance.get("domain_trust"), default=5)

        confidence = data.get("confidence") or {}
        self.professional_platforms: List[str] = [
            p.lower() for p in confidence.get("professional_platforms") or []
        ]
        self.skill_categories: Dict[str, List[str]] = {
            str(k): [str(v).lower() for v in vals or []]
            for k, vals in (confidence.get("skill_categories") or {}).items()
        }
        self.institution_keywords: List[str] = _lower_list(confidence.get("institution_keywords"))
        self.corporate_keywords: List[str] = _lower_list(confidence.get("corporate_keywords"))
        self.academic_keywords: List[str] = _lower_list(confidence.get("academic_keywords"))

        features = data.get("features") or {}
        self.reference_year: Optional[int] = features.get("reference_year")
        self.professional_titles: List[str] = _lower_list(features.get("professional_titles"))
        self.source_trust = TierTable.from_dict(features.get("source_trust"), default=0.6)
        self.domain_authority = TierTable.from_dict(features.get("domain_authority"), default=0.5)
        km = features.get("kmeans") or {}
        self.kmeans = KMeansSettings(
            max_k=int(km.get("max_k", 6)),
            k_cap=int(km.get("k_cap", 3)),
            max_iter=int(km.get("max_iter", 300)),
            elbow_max_iter=int(km.get("elbow_max_iter", 100)),
            tol=float(km.get("tol", 1e-4)),
            n_init=int(km.get("n_init", 10)),
        )

    def is_snippet_only(self, domain: str) -> bool:
        if not self.exclude_snippet_only_domains:
            return False
        return any(domain_matches(domain, d) for d in self.snippet_only_domains)

    def with_overrides(self, **sections: Any) -> "ResolverConfig":
        """
        Return a new config with top-level sections shallow-merged.

            cfg.with_overrides(sources={"exclude_snippet_only_domains": False})
        """
        data = copy.deepcopy(self.raw)
        for key, value in sections.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key].update(value)
            else:
                data[key] = value
        return ResolverConfig(data)


def _lower_list(values: Any) -> List[str]:
    return [str(v).lower() for v in values or []]


def load_config(path: str | Path | None = None) -> ResolverConfig:
    config_path = Path(path) if path is not None else CONFIG_PATH
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    return ResolverConfig(data)


_config_cache: Optional[ResolverConfig] = None


def get_config() -> ResolverConfig:
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
