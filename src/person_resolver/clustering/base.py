"""
Shared clustering capability.

Both strategies consume an ordered sequence of ``ScoredEvidence`` and return
``PersonCluster`` objects of identical shape, so downstream scoring and
analysis never depend on which one ran.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, NamedTuple, Sequence

from person_resolver.core.context import ResolutionContext
from person_resolver.core.exceptions import UnknownStrategyError
from person_resolver.models import EvidenceItem, PersonCluster


class ScoredEvidence(NamedTuple):
    item: EvidenceItem
    relevance: int
    # Position in the caller's original evidence list
    index: int


def order_evidence(scored: Sequence[ScoredEvidence], order: str = "relevance") -> List[ScoredEvidence]:
    """
    Fixed, stable processing order for the greedy builder.

    ``relevance``: descending relevance, then original index.
    ``input``: original index.
    """
    if order == "input":
        return sorted(scored, key=lambda s: s.index)
    if order == "relevance":
        return sorted(scored, key=lambda s: (-s.relevance, s.index))
    raise ValueError(f"Unknown evidence order: {order!r}")


class ClusteringStrategy(ABC):
    name: str = ""

    @abstractmethod
    def cluster(self, scored: Sequence[ScoredEvidence], ctx: ResolutionContext) -> List[PersonCluster]:
        """Partition ``scored`` into clusters; every item lands in exactly one."""


_STRATEGIES: Dict[str, Callable[[], ClusteringStrategy]] = {}


def register_strategy(name: str, factory: Callable[[], ClusteringStrategy]) -> None:
    _STRATEGIES[name] = factory


def available_strategies() -> List[str]:
    return sorted(_STRATEGIES)


def get_strategy(name: str) -> ClusteringStrategy:
    key = (name or "").strip().lower().replace("-", "_")
    if key not in _STRATEGIES:
        raise UnknownStrategyError(
            f"Unknown clustering strategy {name!r}; expected one of {available_strategies()}"
        )
    return _STRATEGIES[key]()
