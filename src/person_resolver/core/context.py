from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from person_resolver.models import ResolutionStats, TargetIdentity


@dataclass
class ResolutionContext:
    """
    Private state of one resolution run.
    Each run owns its context; nothing here is shared between runs.
    """

    target: TargetIdentity
    config: Any
    logger: Any

    stats: ResolutionStats = field(default_factory=ResolutionStats)
    _next_cluster: int = 0

    def next_cluster_id(self) -> str:
        self._next_cluster += 1
        return f"C{self._next_cluster}"
