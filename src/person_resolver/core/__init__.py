"""
Core orchestration for person_resolver.

``Pipeline`` lives in ``person_resolver.core.pipeline`` and is not imported
here so that low-level modules can import the exceptions without cycles.
"""

from person_resolver.core.context import ResolutionContext
from person_resolver.core.exceptions import (
    ClusteringError,
    ConfigError,
    EvidenceFormatError,
    ResolverError,
    UnknownStrategyError,
)

__all__ = [
    "ResolutionContext",
    "ClusteringError",
    "ConfigError",
    "EvidenceFormatError",
    "ResolverError",
    "UnknownStrategyError",
]
