"""
person_resolver

Entity resolution for person evidence gathered from many web sources:
scores sources, clusters evidence into distinct identities, scores each
identity's confidence and explains conflicts between them.
"""

from person_resolver.core.exceptions import ResolverError
from person_resolver.core.pipeline import Pipeline, resolve
from person_resolver.models import ClusteringResult, EvidenceItem, PersonAttributes, TargetIdentity

__version__ = "0.1.0"

__all__ = [
    "ClusteringResult",
    "EvidenceItem",
    "PersonAttributes",
    "Pipeline",
    "ResolverError",
    "TargetIdentity",
    "resolve",
]
