"""
Clustering strategies.

Importing this package registers both built-in strategies:
``incremental`` and ``feature_vector``.
"""

from person_resolver.clustering.base import (
    ClusteringStrategy,
    ScoredEvidence,
    available_strategies,
    get_strategy,
    order_evidence,
    register_strategy,
)
from person_resolver.clustering.incremental import IncrementalClusterBuilder
from person_resolver.clustering.kmeans import FeatureVectorClusterer
from person_resolver.clustering.merge import merge_attributes

__all__ = [
    "ClusteringStrategy",
    "FeatureVectorClusterer",
    "IncrementalClusterBuilder",
    "ScoredEvidence",
    "available_strategies",
    "get_strategy",
    "merge_attributes",
    "order_evidence",
    "register_strategy",
]
