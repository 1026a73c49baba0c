from person_resolver.scoring.confidence import ConfidenceScorer, biography_bonus, rank_clusters
from person_resolver.scoring.relevance import SourceRelevanceScorer

__all__ = [
    "ConfidenceScorer",
    "SourceRelevanceScorer",
    "biography_bonus",
    "rank_clusters",
]
