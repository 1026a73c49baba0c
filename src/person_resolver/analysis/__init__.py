"""
Post-clustering analysis: pairwise relationships between clusters and the
summary / narrative attached to every result.
"""

from person_resolver.analysis.ranking import narrate, summarize
from person_resolver.analysis.relationships import RelationshipAnalyzer, assess_pair, classify

__all__ = [
    "RelationshipAnalyzer",
    "assess_pair",
    "classify",
    "narrate",
    "summarize",
]
