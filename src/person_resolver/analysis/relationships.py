from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from person_resolver.core.context import ResolutionContext
from person_resolver.logging import get_logger
from person_resolver.matching.identity import normalize_phone, normalize_text
from person_resolver.models import PersonAttributes, PersonCluster, Relationship

log = get_logger(__name__)

SAME_PERSON = "same_person"
RELATED_PERSON = "related_person"
UNRELATED = "unrelated"

SAME_PERSON_THRESHOLD = 0.6
RELATED_THRESHOLD = 0.2

# (field, weight, normalizer), in accumulation order
FIELD_WEIGHTS: Tuple[Tuple[str, float, Callable[[Optional[str]], str]], ...] = (
    ("email", 0.8, normalize_text),
    ("phone", 0.7, normalize_phone),
    ("name", 0.6, normalize_text),
    ("company", 0.3, normalize_text),
)


@dataclass(slots=True)
class PairAssessment:
    weight: float
    matched_fields: List[str]

    @property
    def type(self) -> str:
        return classify(self.weight)


def classify(weight: float) -> str:
    if weight > SAME_PERSON_THRESHOLD:
        return SAME_PERSON
    if weight > RELATED_THRESHOLD:
        return RELATED_PERSON
    return UNRELATED


def assess_pair(a: PersonAttributes, b: PersonAttributes) -> PairAssessment:
    """Symmetric weight from shared non-empty fields."""
    weight = 0.0
    matched: List[str] = []
    for name, field_weight, normalize in FIELD_WEIGHTS:
        va = normalize(getattr(a, name))
        vb = normalize(getattr(b, name))
        if va and va == vb:
            weight += field_weight
            matched.append(name)
    return PairAssessment(weight=weight, matched_fields=matched)


class RelationshipAnalyzer:
    """
    Classifies every unordered pair of clusters and attaches the result to
    both sides, each pointing at the other's cluster id.
    """

    def analyze(self, clusters: List[PersonCluster], ctx: Optional[ResolutionContext] = None) -> List[PersonCluster]:
        pairs = 0
        for i in range(len(clusters)):
            for j in range(i + 1, len(clusters)):
                a, b = clusters[i], clusters[j]
                pairs += 1
                result = assess_pair(a.merged_evidence, b.merged_evidence)
                confidence = round(result.weight, 2)

                a.relationships.append(Relationship(
                    type=result.type,
                    target_cluster_id=b.cluster_id,
                    confidence=confidence,
                    evidence_reasons=list(result.matched_fields),
                ))
                b.relationships.append(Relationship(
                    type=result.type,
                    target_cluster_id=a.cluster_id,
                    confidence=confidence,
                    evidence_reasons=list(result.matched_fields),
                ))
                log.debug(
                    "%s <-> %s: %s (%.2f, %s)",
                    a.cluster_id, b.cluster_id, result.type, result.weight, result.matched_fields,
                )

        if ctx is not None:
            ctx.stats.pairwise_comparisons += pairs
        return clusters
