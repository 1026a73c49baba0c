"""
Cluster confidence: a 0-100 integer describing how strongly a cluster's
merged evidence supports it being the queried identity.

The baseline is a clamped sum of fixed terms. An optional biographical
profiler adds at most ``MAX_BIOGRAPHY_BONUS`` on top; without one the
baseline is untouched.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, List, Optional, Union

from person_resolver.config import ResolverConfig, get_config
from person_resolver.logging import get_logger
from person_resolver.matching.identity import is_email_relevant, is_name_relevant
from person_resolver.models import BiographicalInsights, PersonCluster, TargetIdentity

log = get_logger(__name__)

SOURCE_WEIGHT = 15
SOURCE_CAP = 45
EMAIL_BONUS = 25
NAME_BONUS = 20
PHONE_BONUS = 10
COMPANY_BONUS = 8
TITLE_BONUS = 8
LOCATION_BONUS = 6
RELEVANCE_FACTOR = 0.2
MAX_BIOGRAPHY_BONUS = 20

# (minimum populated field types, bonus), checked in order
COMPREHENSIVE_TIERS = ((8, 10), (6, 6), (4, 3))

Biographer = Union[Callable[[PersonCluster], BiographicalInsights], Any]


def _norm(text: str) -> str:
    return " " + re.sub(r"[^a-z0-9]+", " ", text.lower()).strip() + " "


def _mentions(values: Iterable[str], keywords: Iterable[str]) -> bool:
    """True when any value contains any keyword as a whole word or phrase."""
    normed = [_norm(v) for v in values]
    for kw in keywords:
        k = _norm(kw)
        if k.strip() and any(k in v for v in normed):
            return True
    return False


def biography_bonus(insights: Optional[BiographicalInsights]) -> int:
    if insights is None:
        return 0
    bonus = 0
    if insights.career_stage and insights.career_stage != "unknown":
        bonus += 5
    if insights.professional_seniority and insights.professional_seniority != "unknown":
        bonus += 5
    if insights.industry_expertise:
        bonus += 3
    if insights.education_level and insights.education_level != "unknown":
        bonus += 3
    if insights.thought_leadership and insights.thought_leadership != "none":
        bonus += 4
    return min(bonus, MAX_BIOGRAPHY_BONUS)


class ConfidenceScorer:
    """
    Computes and stores ``cluster.confidence``.

    ``biographer`` is either a callable ``(cluster) -> BiographicalInsights``
    or an object with a ``profile(cluster)`` method.
    """

    def __init__(
        self,
        target: TargetIdentity,
        config: Optional[ResolverConfig] = None,
        biographer: Optional[Biographer] = None,
    ):
        self.target = target
        self.config = config or get_config()
        self.biographer = biographer

    def _profile(self, cluster: PersonCluster) -> Optional[BiographicalInsights]:
        if self.biographer is None:
            return None
        if hasattr(self.biographer, "profile"):
            return self.biographer.profile(cluster)
        return self.biographer(cluster)

    def baseline(self, cluster: PersonCluster) -> float:
        cfg = self.config
        ev = cluster.merged_evidence
        score = float(min(len(cluster.sources) * SOURCE_WEIGHT, SOURCE_CAP))

        if is_email_relevant(ev.email, self.target):
            score += EMAIL_BONUS
        if is_name_relevant(ev.name, self.target):
            score += NAME_BONUS

        if ev.phone:
            score += PHONE_BONUS
        if ev.company:
            score += COMPANY_BONUS
        if ev.title:
            score += TITLE_BONUS
        if ev.location:
            score += LOCATION_BONUS

        if ev.social_profiles:
            score += min(len(ev.social_profiles) * 5, 15)
            if any(p.platform.lower() in cfg.professional_platforms for p in ev.social_profiles):
                score += 8

        if ev.skills:
            score += min(len(ev.skills) * 2, 12)
            categories = [kw for kws in cfg.skill_categories.values() for kw in kws]
            if _mentions(ev.skills, categories):
                score += 5

        if ev.education:
            score += min(len(ev.education) * 4, 15)
            if _mentions(ev.education, cfg.institution_keywords):
                score += 6

        if ev.achievements:
            score += min(len(ev.achievements) * 3, 12)

        if ev.affiliations:
            score += min(len(ev.affiliations) * 2, 10)
            if _mentions(ev.affiliations, cfg.corporate_keywords) and _mentions(
                ev.affiliations, cfg.academic_keywords
            ):
                score += 5

        if ev.websites:
            score += min(len(ev.websites) * 3, 8)

        if cluster.sources:
            mean_relevance = sum(s.relevance_score for s in cluster.sources) / len(cluster.sources)
            score += mean_relevance * RELEVANCE_FACTOR

        score += min(cluster.unique_domains * 3, 12)

        populated = len(ev.populated_fields())
        for minimum, bonus in COMPREHENSIVE_TIERS:
            if populated >= minimum:
                score += bonus
                break

        return score

    def score(self, cluster: PersonCluster) -> int:
        total = self.baseline(cluster)

        insights = self._profile(cluster)
        if insights is not None:
            cluster.biography = insights
            total += biography_bonus(insights)

        cluster.confidence = max(0, min(100, int(round(total))))
        log.debug(
            "confidence %s: %d (sources=%d)",
            cluster.cluster_id, cluster.confidence, len(cluster.sources),
        )
        return cluster.confidence

    def score_all(self, clusters: List[PersonCluster]) -> List[PersonCluster]:
        for cluster in clusters:
            self.score(cluster)
        return rank_clusters(clusters)


def rank_clusters(clusters: List[PersonCluster]) -> List[PersonCluster]:
    """Descending confidence, then source count, then earliest evidence."""
    return sorted(
        clusters,
        key=lambda c: (-c.confidence, -len(c.sources), c.first_evidence_index),
    )
