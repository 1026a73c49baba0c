"""
15-dimension feature vectors for the feature-vector clustering strategy.

Every dimension lies in [0, 1]. The order of ``FEATURE_NAMES`` is the
column order of the matrix returned by ``build_feature_matrix``.
"""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional, Sequence

import numpy as np

from person_resolver.config import ResolverConfig, get_config
from person_resolver.matching.identity import (
    contains_full_name,
    contains_target_email,
    contains_target_name,
    is_email_relevant,
    is_name_relevant,
    normalize_text,
)
from person_resolver.models import EvidenceItem, TargetIdentity

FEATURE_NAMES: List[str] = [
    # identity
    "nameMatch",
    "emailMatch",
    "phoneMatch",
    # professional
    "titleSimilarity",
    "companySimilarity",
    "skillsOverlap",
    # social
    "socialPlatformOverlap",
    "locationSimilarity",
    # content
    "topicSimilarity",
    "keywordDensity",
    "sentimentAlignment",
    # temporal
    "activityRecency",
    "contentFreshness",
    # trust
    "sourceTrustScore",
    "domainAuthority",
]

POSITIVE_WORDS = frozenset({
    "award", "awarded", "success", "successful", "excellent", "leading",
    "innovative", "expert", "recognized", "top", "best", "great",
})
NEGATIVE_WORDS = frozenset({
    "fraud", "lawsuit", "scandal", "fired", "arrested", "failed",
    "controversy", "complaint", "bankrupt", "worst",
})

_YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b")
_WORD_RE = re.compile(r"[a-z0-9@._-]+")


def _text_of(item: EvidenceItem) -> str:
    return f"{item.title} {item.snippet}".strip()


# ----------------------------------------------------------------------
# Individual dimensions
# ----------------------------------------------------------------------

def name_match(item: EvidenceItem, target: TargetIdentity) -> float:
    text = _text_of(item)
    if contains_full_name(text, target):
        return 1.0
    if is_name_relevant(item.attributes.name, target):
        return 0.9
    if contains_target_name(text, target):
        return 0.8
    lowered = text.lower()
    if (target.first and target.first in lowered) or (target.last and target.last in lowered):
        return 0.4
    return 0.0


def email_match(item: EvidenceItem, target: TargetIdentity) -> float:
    email = (item.attributes.email or "").strip().lower()
    if contains_target_email(_text_of(item), target) or (target.email_lc and email == target.email_lc):
        return 1.0
    if is_email_relevant(email, target):
        return 0.6
    return 0.0


def title_similarity(item: EvidenceItem, titles: Sequence[str]) -> float:
    title = normalize_text(item.attributes.title)
    if not title:
        return 0.0
    return 1.0 if any(t in title for t in titles) else 0.0


def keyword_density(item: EvidenceItem, target: TargetIdentity) -> float:
    words = _WORD_RE.findall(_text_of(item).lower())
    if not words:
        return 0.0
    tokens = [t for t in (target.first, target.last, target.email_lc) if t]
    if not tokens:
        return 0.0
    hits = sum(1 for w in words if any(t in w for t in tokens))
    return min(hits / len(words), 1.0)


def sentiment_alignment(item: EvidenceItem) -> float:
    """0.5 is neutral; positive vocabulary pushes toward 1, negative toward 0."""
    words = _WORD_RE.findall(_text_of(item).lower())
    pos = sum(1 for w in words if w in POSITIVE_WORDS)
    neg = sum(1 for w in words if w in NEGATIVE_WORDS)
    if pos + neg == 0:
        return 0.5
    return 0.5 + 0.5 * (pos - neg) / (pos + neg)


def _years_in(item: EvidenceItem) -> List[int]:
    return [int(y) for y in _YEAR_RE.findall(_text_of(item))]


def activity_recency(item: EvidenceItem, reference_year: int) -> float:
    years = [y for y in _years_in(item) if y <= reference_year]
    if not years:
        return 0.3
    latest = max(years)
    if latest >= reference_year - 1:
        return 1.0
    if latest >= reference_year - 3:
        return 0.7
    return 0.4


def content_freshness(item: EvidenceItem, reference_year: int) -> float:
    recent = {reference_year, reference_year - 1, reference_year - 2}
    return 0.8 if recent.intersection(_years_in(item)) else 0.4


# ----------------------------------------------------------------------
# Extractor
# ----------------------------------------------------------------------

class FeatureExtractor:
    """
    Builds one vector per evidence item. ``reference_year`` anchors the
    temporal features; it defaults to the configured year, then today.
    """

    def __init__(
        self,
        target: TargetIdentity,
        config: Optional[ResolverConfig] = None,
        reference_year: Optional[int] = None,
    ):
        self.target = target
        self.config = config or get_config()
        if reference_year is None:
            reference_year = self.config.reference_year
        self.reference_year = int(reference_year or date.today().year)

    def vector(self, item: EvidenceItem) -> List[float]:
        attrs = item.attributes
        topic_items = len(attrs.education) + len(attrs.achievements) + len(attrs.affiliations)
        return [
            name_match(item, self.target),
            email_match(item, self.target),
            0.5 if attrs.phone else 0.0,
            title_similarity(item, self.config.professional_titles),
            0.3 if attrs.company else 0.0,
            min(len(attrs.skills) * 0.1, 1.0),
            min(len(attrs.social_profiles) * 0.2, 1.0),
            0.5 if attrs.location else 0.0,
            min(topic_items * 0.05, 1.0),
            keyword_density(item, self.target),
            sentiment_alignment(item),
            activity_recency(item, self.reference_year),
            content_freshness(item, self.reference_year),
            float(self.config.source_trust.value_for(item.domain)),
            float(self.config.domain_authority.value_for(item.domain)),
        ]


def build_feature_matrix(items: Sequence[EvidenceItem], extractor: FeatureExtractor) -> np.ndarray:
    if not items:
        return np.zeros((0, len(FEATURE_NAMES)), dtype=float)
    return np.array([extractor.vector(item) for item in items], dtype=float)
