"""
Source relevance: how strongly one evidence item's source matches the
queried identity, independent of clustering.
"""

from __future__ import annotations

from typing import Optional

from person_resolver.config import ResolverConfig, TierTable, get_config
from person_resolver.logging import get_logger
from person_resolver.matching.identity import (
    contains_full_name,
    contains_target_email,
    is_email_relevant,
    is_name_relevant,
)
from person_resolver.models import EvidenceItem, TargetIdentity

log = get_logger(__name__)

BASE_SCORE = 10
NAME_IN_TITLE = 30
NAME_IN_SNIPPET = 20
EMAIL_IN_TITLE = 40
EMAIL_IN_SNIPPET = 30
EXTRACTED_EMAIL = 25
EXTRACTED_NAME = 20
EXTRACTED_SECONDARY = 10  # phone, company, title each
EXTRACTED_SOCIAL = 15
MAX_SCORE = 100


class SourceRelevanceScorer:
    """
    Scores an evidence item 0-100.

    ``domain_trust`` is injected so tests can use synthetic domains; it
    defaults to the ``relevance.domain_trust`` table of the configuration.
    """

    def __init__(
        self,
        target: TargetIdentity,
        domain_trust: Optional[TierTable] = None,
        config: Optional[ResolverConfig] = None,
    ):
        self.target = target
        cfg = config or get_config()
        self.domain_trust = domain_trust or cfg.domain_trust

    def domain_bonus(self, domain: str) -> int:
        return int(self.domain_trust.value_for(domain))

    def score(self, item: EvidenceItem) -> int:
        t = self.target
        score = BASE_SCORE

        if contains_full_name(item.title, t):
            score += NAME_IN_TITLE
        if contains_full_name(item.snippet, t):
            score += NAME_IN_SNIPPET

        if contains_target_email(item.title, t):
            score += EMAIL_IN_TITLE
        if contains_target_email(item.snippet, t):
            score += EMAIL_IN_SNIPPET

        score += self.domain_bonus(item.domain)

        attrs = item.attributes
        if is_email_relevant(attrs.email, t):
            score += EXTRACTED_EMAIL
        if is_name_relevant(attrs.name, t):
            score += EXTRACTED_NAME
        for value in (attrs.phone, attrs.company, attrs.title):
            if value:
                score += EXTRACTED_SECONDARY
        if attrs.social_profiles:
            score += EXTRACTED_SOCIAL

        final = min(score, MAX_SCORE)
        log.debug("relevance url=%s domain=%s score=%d", item.url, item.domain, final)
        return final
