"""
Greedy, single-pass rule-based clustering.

Each incoming item is tested against the existing clusters in creation
order. A check is "applicable" only when both the item and the cluster carry
the field. Weights:

    email (exact, case-insensitive)   3
    name similarity                   2
    phone (exact digits)              2
    company similarity                1
    title similarity                  1
    shared (platform, username)       2 per matching incoming profile

A cluster accepts when at least one check applied and either
``weight >= ceil(0.5 * checks)`` or ``weight >= 2``. The first accepting
cluster wins; otherwise the item seeds a new cluster.

The result depends on input order, so callers pass a fixed order
(see ``order_evidence``).
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from person_resolver.clustering.base import ClusteringStrategy, ScoredEvidence, register_strategy
from person_resolver.clustering.merge import add_to_cluster, new_cluster
from person_resolver.core.context import ResolutionContext
from person_resolver.logging import get_logger
from person_resolver.matching.identity import names_similar, normalize_phone, strings_similar
from person_resolver.models import PersonAttributes, PersonCluster, TargetIdentity

log = get_logger(__name__)

EMAIL_WEIGHT = 3
NAME_WEIGHT = 2
PHONE_WEIGHT = 2
COMPANY_WEIGHT = 1
TITLE_WEIGHT = 1
SOCIAL_WEIGHT = 2
STRONG_SIGNAL = 2


def match_score(
    evidence: PersonAttributes,
    cluster_evidence: PersonAttributes,
    target: TargetIdentity,
) -> Tuple[int, int, List[str]]:
    """
    Return ``(weight, applicable_checks, matched_fields)`` for one item
    against one cluster's merged evidence.
    """
    weight = 0
    checks = 0
    matched: List[str] = []

    if evidence.email and cluster_evidence.email:
        checks += 1
        if evidence.email.strip().lower() == cluster_evidence.email.strip().lower():
            weight += EMAIL_WEIGHT
            matched.append("email")

    if evidence.name and cluster_evidence.name:
        checks += 1
        if names_similar(evidence.name, cluster_evidence.name, target):
            weight += NAME_WEIGHT
            matched.append("name")

    if evidence.phone and cluster_evidence.phone:
        checks += 1
        p1 = normalize_phone(evidence.phone)
        if p1 and p1 == normalize_phone(cluster_evidence.phone):
            weight += PHONE_WEIGHT
            matched.append("phone")

    if evidence.company and cluster_evidence.company:
        checks += 1
        if strings_similar(evidence.company, cluster_evidence.company):
            weight += COMPANY_WEIGHT
            matched.append("company")

    if evidence.title and cluster_evidence.title:
        checks += 1
        if strings_similar(evidence.title, cluster_evidence.title):
            weight += TITLE_WEIGHT
            matched.append("title")

    if evidence.social_profiles and cluster_evidence.social_profiles:
        known = {
            (p.platform.lower(), p.username.lower())
            for p in cluster_evidence.social_profiles
            if p.username
        }
        for profile in evidence.social_profiles:
            if profile.username and (profile.platform.lower(), profile.username.lower()) in known:
                weight += SOCIAL_WEIGHT
                checks += 1
                matched.append(f"social:{profile.platform}")

    return weight, checks, matched


def accepts(weight: int, checks: int) -> bool:
    if checks == 0:
        return False
    return weight >= math.ceil(0.5 * checks) or weight >= STRONG_SIGNAL


class IncrementalClusterBuilder(ClusteringStrategy):
    name = "incremental"

    def cluster(self, scored: Sequence[ScoredEvidence], ctx: ResolutionContext) -> List[PersonCluster]:
        clusters: List[PersonCluster] = []

        for entry in scored:
            attrs = entry.item.attributes
            chosen = None

            for cluster in clusters:
                ctx.stats.pairwise_comparisons += 1
                weight, checks, matched = match_score(attrs, cluster.merged_evidence, ctx.target)
                if accepts(weight, checks):
                    log.debug(
                        "item #%d -> %s (weight=%d checks=%d matched=%s)",
                        entry.index, cluster.cluster_id, weight, checks, matched,
                    )
                    chosen = cluster
                    break

            if chosen is not None:
                add_to_cluster(chosen, entry.item, entry.relevance, entry.index)
            else:
                cluster = new_cluster(ctx.next_cluster_id(), entry.item, entry.relevance, entry.index)
                log.debug("item #%d seeds %s", entry.index, cluster.cluster_id)
                clusters.append(cluster)

        log.info("Incremental clustering: %d items -> %d clusters", len(scored), len(clusters))
        return clusters


register_strategy(IncrementalClusterBuilder.name, IncrementalClusterBuilder)
