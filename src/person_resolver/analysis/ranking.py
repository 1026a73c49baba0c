"""
Result ranking and summarizing.

Produces the aggregate ``SummaryStatistics`` and the ``NarrativeAnalysis``
attached to every ``ClusteringResult``. Clusters are expected to be already
sorted (see ``scoring.confidence.rank_clusters``).
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from person_resolver.models import (
    NarrativeAnalysis,
    PersonCluster,
    SnippetOnlySource,
    SummaryStatistics,
)

HIGH_CONFIDENCE = 70
MEDIUM_CONFIDENCE = 40
LOW_TOP_CONFIDENCE = 50
TOP_DOMAIN_LIMIT = 5
KEY_SKILL_LIMIT = 5

LOW_CONFIDENCE_ACTION = "Low confidence - consider searching with additional terms"
MULTIPLE_IDENTITIES_ACTION = "Multiple identities detected - manual verification recommended"
SINGLE_SOURCE_ACTION = "Some identities have single sources - gather more evidence"

# Field types considered for strongest_evidence_types, in tie-break order
EVIDENCE_TYPES = ("email", "phone", "name", "social_profiles", "company", "title")


def is_high(cluster: PersonCluster) -> bool:
    return cluster.confidence > HIGH_CONFIDENCE


def is_medium(cluster: PersonCluster) -> bool:
    return MEDIUM_CONFIDENCE <= cluster.confidence <= HIGH_CONFIDENCE


def is_low(cluster: PersonCluster) -> bool:
    return cluster.confidence < MEDIUM_CONFIDENCE


def _distinct(values: Sequence[Optional[str]]) -> List[str]:
    """Distinct non-empty values in first-seen order, compared case-insensitively."""
    seen = set()
    out: List[str] = []
    for v in values:
        if not v:
            continue
        key = v.strip().lower()
        if key not in seen:
            seen.add(key)
            out.append(v)
    return out


# ----------------------------------------------------------------------
# Summary
# ----------------------------------------------------------------------

def top_domains(clusters: Sequence[PersonCluster], limit: int = TOP_DOMAIN_LIMIT) -> List[Dict[str, Any]]:
    """Most frequent source domains; ties broken alphabetically."""
    counts = Counter(s.domain for c in clusters for s in c.sources)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [{"domain": d, "count": n} for d, n in ranked[:limit]]


def biographical_rollup(clusters: Sequence[PersonCluster]) -> Optional[Dict[str, Any]]:
    """Biographical summary of the top cluster, when it was profiled."""
    if not clusters or clusters[0].biography is None:
        return None
    main = clusters[0]
    bio = main.biography
    ev = main.merged_evidence
    return {
        "career_stage": bio.career_stage,
        "professional_seniority": bio.professional_seniority,
        "industry_expertise": list(bio.industry_expertise),
        "education_level": bio.education_level,
        "thought_leadership": bio.thought_leadership,
        "key_skills": list(ev.skills[:KEY_SKILL_LIMIT]),
        "achievements_count": len(ev.achievements),
        "education_institutions": len(ev.education),
        "social_presence": len(ev.social_profiles),
    }


def summarize(
    clusters: Sequence[PersonCluster],
    snippet_only: Sequence[SnippetOnlySource] = (),
) -> SummaryStatistics:
    return SummaryStatistics(
        total_sources=sum(len(c.sources) for c in clusters),
        excluded_sources=len(snippet_only),
        high_confidence_persons=sum(1 for c in clusters if is_high(c)),
        medium_confidence_persons=sum(1 for c in clusters if is_medium(c)),
        low_confidence_persons=sum(1 for c in clusters if is_low(c)),
        top_domains=tuple(top_domains(clusters)),
        biographical_insights=biographical_rollup(clusters),
    )


# ----------------------------------------------------------------------
# Narrative
# ----------------------------------------------------------------------

def strongest_evidence_types(clusters: Sequence[PersonCluster], limit: int = 3) -> List[str]:
    strength = {t: 0 for t in EVIDENCE_TYPES}
    for c in clusters:
        ev = c.merged_evidence
        for t in EVIDENCE_TYPES:
            if getattr(ev, t):
                strength[t] += c.confidence
    ranked = sorted(EVIDENCE_TYPES, key=lambda t: -strength[t])
    return [t for t in ranked if strength[t] > 0][:limit]


def cross_platform_consistency(clusters: Sequence[PersonCluster]) -> float:
    if not clusters or not clusters[0].sources:
        return 0.0
    main = clusters[0]
    return round(min(main.unique_domains / len(main.sources), 1.0), 4)


def professional_coherence(clusters: Sequence[PersonCluster]) -> float:
    if not clusters:
        return 0.0
    main = clusters[0]
    ev = main.merged_evidence
    score = 0.0
    if ev.title:
        score += 0.3
    if ev.company:
        score += 0.3
    if ev.skills:
        score += 0.2
    if main.biography is not None and main.biography.industry_expertise:
        score += 0.2
    return round(min(score, 1.0), 4)


def reasons_for_multiple_people(clusters: Sequence[PersonCluster]) -> List[str]:
    reasons: List[str] = []
    if len(clusters) <= 1:
        return reasons

    reasons.append(f"Found {len(clusters)} distinct identity clusters")

    high = [c for c in clusters if is_high(c)]
    if len(high) > 1:
        reasons.append(f"Multiple high-confidence identities ({len(high)})")

    emails = _distinct([c.merged_evidence.email for c in clusters])
    if len(emails) > 1:
        reasons.append(f"Different email addresses found: {', '.join(emails)}")

    companies = _distinct([c.merged_evidence.company for c in clusters])
    if len(companies) > 1:
        reasons.append(f"Different companies: {', '.join(companies)}")

    return reasons


def recommended_actions(clusters: Sequence[PersonCluster]) -> List[str]:
    actions: List[str] = []
    main_confidence = clusters[0].confidence if clusters else 0
    if main_confidence < LOW_TOP_CONFIDENCE:
        actions.append(LOW_CONFIDENCE_ACTION)
    if len(clusters) > 2:
        actions.append(MULTIPLE_IDENTITIES_ACTION)
    if any(len(c.sources) == 1 for c in clusters):
        actions.append(SINGLE_SOURCE_ACTION)
    return actions


def narrate(clusters: Sequence[PersonCluster], clustering_method: str) -> NarrativeAnalysis:
    high = sum(1 for c in clusters if is_high(c))
    medium = sum(1 for c in clusters if is_medium(c))
    return NarrativeAnalysis(
        likely_same_person=(high == 1 and medium == 0),
        main_person_confidence=clusters[0].confidence if clusters else 0,
        reasons_for_multiple_people=tuple(reasons_for_multiple_people(clusters)),
        recommended_actions=tuple(recommended_actions(clusters)),
        clustering_method=clustering_method,
        strongest_evidence_types=tuple(strongest_evidence_types(clusters)),
        cross_platform_consistency=cross_platform_consistency(clusters),
        professional_coherence=professional_coherence(clusters),
    )
