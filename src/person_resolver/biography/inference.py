import json
import os
import re
from typing import Any, Dict, List, Optional

from person_resolver.logging import get_logger
from person_resolver.models import BiographicalInsights, PersonCluster

log = get_logger(__name__)

_BIOGRAPHY_MAP_CACHE: Dict[str, Any] | None = None

ESTABLISHED_THRESHOLD = 3


def load_biography_map() -> Dict[str, Any]:
    """
    Load the biography keyword map from data/biography_keywords.json.
    Uses a simple in-memory cache so it only hits disk once.
    """
    global _BIOGRAPHY_MAP_CACHE
    if _BIOGRAPHY_MAP_CACHE is not None:
        return _BIOGRAPHY_MAP_CACHE

    base_dir = os.path.dirname(os.path.dirname(__file__))
    data_path = os.path.join(base_dir, "data", "biography_keywords.json")

    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Biography keyword map not found: {data_path}")

    with open(data_path, "r", encoding="utf-8") as f:
        _BIOGRAPHY_MAP_CACHE = json.load(f)

    return _BIOGRAPHY_MAP_CACHE


def _normalize_text(text: str) -> str:
    """
    Lowercase and strip to alphanumeric plus spaces.
    Good enough for whole-word keyword matching.
    """
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", " ", text)
    return text.strip()


def _has_keyword(norm_text: str, keywords: List[str]) -> bool:
    padded = f" {norm_text} "
    for kw in keywords:
        knorm = _normalize_text(kw)
        if knorm and f" {knorm} " in padded:
            return True
    return False


def _first_category(norm_text: str, categories: Dict[str, List[str]]) -> Optional[str]:
    """First category (in map order) with a keyword present in the text."""
    for name, keywords in categories.items():
        if _has_keyword(norm_text, keywords):
            return name
    return None


class KeywordBiographer:
    """
    Infers biographical signals for one cluster from its merged evidence
    and source text, using the packaged keyword map.

    Passed to the confidence scorer as the optional profile collaborator.
    """

    def __init__(self, keyword_map: Optional[Dict[str, Any]] = None):
        self.keyword_map = keyword_map if keyword_map is not None else load_biography_map()

    def _title_text(self, cluster: PersonCluster) -> str:
        parts = [cluster.merged_evidence.title or ""]
        parts.extend(s.title for s in cluster.sources)
        return _normalize_text(" ".join(parts))

    def _full_text(self, cluster: PersonCluster) -> str:
        ev = cluster.merged_evidence
        parts: List[str] = [ev.title or "", ev.company or ""]
        parts.extend(ev.skills)
        parts.extend(ev.education)
        parts.extend(ev.achievements)
        parts.extend(ev.affiliations)
        for s in cluster.sources:
            parts.append(s.title)
            parts.append(s.snippet)
        return _normalize_text(" ".join(parts))

    def profile(self, cluster: PersonCluster) -> BiographicalInsights:
        kmap = self.keyword_map
        full_text = self._full_text(cluster)

        seniority_map = kmap.get("seniority", {})
        seniority = _first_category(self._title_text(cluster), seniority_map)
        if seniority is None:
            seniority = _first_category(full_text, seniority_map)

        if _has_keyword(full_text, kmap.get("student", [])) and seniority in (None, "entry"):
            career_stage = "student"
        else:
            career_stage = kmap.get("career_stage", {}).get(seniority or "", "unknown")

        industries = sorted(
            name
            for name, keywords in kmap.get("industries", {}).items()
            if _has_keyword(full_text, keywords)
        )

        edu_text = _normalize_text(" ".join(cluster.merged_evidence.education))
        education_level = _first_category(edu_text, kmap.get("education_levels", {}))
        if education_level is None:
            education_level = _first_category(full_text, kmap.get("education_levels", {}))

        indicators = [
            kw for kw in kmap.get("thought_leadership", [])
            if _has_keyword(full_text, [kw])
        ]
        if len(indicators) >= ESTABLISHED_THRESHOLD:
            thought_leadership = "established"
        elif indicators:
            thought_leadership = "emerging"
        else:
            thought_leadership = "none"

        insights = BiographicalInsights(
            career_stage=career_stage,
            professional_seniority=seniority or "unknown",
            industry_expertise=industries,
            education_level=education_level or "unknown",
            thought_leadership=thought_leadership,
        )
        log.debug("biography %s: %s", cluster.cluster_id, insights)
        return insights
