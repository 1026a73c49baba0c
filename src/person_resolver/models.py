from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from person_resolver.matching.domains import domain_from_url


SCALAR_FIELDS: Tuple[str, ...] = ("name", "email", "phone", "title", "company", "location")
COLLECTION_FIELDS: Tuple[str, ...] = ("skills", "education", "achievements", "affiliations", "websites")

# camelCase keys emitted by upstream extractors
_KEY_ALIASES = {
    "socialProfiles": "social_profiles",
    "evidenceContributed": "evidence_contributed",
    "relevanceScore": "relevance_score",
}


# -----------------------------
# Coercion helpers
# -----------------------------

def _clean_scalar(value: Any) -> Optional[str]:
    """Strings and numbers become stripped text; anything else is absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    out = " ".join(value.split())
    return out or None


def _clean_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    out: List[str] = []
    for v in value:
        s = _clean_scalar(v)
        if s is not None:
            out.append(s)
    return out


def _aliased(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_KEY_ALIASES.get(k, k): v for k, v in data.items()}


# -----------------------------
# Inputs
# -----------------------------

@dataclass(frozen=True, slots=True)
class TargetIdentity:
    """The queried person. Matching is always case-insensitive."""
    first_name: str
    last_name: str
    email: str = ""

    @property
    def first(self) -> str:
        return (self.first_name or "").strip().lower()

    @property
    def last(self) -> str:
        return (self.last_name or "").strip().lower()

    @property
    def email_lc(self) -> str:
        return (self.email or "").strip().lower()

    @property
    def full_name(self) -> str:
        return f"{self.first} {self.last}".strip()


@dataclass(slots=True)
class SocialProfile:
    platform: str
    url: str = ""
    username: Optional[str] = None
    followers: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SocialProfile"]:
        if not isinstance(data, dict):
            return None
        platform = _clean_scalar(data.get("platform"))
        if platform is None:
            return None
        followers = data.get("followers")
        if isinstance(followers, bool) or not isinstance(followers, int):
            followers = None
        return cls(
            platform=platform.lower(),
            url=_clean_scalar(data.get("url")) or "",
            username=_clean_scalar(data.get("username")),
            followers=followers,
        )


@dataclass(slots=True)
class PersonAttributes:
    """
    Candidate attributes about one person. Scalars are optional; collections
    are always lists (possibly empty).
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None

    social_profiles: List[SocialProfile] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    education: List[str] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    affiliations: List[str] = field(default_factory=list)
    websites: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "PersonAttributes":
        """Malformed fields are dropped, never raised."""
        if not isinstance(data, dict):
            return cls()
        data = _aliased(data)

        profiles: List[SocialProfile] = []
        raw_profiles = data.get("social_profiles")
        if isinstance(raw_profiles, list):
            for p in raw_profiles:
                prof = SocialProfile.from_dict(p)
                if prof is not None:
                    profiles.append(prof)

        return cls(
            **{f: _clean_scalar(data.get(f)) for f in SCALAR_FIELDS},
            social_profiles=profiles,
            **{f: _clean_list(data.get(f)) for f in COLLECTION_FIELDS},
        )

    def populated_fields(self) -> List[str]:
        """Field types carrying at least one value, in canonical order."""
        out = [f for f in SCALAR_FIELDS if getattr(self, f)]
        if self.social_profiles:
            out.append("social_profiles")
        out.extend(f for f in COLLECTION_FIELDS if getattr(self, f))
        return out

    def is_empty(self) -> bool:
        return not self.populated_fields()


@dataclass(slots=True)
class EvidenceItem:
    """One source-derived record: source metadata plus extracted attributes."""
    url: str = ""
    title: str = ""
    snippet: str = ""
    domain: str = ""
    attributes: PersonAttributes = field(default_factory=PersonAttributes)

    @classmethod
    def from_dict(cls, data: Any) -> "EvidenceItem":
        if not isinstance(data, dict):
            return cls()
        data = _aliased(data)
        url = _clean_scalar(data.get("url")) or ""
        domain = _clean_scalar(data.get("domain"))
        attrs = data.get("attributes")
        if attrs is None:
            attrs = data.get("evidence")
        return cls(
            url=url,
            title=_clean_scalar(data.get("title")) or "",
            snippet=_clean_scalar(data.get("snippet")) or "",
            domain=(domain or domain_from_url(url)).lower(),
            attributes=PersonAttributes.from_dict(attrs),
        )


# -----------------------------
# Cluster structures
# -----------------------------

@dataclass(slots=True)
class SourceRecord:
    url: str
    title: str
    snippet: str
    domain: str
    evidence_contributed: List[str] = field(default_factory=list)
    relevance_score: int = 0
    # Position of the evidence item in the caller's input list
    evidence_index: int = 0


@dataclass(slots=True)
class Relationship:
    type: str  # same_person | related_person | unrelated
    target_cluster_id: str
    confidence: float
    evidence_reasons: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ClusterDiagnostics:
    """Feature-space description of a cluster built by the vector strategy."""
    centroid: List[float]
    size: int
    intra_cluster_similarity: float
    distinguishing_features: List[str] = field(default_factory=list)


@dataclass(slots=True)
class BiographicalInsights:
    career_stage: str = "unknown"
    professional_seniority: str = "unknown"
    industry_expertise: List[str] = field(default_factory=list)
    education_level: str = "unknown"
    thought_leadership: str = "none"


@dataclass(slots=True)
class PersonCluster:
    cluster_id: str
    confidence: int = 0
    merged_evidence: PersonAttributes = field(default_factory=PersonAttributes)
    sources: List[SourceRecord] = field(default_factory=list)
    name_variations: List[str] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    biography: Optional[BiographicalInsights] = None
    diagnostics: Optional[ClusterDiagnostics] = None

    def add_name_variation(self, name: Optional[str]) -> None:
        if name and name not in self.name_variations:
            self.name_variations.append(name)

    @property
    def first_evidence_index(self) -> int:
        if not self.sources:
            return 0
        return min(s.evidence_index for s in self.sources)

    @property
    def unique_domains(self) -> int:
        return len({s.domain for s in self.sources})


# -----------------------------
# Result
# -----------------------------

@dataclass(frozen=True, slots=True)
class SnippetOnlySource:
    url: str
    title: str
    snippet: str
    domain: str


@dataclass(slots=True)
class ResolutionStats:
    strategy: str = "incremental"
    evidence_received: int = 0
    evidence_clustered: int = 0
    evidence_excluded: int = 0
    pairwise_comparisons: int = 0
    kmeans_fallbacks: int = 0
    chosen_k: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SummaryStatistics:
    total_sources: int = 0
    excluded_sources: int = 0
    high_confidence_persons: int = 0    # confidence > 70
    medium_confidence_persons: int = 0  # 40 <= confidence <= 70
    low_confidence_persons: int = 0     # confidence < 40
    top_domains: Tuple[Dict[str, Any], ...] = ()
    biographical_insights: Optional[Dict[str, Any]] = None


@dataclass(frozen=True, slots=True)
class NarrativeAnalysis:
    likely_same_person: bool = False
    main_person_confidence: int = 0
    reasons_for_multiple_people: Tuple[str, ...] = ()
    recommended_actions: Tuple[str, ...] = ()
    clustering_method: str = "incremental"
    strongest_evidence_types: Tuple[str, ...] = ()
    cross_platform_consistency: float = 0.0
    professional_coherence: float = 0.0


@dataclass(frozen=True, slots=True)
class ClusteringResult:
    target: TargetIdentity
    clusters: Tuple[PersonCluster, ...]
    summary: SummaryStatistics
    analysis: NarrativeAnalysis
    stats: ResolutionStats
    snippet_only_sources: Tuple[SnippetOnlySource, ...] = ()

    def cluster_by_id(self, cluster_id: str) -> Optional[PersonCluster]:
        for c in self.clusters:
            if c.cluster_id == cluster_id:
                return c
        return None
