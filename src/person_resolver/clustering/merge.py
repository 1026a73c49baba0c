"""
Evidence merging for one hypothesized identity.

Scalars are first-source-wins; collections are de-duplicated unions
(strings case-insensitively, social profiles by (platform, url)).
"""

from __future__ import annotations

from typing import List

from person_resolver.models import (
    COLLECTION_FIELDS,
    SCALAR_FIELDS,
    EvidenceItem,
    PersonAttributes,
    PersonCluster,
    SocialProfile,
    SourceRecord,
)


def _union_strings(existing: List[str], incoming: List[str]) -> None:
    seen = {s.lower() for s in existing}
    for value in incoming:
        key = value.lower()
        if key not in seen:
            seen.add(key)
            existing.append(value)


def _profile_key(profile: SocialProfile) -> tuple:
    return (profile.platform.lower(), profile.url.lower())


def merge_attributes(target: PersonAttributes, incoming: PersonAttributes) -> PersonAttributes:
    """Merge ``incoming`` into ``target`` in place and return ``target``."""
    for name in SCALAR_FIELDS:
        if not getattr(target, name) and getattr(incoming, name):
            setattr(target, name, getattr(incoming, name))

    seen = {_profile_key(p) for p in target.social_profiles}
    for profile in incoming.social_profiles:
        key = _profile_key(profile)
        if key not in seen:
            seen.add(key)
            target.social_profiles.append(
                SocialProfile(profile.platform, profile.url, profile.username, profile.followers)
            )

    for name in COLLECTION_FIELDS:
        _union_strings(getattr(target, name), getattr(incoming, name))

    return target


def evidence_contributed(attrs: PersonAttributes) -> List[str]:
    """``field:value`` labels for everything one item supplied."""
    out: List[str] = []
    for name in SCALAR_FIELDS:
        value = getattr(attrs, name)
        if value:
            out.append(f"{name}:{value}")
    for profile in attrs.social_profiles:
        out.append(f"social_profiles:{profile.platform}:{profile.username or profile.url}")
    for name in COLLECTION_FIELDS:
        for value in getattr(attrs, name):
            out.append(f"{name}:{value}")
    return out


def build_source_record(item: EvidenceItem, relevance: int, index: int) -> SourceRecord:
    return SourceRecord(
        url=item.url,
        title=item.title,
        snippet=item.snippet,
        domain=item.domain,
        evidence_contributed=evidence_contributed(item.attributes),
        relevance_score=relevance,
        evidence_index=index,
    )


def new_cluster(cluster_id: str, item: EvidenceItem, relevance: int, index: int) -> PersonCluster:
    # Seed through the merger so the cluster never aliases the item's lists
    # and duplicate collection entries inside one item collapse.
    cluster = PersonCluster(
        cluster_id=cluster_id,
        merged_evidence=merge_attributes(PersonAttributes(), item.attributes),
        sources=[build_source_record(item, relevance, index)],
    )
    cluster.add_name_variation(item.attributes.name)
    return cluster


def add_to_cluster(cluster: PersonCluster, item: EvidenceItem, relevance: int, index: int) -> None:
    merge_attributes(cluster.merged_evidence, item.attributes)
    cluster.sources.append(build_source_record(item, relevance, index))
    cluster.add_name_variation(item.attributes.name)
