# tests/test_merge.py

from __future__ import annotations

import copy

from person_resolver.clustering.merge import (
    add_to_cluster,
    evidence_contributed,
    merge_attributes,
    new_cluster,
)
from person_resolver.models import PersonAttributes


def _attrs(**data) -> PersonAttributes:
    return PersonAttributes.from_dict(data)


def test_scalars_are_first_source_wins():
    merged = _attrs(name="Jane Doe", email=None)
    merge_attributes(merged, _attrs(name="J. Doe", email="jane@acme.com"))
    assert merged.name == "Jane Doe"
    assert merged.email == "jane@acme.com"


def test_collections_union_case_insensitively():
    merged = _attrs(skills=["Python", "SQL"])
    merge_attributes(merged, _attrs(skills=["python", "Go", "sql"]))
    assert merged.skills == ["Python", "SQL", "Go"]


def test_social_profiles_keyed_by_platform_and_url():
    merged = _attrs(social_profiles=[{"platform": "github", "url": "https://github.com/jd"}])
    merge_attributes(
        merged,
        _attrs(social_profiles=[
            {"platform": "GitHub", "url": "https://GITHUB.com/jd", "username": "jd"},
            {"platform": "github", "url": "https://github.com/jd2"},
        ]),
    )
    assert [p.url for p in merged.social_profiles] == [
        "https://github.com/jd",
        "https://github.com/jd2",
    ]


def test_merge_is_idempotent():
    record = _attrs(
        name="Jane Doe",
        company="Acme",
        skills=["Python"],
        education=["MIT"],
        social_profiles=[{"platform": "x", "url": "https://x.com/jd"}],
    )
    merged = merge_attributes(PersonAttributes(), record)
    before = copy.deepcopy(merged)

    merge_attributes(merged, record)

    assert merged == before


def test_new_cluster_does_not_alias_item_lists(make_evidence):
    item = make_evidence(name="Jane Doe", skills=["Python"])
    cluster = new_cluster("C1", item, 40, 0)
    cluster.merged_evidence.skills.append("Go")
    assert item.attributes.skills == ["Python"]


def test_add_to_cluster_appends_source_and_name_variation(make_evidence):
    cluster = new_cluster("C1", make_evidence(name="Jane Doe"), 40, 3)
    add_to_cluster(cluster, make_evidence(url="https://b.example/x", name="Jane A. Doe"), 25, 1)
    add_to_cluster(cluster, make_evidence(url="https://c.example/x", name="Jane Doe"), 10, 2)

    assert len(cluster.sources) == 3
    assert cluster.name_variations == ["Jane Doe", "Jane A. Doe"]
    assert [s.relevance_score for s in cluster.sources] == [40, 25, 10]
    assert cluster.first_evidence_index == 1


def test_evidence_contributed_labels():
    labels = evidence_contributed(
        _attrs(email="jane@acme.com", skills=["Python"], social_profiles=[{"platform": "x", "username": "jd"}])
    )
    assert labels == ["email:jane@acme.com", "social_profiles:x:jd", "skills:Python"]
