# tests/test_incremental.py

from __future__ import annotations

import pytest

from person_resolver.clustering import available_strategies, get_strategy, order_evidence
from person_resolver.clustering.base import ScoredEvidence
from person_resolver.clustering.incremental import IncrementalClusterBuilder, accepts, match_score
from person_resolver.core.exceptions import UnknownStrategyError
from person_resolver.models import PersonAttributes


def _scored(items, relevance=50):
    return [ScoredEvidence(item, relevance, i) for i, item in enumerate(items)]


class TestAcceptanceRule:
    def test_zero_checks_never_accept(self):
        assert accepts(0, 0) is False

    def test_strong_signal_suffices(self):
        assert accepts(2, 5) is True

    def test_half_of_checks_rounded_up(self):
        assert accepts(1, 1) is True
        assert accepts(1, 2) is True
        assert accepts(1, 3) is False

    def test_no_weight_rejects(self):
        assert accepts(0, 1) is False


class TestMatchScore:
    def test_only_fields_present_on_both_sides_are_checks(self, target):
        a = PersonAttributes.from_dict({"email": "jane@acme.com", "company": "Acme"})
        b = PersonAttributes.from_dict({"email": "JANE@acme.com"})
        weight, checks, matched = match_score(a, b, target)
        assert (weight, checks, matched) == (3, 1, ["email"])

    def test_phone_compares_digits(self, target):
        a = PersonAttributes.from_dict({"phone": "+1 (555) 123-4567"})
        b = PersonAttributes.from_dict({"phone": "15551234567"})
        assert match_score(a, b, target)[:2] == (2, 1)

    def test_social_profiles_need_same_platform_and_username(self, target):
        a = PersonAttributes.from_dict({"social_profiles": [
            {"platform": "github", "username": "JaneD"},
            {"platform": "twitter", "username": "janed"},
        ]})
        b = PersonAttributes.from_dict({"social_profiles": [
            {"platform": "github", "username": "janed"},
            {"platform": "x", "username": "janed"},
        ]})
        weight, checks, matched = match_score(a, b, target)
        assert (weight, checks) == (2, 1)
        assert matched == ["social:github"]

    def test_mismatches_count_as_checks(self, target):
        a = PersonAttributes.from_dict({"email": "a@acme.com", "company": "Acme"})
        b = PersonAttributes.from_dict({"email": "b@globex.com", "company": "Globex"})
        assert match_score(a, b, target)[:2] == (0, 2)


class TestBuilder:
    def test_shared_email_joins_one_cluster(self, ctx, make_evidence):
        items = [
            make_evidence(url="https://a.example/1", email="jane@acme.com"),
            make_evidence(url="https://b.example/2", email="Jane@Acme.com", company="Acme"),
        ]
        clusters = IncrementalClusterBuilder().cluster(_scored(items), ctx)
        assert len(clusters) == 1
        assert clusters[0].cluster_id == "C1"
        assert len(clusters[0].sources) == 2

    def test_item_without_attributes_is_a_singleton(self, ctx, make_evidence):
        items = [
            make_evidence(url="https://a.example/1", email="jane@acme.com"),
            make_evidence(url="https://b.example/2"),
        ]
        clusters = IncrementalClusterBuilder().cluster(_scored(items), ctx)
        assert [len(c.sources) for c in clusters] == [1, 1]
        assert clusters[1].merged_evidence.is_empty()

    def test_conflicting_emails_split(self, ctx, make_evidence):
        items = [
            make_evidence(url="https://a.example/1", email="a@acme.com", company="Acme"),
            make_evidence(url="https://b.example/2", email="b@globex.com", company="Globex"),
        ]
        clusters = IncrementalClusterBuilder().cluster(_scored(items), ctx)
        assert [c.cluster_id for c in clusters] == ["C1", "C2"]

    def test_joins_first_accepting_cluster(self, ctx, make_evidence):
        items = [
            make_evidence(url="https://a.example/1", email="a@acme.com"),
            make_evidence(url="https://b.example/2", email="b@acme.com"),
            make_evidence(url="https://c.example/3", email="b@acme.com", phone="555"),
        ]
        clusters = IncrementalClusterBuilder().cluster(_scored(items), ctx)
        assert len(clusters) == 2
        assert [s.evidence_index for s in clusters[1].sources] == [1, 2]

    def test_counts_pairwise_comparisons(self, ctx, make_evidence):
        items = [make_evidence(url=f"https://x{i}.example/", email=f"p{i}@x.com") for i in range(4)]
        IncrementalClusterBuilder().cluster(_scored(items), ctx)
        # 0 + 1 + 2 + 3 item-vs-cluster tests
        assert ctx.stats.pairwise_comparisons == 6


def test_order_evidence_relevance_then_index(make_evidence):
    item = make_evidence()
    scored = [ScoredEvidence(item, 10, 0), ScoredEvidence(item, 90, 1), ScoredEvidence(item, 10, 2)]
    assert [s.index for s in order_evidence(scored, "relevance")] == [1, 0, 2]
    assert [s.index for s in order_evidence(scored, "input")] == [0, 1, 2]
    with pytest.raises(ValueError):
        order_evidence(scored, "random")


def test_strategy_registry():
    assert get_strategy("incremental").name == "incremental"
    assert get_strategy("Feature-Vector").name == "feature_vector"
    assert available_strategies() == ["feature_vector", "incremental"]
    with pytest.raises(UnknownStrategyError, match="feature_vector.*incremental"):
        get_strategy("magic")
