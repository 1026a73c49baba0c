# tests/test_kmeans.py

from __future__ import annotations

import numpy as np
import pytest

from person_resolver.clustering import kmeans
from person_resolver.clustering.base import ScoredEvidence
from person_resolver.clustering.kmeans import (
    FeatureVectorClusterer,
    choose_k,
    distinguishing_features,
    elbow_k,
    fixed_centroid_labels,
    intra_cluster_similarity,
)
from person_resolver.config import KMeansSettings
from person_resolver.core.exceptions import ClusteringError


def _scored(items):
    return [ScoredEvidence(item, 40, i) for i, item in enumerate(items)]


def _mixed_items(make_evidence):
    acme = [
        make_evidence(
            url=f"https://github.com/jd{i}",
            title="Jane Doe - Engineer",
            snippet="Jane Doe jane@acme.com 2023",
            name="Jane Doe",
            email="jane@acme.com",
            company="Acme",
            skills=["Python", "SQL", "Go"],
        )
        for i in range(3)
    ]
    other = [
        make_evidence(url=f"https://blog{i}.example/post", snippet="unrelated 2001 fraud")
        for i in range(3)
    ]
    return acme + other


class TestClusterCount:
    def test_small_inputs(self):
        settings = KMeansSettings()
        assert choose_k(np.zeros((1, 15)), settings, 42) == 1
        assert choose_k(np.zeros((2, 15)), settings, 42) == 1
        assert choose_k(np.zeros((3, 15)), settings, 42) == 2
        assert choose_k(np.zeros((4, 15)), settings, 42) == 2

    def test_elbow_picks_k_after_largest_drop(self):
        assert elbow_k([100.0, 50.0, 10.0, 1.0], cap=3) == 2
        assert elbow_k([10.0, 9.0, 1.0, 0.5], cap=3) == 3

    def test_elbow_is_capped(self):
        assert elbow_k([10.0, 9.0, 8.0, 7.0, 1.0], cap=3) == 3

    def test_elbow_without_improvement_is_one(self):
        assert elbow_k([0.0, 0.0, 0.0], cap=3) == 1
        assert elbow_k([float("inf"), float("inf")], cap=3) == 1

    def test_elbow_on_separated_groups(self):
        X = np.array([[0.0, 0.0]] * 3 + [[5.0, 5.0]] * 3)
        assert choose_k(X, KMeansSettings(), 42) == 2


def test_fixed_centroid_labels_seeded_from_first_rows():
    X = np.array([[0.0, 0.0], [10.0, 10.0], [1.0, 1.0], [9.0, 9.0]])
    assert fixed_centroid_labels(X, 2).tolist() == [0, 1, 0, 1]


def test_fixed_centroid_labels_tolerate_nan():
    X = np.array([[np.nan, 0.0], [1.0, 1.0]])
    assert len(fixed_centroid_labels(X, 1)) == 2


def test_intra_cluster_similarity():
    assert intra_cluster_similarity(np.array([[0.3, 0.4]])) == 1.0
    assert intra_cluster_similarity(np.array([[0.0, 0.0], [3.0, 4.0]])) == pytest.approx(1 / 6)


def test_distinguishing_features_threshold():
    centroid = np.zeros(15)
    centroid[0] = 0.9
    centroid[1] = 0.7
    assert distinguishing_features(centroid) == ["nameMatch"]


def test_clusters_partition_items_and_carry_diagnostics(ctx, make_evidence):
    items = _mixed_items(make_evidence)
    clusters = FeatureVectorClusterer().cluster(_scored(items), ctx)

    indexes = sorted(s.evidence_index for c in clusters for s in c.sources)
    assert indexes == list(range(len(items)))
    assert ctx.stats.chosen_k == len(clusters) == 2
    for c in clusters:
        assert c.diagnostics is not None
        assert c.diagnostics.size == len(c.sources)
        assert len(c.diagnostics.centroid) == 15
        assert 0.0 < c.diagnostics.intra_cluster_similarity <= 1.0
        assert all(s.relevance_score == 40 for s in c.sources)

    acme = next(c for c in clusters if c.merged_evidence.email)
    assert "emailMatch" in acme.diagnostics.distinguishing_features
    assert ctx.stats.kmeans_fallbacks == 0


def test_numerical_failure_falls_back(ctx, make_evidence, monkeypatch):
    def boom(self, X, k, settings, seed):
        raise ClusteringError("singular")

    monkeypatch.setattr(FeatureVectorClusterer, "_fit", boom)
    items = _mixed_items(make_evidence)
    clusters = FeatureVectorClusterer().cluster(_scored(items), ctx)

    assert ctx.stats.kmeans_fallbacks == 1
    assert sum(len(c.sources) for c in clusters) == len(items)


def test_floating_point_error_in_elbow_and_fit_falls_back(ctx, make_evidence, monkeypatch):
    def overflow(*args, **kwargs):
        raise FloatingPointError("overflow encountered in square")

    monkeypatch.setattr(kmeans, "_kmeans", overflow)
    items = _mixed_items(make_evidence)
    clusters = FeatureVectorClusterer().cluster(_scored(items), ctx)

    # every elbow fit failed, so k falls back to 1
    assert ctx.stats.chosen_k == 1
    assert ctx.stats.kmeans_fallbacks == 1
    assert len(clusters) == 1
    assert sorted(s.evidence_index for s in clusters[0].sources) == list(range(len(items)))


def test_empty_input(ctx):
    assert FeatureVectorClusterer().cluster([], ctx) == []
