"""
Feature-vector clustering strategy.

Items are embedded with ``FeatureExtractor`` and partitioned with
scikit-learn ``KMeans`` (k-means++, Euclidean, fixed ``random_state``).
The cluster count comes from a capped elbow heuristic. When the numerical
step fails, items are assigned to the nearest of k fixed centroids taken
from the first k vectors; the fallback is counted in
``ResolutionStats.kmeans_fallbacks`` and logged.
"""

from __future__ import annotations

import math
import warnings
from typing import Dict, List, Optional, Sequence

import numpy as np
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from person_resolver.clustering.base import ClusteringStrategy, ScoredEvidence, register_strategy
from person_resolver.clustering.features import FEATURE_NAMES, FeatureExtractor, build_feature_matrix
from person_resolver.clustering.merge import add_to_cluster, new_cluster
from person_resolver.config import KMeansSettings
from person_resolver.core.context import ResolutionContext
from person_resolver.core.exceptions import ClusteringError
from person_resolver.logging import get_logger
from person_resolver.models import ClusterDiagnostics, PersonCluster

log = get_logger(__name__)

DISTINGUISHING_THRESHOLD = 0.7

# scikit-learn input errors plus numpy floating-point errors (FloatingPointError)
NUMERICAL_ERRORS = (ValueError, ArithmeticError)


# ----------------------------------------------------------------------
# Numerical helpers
# ----------------------------------------------------------------------

def _kmeans(X: np.ndarray, k: int, settings: KMeansSettings, seed: int, max_iter: int) -> KMeans:
    model = KMeans(
        n_clusters=k,
        init="k-means++",
        n_init=settings.n_init,
        max_iter=max_iter,
        tol=settings.tol,
        random_state=seed,
    )
    with warnings.catch_warnings():
        # duplicate vectors make k-means report fewer distinct clusters than k
        warnings.simplefilter("ignore", ConvergenceWarning)
        model.fit(X)
    return model


def elbow_k(wcss: Sequence[float], cap: int) -> int:
    """
    ``wcss[i]`` is the within-cluster sum of squares for ``k = i + 1``.
    Returns the k that follows the largest single improvement, capped.
    """
    best_k = 1
    best_gain = 0.0
    for i in range(1, len(wcss)):
        prev, cur = wcss[i - 1], wcss[i]
        if not (math.isfinite(prev) and math.isfinite(cur)):
            continue
        gain = prev - cur
        if gain > best_gain:
            best_gain = gain
            best_k = i + 1
    return min(best_k, cap)


def choose_k(X: np.ndarray, settings: KMeansSettings, seed: int) -> int:
    n = len(X)
    if n <= 2:
        return 1
    if n <= 4:
        return 2

    upper = min(settings.max_k, n // 2)
    wcss: List[float] = []
    finite = bool(np.all(np.isfinite(X)))
    for k in range(1, upper + 1):
        if not finite:
            wcss.append(math.inf)
            continue
        try:
            wcss.append(float(_kmeans(X, k, settings, seed, settings.elbow_max_iter).inertia_))
        except NUMERICAL_ERRORS as exc:
            log.debug("WCSS for k=%d unavailable: %s", k, exc)
            wcss.append(math.inf)

    k = elbow_k(wcss, settings.k_cap)
    log.debug("elbow wcss=%s -> k=%d", [round(w, 4) for w in wcss], k)
    return k


def fixed_centroid_labels(X: np.ndarray, k: int) -> np.ndarray:
    """Nearest-centroid assignment, centroids seeded from the first k rows."""
    X = np.nan_to_num(X, nan=0.0, posinf=1.0, neginf=0.0)
    n = len(X)
    centroids = np.array([X[i % n] for i in range(k)])
    distances = np.linalg.norm(X[:, None, :] - centroids[None, :, :], axis=2)
    return np.argmin(distances, axis=1)


def intra_cluster_similarity(vectors: np.ndarray) -> float:
    """Mean of ``1 / (1 + d)`` over all member pairs; 1.0 for a singleton."""
    n = len(vectors)
    if n < 2:
        return 1.0
    total = 0.0
    pairs = 0
    for i in range(n):
        for j in range(i + 1, n):
            total += 1.0 / (1.0 + float(np.linalg.norm(vectors[i] - vectors[j])))
            pairs += 1
    return total / pairs


def distinguishing_features(centroid: np.ndarray) -> List[str]:
    return [FEATURE_NAMES[i] for i, v in enumerate(centroid) if v > DISTINGUISHING_THRESHOLD]


# ----------------------------------------------------------------------
# Strategy
# ----------------------------------------------------------------------

class FeatureVectorClusterer(ClusteringStrategy):
    name = "feature_vector"

    def __init__(self, reference_year: Optional[int] = None):
        self.reference_year = reference_year

    def _fit(self, X: np.ndarray, k: int, settings: KMeansSettings, seed: int) -> np.ndarray:
        if not np.all(np.isfinite(X)):
            raise ClusteringError("feature matrix contains non-finite values")
        return _kmeans(X, k, settings, seed, settings.max_iter).labels_

    def cluster(self, scored: Sequence[ScoredEvidence], ctx: ResolutionContext) -> List[PersonCluster]:
        if not scored:
            return []

        cfg = ctx.config
        settings = cfg.kmeans
        seed = cfg.random_seed

        extractor = FeatureExtractor(ctx.target, cfg, reference_year=self.reference_year)
        X = build_feature_matrix([s.item for s in scored], extractor)

        k = choose_k(X, settings, seed)
        ctx.stats.chosen_k = k

        try:
            labels = self._fit(X, k, settings, seed)
        except (ClusteringError, ValueError, ArithmeticError) as exc:
            ctx.stats.kmeans_fallbacks += 1
            log.warning("k-means failed (%s); using fixed-centroid assignment with k=%d", exc, k)
            labels = fixed_centroid_labels(X, k)

        # Group rows by label in order of first appearance
        groups: Dict[int, List[int]] = {}
        for row, label in enumerate(labels):
            groups.setdefault(int(label), []).append(row)

        clusters: List[PersonCluster] = []
        for rows in groups.values():
            first = scored[rows[0]]
            cluster = new_cluster(ctx.next_cluster_id(), first.item, first.relevance, first.index)
            for row in rows[1:]:
                entry = scored[row]
                add_to_cluster(cluster, entry.item, entry.relevance, entry.index)

            members = X[rows]
            centroid = members.mean(axis=0)
            cluster.diagnostics = ClusterDiagnostics(
                centroid=[round(float(v), 6) for v in centroid],
                size=len(rows),
                intra_cluster_similarity=round(intra_cluster_similarity(members), 6),
                distinguishing_features=distinguishing_features(centroid),
            )
            clusters.append(cluster)

        log.info(
            "Feature-vector clustering: %d items, k=%d -> %d clusters (fallbacks=%d)",
            len(scored), k, len(clusters), ctx.stats.kmeans_fallbacks,
        )
        return clusters


register_strategy(FeatureVectorClusterer.name, FeatureVectorClusterer)
