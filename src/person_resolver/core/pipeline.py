from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from person_resolver.analysis.ranking import narrate, summarize
from person_resolver.analysis.relationships import RelationshipAnalyzer
from person_resolver.clustering import ClusteringStrategy, ScoredEvidence, get_strategy, order_evidence
from person_resolver.config import ResolverConfig, get_config
from person_resolver.core.context import ResolutionContext
from person_resolver.core.exceptions import ResolverError
from person_resolver.logging import get_logger
from person_resolver.models import (
    ClusteringResult,
    EvidenceItem,
    SnippetOnlySource,
    TargetIdentity,
)
from person_resolver.scoring.confidence import Biographer, ConfidenceScorer
from person_resolver.scoring.relevance import SourceRelevanceScorer

EvidenceInput = Union[EvidenceItem, dict]


def _coerce(evidence: Iterable[EvidenceInput]) -> List[EvidenceItem]:
    return [e if isinstance(e, EvidenceItem) else EvidenceItem.from_dict(e) for e in evidence]


class Pipeline:
    """
    Orchestrates one resolution run.
    No scoring or clustering logic lives here.
    """

    def __init__(
        self,
        context: ResolutionContext,
        strategy: ClusteringStrategy,
        biographer: Optional[Biographer] = None,
    ):
        self.ctx = context
        self.log = context.logger
        self.strategy = strategy
        self.biographer = biographer

    def _split_snippet_only(
        self, items: Sequence[EvidenceItem]
    ) -> Tuple[List[Tuple[int, EvidenceItem]], List[SnippetOnlySource]]:
        kept: List[Tuple[int, EvidenceItem]] = []
        snippet_only: List[SnippetOnlySource] = []
        for index, item in enumerate(items):
            if self.ctx.config.is_snippet_only(item.domain):
                snippet_only.append(SnippetOnlySource(item.url, item.title, item.snippet, item.domain))
                self.log.debug("item #%d on %s kept as snippet only", index, item.domain)
            else:
                kept.append((index, item))
        return kept, snippet_only

    def run(self, evidence: Iterable[EvidenceInput]) -> ClusteringResult:
        ctx = self.ctx
        stats = ctx.stats
        stats.strategy = self.strategy.name

        self.log.info(
            "Pipeline starting (target=%s, strategy=%s)", ctx.target.full_name, self.strategy.name
        )

        try:
            items = _coerce(evidence)
            stats.evidence_received = len(items)

            kept, snippet_only = self._split_snippet_only(items)
            stats.evidence_excluded = len(snippet_only)
            stats.evidence_clustered = len(kept)

            scorer = SourceRelevanceScorer(ctx.target, config=ctx.config)
            scored = [ScoredEvidence(item, scorer.score(item), index) for index, item in kept]
            ordered = order_evidence(scored, ctx.config.order)

            clusters = self.strategy.cluster(ordered, ctx)

            confidence = ConfidenceScorer(ctx.target, config=ctx.config, biographer=self.biographer)
            ranked = confidence.score_all(clusters)

            RelationshipAnalyzer().analyze(ranked, ctx)

            result = ClusteringResult(
                target=ctx.target,
                clusters=tuple(ranked),
                summary=summarize(ranked, snippet_only),
                analysis=narrate(ranked, self.strategy.name),
                stats=replace(stats),
                snippet_only_sources=tuple(snippet_only),
            )

        except ResolverError:
            self.log.exception("Pipeline execution failed")
            raise
        except Exception as exc:
            self.log.exception("Pipeline execution failed")
            raise ResolverError(str(exc)) from exc

        self.log.info(
            "Pipeline completed: %d clusters from %d items (%d snippet only, %d comparisons)",
            len(result.clusters),
            stats.evidence_received,
            stats.evidence_excluded,
            stats.pairwise_comparisons,
        )
        return result


def resolve(
    evidence: Iterable[EvidenceInput],
    target: TargetIdentity,
    strategy: Optional[str] = None,
    config: Optional[ResolverConfig] = None,
    biographer: Optional[Biographer] = None,
) -> ClusteringResult:
    """
    Resolve ``evidence`` about ``target`` into ranked identity clusters.

    ``strategy`` overrides ``resolution.strategy`` from the configuration.
    Every call builds its own context, so concurrent calls share nothing.
    """
    cfg = config or get_config()
    chosen = get_strategy(strategy or cfg.strategy)
    ctx = ResolutionContext(target=target, config=cfg, logger=get_logger("pipeline"))
    return Pipeline(ctx, chosen, biographer=biographer).run(evidence)
