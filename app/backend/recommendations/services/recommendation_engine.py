"""Recommendation engine blending several TMDB-derived strategies."""

import logging
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .candidates import CandidatePool
from .scoring import rank_candidates
from .strategies import STRATEGIES, RecommendationSignals, Strategy, apply_keyword_boost
from .tmdb_client import TMDBClient, TMDBError

logger = logging.getLogger(__name__)

ALGORITHM_NAME = "hybrid-blend-v2"
DEFAULT_LIMIT = 24


class RecommendationEngine:
    """
    Blends candidate lists discovered by independent strategies:
    - similar: TMDB related lists of liked movies
    - genre / diverse: top rated in preferred and unexplored genres
    - director: other work by directors of liked movies
    - hidden-gem / trending: catalog-wide discovery
    then boosts search-history matches and ranks by a weighted ensemble score.
    """

    def __init__(self, tmdb: Optional[TMDBClient] = None, strategies: Sequence[Strategy] = STRATEGIES):
        self.tmdb = tmdb or TMDBClient()
        self.strategies = tuple(strategies)

    def _run_strategy(self, strategy: Strategy, signals: RecommendationSignals, pool: CandidatePool) -> int:
        """Run one strategy into the pool. Returns the number of contributions applied."""
        try:
            contributions = strategy.run(self.tmdb, signals, pool)
        except TMDBError as e:
            logger.warning(f"Strategy '{strategy.name}' skipped: {e}")
            return 0
        applied = pool.apply_all(contributions)
        logger.debug(f"Strategy '{strategy.name}' applied {applied} contributions, pool size {len(pool)}")
        return applied

    def build_pool(self, signals: RecommendationSignals) -> Tuple[CandidatePool, List[str]]:
        """Run all enabled strategies and the keyword boost into a fresh pool.

        Returns the pool and the labels of the strategies that contributed.
        """
        pool = CandidatePool()
        used = []
        for strategy in self.strategies:
            if not strategy.enabled(signals):
                continue
            if self._run_strategy(strategy, signals, pool):
                used.append(strategy.label)

        if signals.search_terms:
            apply_keyword_boost(pool, signals.search_terms)
            used.append("search-history-matching")

        used.append("weighted-ensemble-ranking")
        return pool, used

    def get_recommendations(
        self,
        liked_movie_ids: Sequence[int] = (),
        genre_ids: Sequence[int] = (),
        search_terms: Sequence[str] = (),
        limit: int = DEFAULT_LIMIT,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Get blended recommendations.

        Never raises for upstream failures: whatever candidates were gathered
        are ranked, possibly none.
        """
        signals = RecommendationSignals(
            liked_movie_ids=list(liked_movie_ids),
            genre_ids=list(genre_ids),
            search_terms=list(search_terms),
        )
        pool, strategies_used = self.build_pool(signals)
        ranked = rank_candidates(list(pool), limit=limit, today=today)

        logger.info(
            f"Blended {len(pool)} candidates into {len(ranked)} recommendations "
            f"(liked={len(signals.liked_movie_ids)}, genres={len(signals.genre_ids)})"
        )

        return {
            "recommendations": ranked,
            "total": len(ranked),
            "algorithm": ALGORITHM_NAME,
            "avg_confidence": _average_confidence(ranked),
            "strategy_distribution": dict(Counter(m["recommendation_type"] for m in ranked)),
            "strategies_used": strategies_used,
        }


def _average_confidence(ranked: List[Dict[str, Any]]) -> int:
    if not ranked:
        return 0
    return round(sum(m["confidence"] for m in ranked) / len(ranked))
