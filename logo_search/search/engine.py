"""
Scoring and ranking engine.

Two paths share one entry point (SearchEngine.search):

Structured path (query.text is None):
    1. Run the industry, keyword and description matchers per record
    2. Inclusion: industry is a hard filter when supplied; keywords and
       description form an OR gate over whichever of them were supplied
    3. Score = sum of matcher scores
    4. Sort by (score desc, id asc), keep the first `limit`
    A query with no industry, keywords or description returns nothing.

Fuzzy path (query.text is set):
    1. Optional pre-filter: exact industry match (ANY)
    2. Empty text: first `limit` candidates in collection order (browse)
    3. Otherwise the fuzzy matcher's order, verbatim, truncated to `limit`

Fuzzy runs execute on the engine's own bounded thread pool. A run that
times out cannot be interrupted; it holds its worker until it returns,
and later runs queue behind it within their own timeout.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from ..config import FuzzySettings, ScoringWeights
from ..errors import SearchTimeout
from ..fuzzy.base import FuzzyMatcher
from ..models import Record
from .matchers import industry_bag, match_description, match_industry, match_keywords
from .query import DEFAULT_LIMIT, MAX_LIMIT, Query, clamp_limit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredResult:
    """Record with its relevance score (internal ranking artifact)"""
    record: Record
    score: float


def rank(
    results: Sequence[ScoredResult],
    limit: Any = None,
    default: int = DEFAULT_LIMIT,
    maximum: int = MAX_LIMIT,
) -> List[ScoredResult]:
    """
    Order by score descending, ties by ascending id; keep the first limit.

    The limit is clamped into [1, maximum]; missing or unparseable
    values give the default.
    """
    ordered = sorted(results, key=lambda r: (-r.score, r.record.id))
    return ordered[:clamp_limit(limit, default=default, maximum=maximum)]


class SearchEngine:
    """Structured scoring plus fuzzy fallback over a record collection."""

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        fuzzy_matcher: Optional[FuzzyMatcher] = None,
        fuzzy_settings: Optional[FuzzySettings] = None,
        max_limit: int = MAX_LIMIT,
    ):
        self.weights = weights or ScoringWeights()
        self.fuzzy_matcher = fuzzy_matcher
        self.fuzzy_settings = fuzzy_settings or FuzzySettings()
        self.max_limit = max_limit
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def executor(self) -> ThreadPoolExecutor:
        """Thread pool for fuzzy runs, created on first use"""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=max(1, self.fuzzy_settings.workers),
                thread_name_prefix="fuzzy-search",
            )
        return self._executor

    def close(self) -> None:
        """Release the fuzzy thread pool without waiting for running matches."""
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def score_record(self, record: Record, query: Query) -> Optional[float]:
        """Total score of an included record, or None if it is excluded."""
        industry = match_industry(record, query, self.weights)
        if not industry.matched:
            return None

        keywords = match_keywords(record, query, self.weights)
        description = match_description(record, query, self.weights)

        gate = [m for m in (keywords, description) if m.supplied]
        if gate and not any(m.matched for m in gate):
            return None

        return industry.score + keywords.score + description.score

    def structured_search(self, records: Sequence[Record], query: Query) -> List[ScoredResult]:
        if not query.has_structured_filters:
            return []

        included = []
        for record in records:
            score = self.score_record(record, query)
            if score is not None:
                included.append(ScoredResult(record=record, score=score))
        return rank(included, query.limit, maximum=self.max_limit)

    def fuzzy_candidates(self, records: Sequence[Record], query: Query) -> List[Record]:
        if not query.industries:
            return list(records)
        return [r for r in records if industry_bag(r) & query.industries]

    def fuzzy_search(self, records: Sequence[Record], query: Query) -> List[Record]:
        limit = clamp_limit(query.limit, maximum=self.max_limit)
        candidates = self.fuzzy_candidates(records, query)
        if not (query.text or "").strip():
            return candidates[:limit]

        if self.fuzzy_matcher is None:
            raise RuntimeError("Fuzzy query received but no fuzzy matcher is configured")

        hits = self.fuzzy_matcher.search(
            query.text,
            candidates,
            self.fuzzy_settings.weights,
            self.fuzzy_settings.threshold,
        )
        return [candidates[hit.index] for hit in hits[:limit]]

    async def search(self, records: Sequence[Record], query: Query) -> List[Record]:
        """
        Run the path selected by the query and return ranked records.

        Raises:
            SearchTimeout: Fuzzy matching exceeded the configured timeout
        """
        if not query.is_fuzzy:
            results = [r.record for r in self.structured_search(records, query)]
            logger.debug(f"Structured search: {len(results)} results (limit={query.limit})")
            return results

        timeout = self.fuzzy_settings.timeout
        loop = asyncio.get_running_loop()
        try:
            results = await asyncio.wait_for(
                loop.run_in_executor(self.executor, self.fuzzy_search, records, query),
                timeout=timeout if timeout > 0 else None,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Fuzzy search for {query.text!r} exceeded {timeout}s over {len(records)} records")
            raise SearchTimeout(timeout)

        logger.debug(f"Fuzzy search {query.text!r}: {len(results)} results (limit={query.limit})")
        return results
