"""
Fuzzy matcher backed by rapidfuzz.

Each weighted field is scored independently with a location-independent
scorer (partial_ratio by default, so a query matching anywhere inside the
field counts). A record matches when at least one field clears the
threshold; its rank score is the weighted sum of the fields that cleared
it, normalized by the total weight.
"""

import logging
from typing import Callable, Dict, List, Mapping, Sequence

from rapidfuzz import fuzz, process

from ..models import Record
from ..search.normalizer import normalize
from .base import FuzzyHit, FuzzyMatcher

logger = logging.getLogger(__name__)


class RapidFuzzMatcher(FuzzyMatcher):
    """Weighted per-field fuzzy matching with rapidfuzz scorers."""

    def __init__(self, scorer: Callable = fuzz.partial_ratio):
        """
        Args:
            scorer: rapidfuzz scorer returning 0-100
                - fuzz.partial_ratio: best matching substring (default)
                - fuzz.token_set_ratio: word-order independent
        """
        self.scorer = scorer

    def search(
        self,
        query: str,
        corpus: Sequence[Record],
        weights: Mapping[str, float],
        threshold: float,
    ) -> List[FuzzyHit]:
        text = normalize(query)
        active = {name: weight for name, weight in weights.items() if weight > 0}
        total_weight = sum(active.values())
        if not text or not corpus or total_weight <= 0:
            return []

        cutoff = (1.0 - max(0.0, min(1.0, threshold))) * 100
        combined: Dict[int, float] = {}

        for name, weight in active.items():
            choices = [normalize(record.field_text(name)) for record in corpus]
            matches = process.extract(
                text,
                choices,
                scorer=self.scorer,
                score_cutoff=cutoff,
                limit=None,
            )
            for _choice, score, index in matches:
                combined[index] = combined.get(index, 0.0) + weight * score

        hits = [
            FuzzyHit(index=index, score=score / total_weight)
            for index, score in sorted(combined.items())
        ]
        # sorted() is stable: equal scores stay in corpus order
        hits.sort(key=lambda hit: hit.score, reverse=True)

        logger.debug(f"Fuzzy '{text}': {len(hits)}/{len(corpus)} records within threshold {threshold}")
        return hits

    def get_info(self) -> dict:
        return {
            "name": "rapidfuzz",
            "scorer": getattr(self.scorer, "__name__", repr(self.scorer)),
        }
