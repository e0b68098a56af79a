"""
Abstract base class for fuzzy text matchers.

The search engine only depends on this interface, so the approximate
string matching backend can be swapped without touching ranking code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Mapping, Sequence

from ..models import Record


@dataclass
class FuzzyHit:
    """Single fuzzy match"""
    index: int    # Position in the corpus passed to search()
    score: float  # Similarity 0-100, higher = closer


class FuzzyMatcher(ABC):
    """
    Weighted fuzzy matcher over record fields.

    Implementations decide how similarity is computed; callers rely only on
    the returned order.
    """

    @abstractmethod
    def search(
        self,
        query: str,
        corpus: Sequence[Record],
        weights: Mapping[str, float],
        threshold: float,
    ) -> List[FuzzyHit]:
        """
        Rank corpus records by fuzzy similarity to query.

        Args:
            query: Raw query text
            corpus: Candidate records
            weights: Record field name -> relative weight
            threshold: Tolerance in [0, 1]; 0 = exact only, 1 = match anything

        Returns:
            Matching records as FuzzyHit, best first. Records with equal score
            keep corpus order.
        """
        pass

    def get_info(self) -> dict:
        """Backend name and parameters, for diagnostics."""
        return {"name": type(self).__name__}
