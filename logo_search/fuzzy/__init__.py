"""
Fuzzy fallback matching for free-text logo search.

Usage:
    from logo_search.fuzzy import create_fuzzy_matcher

    matcher = create_fuzzy_matcher("rapidfuzz")
    hits = matcher.search("bank", records, {"keywords": 0.6, "category": 0.3}, threshold=0.4)
"""

from .base import FuzzyHit, FuzzyMatcher
from .rapidfuzz_matcher import RapidFuzzMatcher
from .factory import create_fuzzy_matcher

__all__ = [
    "FuzzyHit",
    "FuzzyMatcher",
    "RapidFuzzMatcher",
    "create_fuzzy_matcher",
]
