"""
Factory to create fuzzy matcher instances based on configuration.
"""

import logging
from typing import Callable, Dict

from rapidfuzz import fuzz

from .base import FuzzyMatcher
from .rapidfuzz_matcher import RapidFuzzMatcher

logger = logging.getLogger(__name__)

BACKENDS: Dict[str, Callable[[], FuzzyMatcher]] = {
    "rapidfuzz": lambda: RapidFuzzMatcher(scorer=fuzz.partial_ratio),
    "token_set": lambda: RapidFuzzMatcher(scorer=fuzz.token_set_ratio),
}


def create_fuzzy_matcher(backend: str = "rapidfuzz") -> FuzzyMatcher:
    """
    Create a fuzzy matcher by backend name (FUZZY_MATCHER env var).

    Supported backends:
        - rapidfuzz: partial_ratio per field, tolerant of position (default)
        - token_set: token_set_ratio per field, tolerant of word order

    Raises:
        ValueError: Unknown backend name
    """
    key = (backend or "rapidfuzz").strip().lower()
    if key not in BACKENDS:
        raise ValueError(
            f"Unknown fuzzy matcher: {backend}. "
            f"Valid options: {', '.join(sorted(BACKENDS))}"
        )
    matcher = BACKENDS[key]()
    logger.info(f"Fuzzy matcher created: {matcher.get_info()}")
    return matcher
