"""
Runtime configuration for the logo search service.

All values come from environment variables (optionally loaded from
.env.local / .env by main.py before settings are built). Every variable
has a default so the service starts with an empty environment.

Scoring weights are grouped in ScoringWeights and handed to the engine
explicitly, so alternative scoring policies are a matter of configuration
instead of separate code paths.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}={raw!r}, using default {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}={raw!r}, using default {default}")
        return default


@dataclass(frozen=True)
class ScoringWeights:
    """
    Points awarded by the criterion matchers.

    Attributes:
        industry_exact: Query industry equals a record industry
        industry_partial: Query industry and record industry contain one another
        keyword_exact: Query keyword found in the record's keyword text
        keyword_partial: Query keyword overlaps a single keyword token
        description_token: Description token found in the record text
        breadth_bonus: Per-hit bonus once more than one keyword/token hits
    """
    industry_exact: float = 100
    industry_partial: float = 50
    keyword_exact: float = 30
    keyword_partial: float = 15
    description_token: float = 20
    breadth_bonus: float = 5

    @classmethod
    def from_env(cls) -> "ScoringWeights":
        return cls(
            industry_exact=_env_float("SCORE_INDUSTRY_EXACT", cls.industry_exact),
            industry_partial=_env_float("SCORE_INDUSTRY_PARTIAL", cls.industry_partial),
            keyword_exact=_env_float("SCORE_KEYWORD_EXACT", cls.keyword_exact),
            keyword_partial=_env_float("SCORE_KEYWORD_PARTIAL", cls.keyword_partial),
            description_token=_env_float("SCORE_DESCRIPTION_TOKEN", cls.description_token),
            breadth_bonus=_env_float("SCORE_BREADTH_BONUS", cls.breadth_bonus),
        )


def _default_fuzzy_weights() -> Dict[str, float]:
    return {"keywords": 0.6, "category": 0.3, "categories": 0.1}


@dataclass(frozen=True)
class FuzzySettings:
    """
    Fuzzy fallback configuration.

    threshold follows the usual fuzzy-search convention: 0.0 accepts only
    perfect matches, 1.0 accepts anything.
    """
    backend: str = "rapidfuzz"
    threshold: float = 0.4
    weights: Dict[str, float] = field(default_factory=_default_fuzzy_weights)
    timeout: float = 2.0
    workers: int = 4

    @classmethod
    def from_env(cls) -> "FuzzySettings":
        defaults = _default_fuzzy_weights()
        threshold = _env_float("FUZZY_THRESHOLD", 0.4)
        return cls(
            backend=os.getenv("FUZZY_MATCHER", "rapidfuzz").strip().lower() or "rapidfuzz",
            threshold=max(0.0, min(1.0, threshold)),
            weights={
                "keywords": _env_float("FUZZY_WEIGHT_KEYWORDS", defaults["keywords"]),
                "category": _env_float("FUZZY_WEIGHT_CATEGORY", defaults["category"]),
                "categories": _env_float("FUZZY_WEIGHT_CATEGORIES", defaults["categories"]),
            },
            timeout=_env_float("FUZZY_TIMEOUT", 2.0),
            workers=max(1, _env_int("FUZZY_WORKERS", 4)),
        )


@dataclass(frozen=True)
class Settings:
    """Service settings, built once at startup."""
    index_url: str = "/logos/index.json"
    asset_path: str = "/logos/"
    asset_base_url: Optional[str] = None
    index_fetch_timeout: float = 10.0
    default_limit: int = 24
    max_limit: int = 200
    cache_max_age: int = 3600
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    fuzzy: FuzzySettings = field(default_factory=FuzzySettings)

    @classmethod
    def from_env(cls) -> "Settings":
        max_limit = max(1, _env_int("SEARCH_MAX_LIMIT", 200))
        default_limit = max(1, min(max_limit, _env_int("SEARCH_DEFAULT_LIMIT", 24)))
        return cls(
            index_url=os.getenv("LOGO_INDEX_URL", "/logos/index.json"),
            asset_path=os.getenv("LOGO_ASSET_PATH", "/logos/"),
            asset_base_url=os.getenv("LOGO_ASSET_BASE_URL") or None,
            index_fetch_timeout=_env_float("INDEX_FETCH_TIMEOUT", 10.0),
            default_limit=default_limit,
            max_limit=max_limit,
            cache_max_age=_env_int("CACHE_MAX_AGE", 3600),
            scoring=ScoringWeights.from_env(),
            fuzzy=FuzzySettings.from_env(),
        )
