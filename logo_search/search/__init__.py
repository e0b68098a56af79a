"""
Structured search, ranking and facet aggregation for the logo index.

Components:
- normalizer: trim/lowercase/tokenize, applied to query and record alike
- query: request values -> normalized Query, limit clamping
- matchers: industry, keyword and description criteria
- engine: inclusion policy, scoring, (score desc, id asc) ranking, fuzzy path
- facets: distinct industries/keywords with counts
"""

from .normalizer import normalize, normalize_set, tokenize
from .query import KeywordMode, Query, clamp_limit
from .matchers import MatchResult, match_description, match_industry, match_keywords
from .engine import ScoredResult, SearchEngine, rank
from .facets import FacetCount, industry_facets, keyword_facets, sort_facets

__all__ = [
    "normalize",
    "normalize_set",
    "tokenize",
    "KeywordMode",
    "Query",
    "clamp_limit",
    "MatchResult",
    "match_description",
    "match_industry",
    "match_keywords",
    "ScoredResult",
    "SearchEngine",
    "rank",
    "FacetCount",
    "industry_facets",
    "keyword_facets",
    "sort_facets",
]
