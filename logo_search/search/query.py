"""
Normalized, per-request search query.

Query.build() accepts loosely-typed request values (single strings,
lists with junk entries, unparseable limits) and never raises: malformed
input degrades to empty filters and a clamped limit.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Optional

from .normalizer import normalize_set, tokenize

DEFAULT_LIMIT = 24
MAX_LIMIT = 200


class KeywordMode(str, Enum):
    """How multiple query keywords combine."""
    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Any) -> "KeywordMode":
        if isinstance(value, KeywordMode):
            return value
        if isinstance(value, str) and value.strip().upper() == "OR":
            return cls.OR
        return cls.AND


def clamp_limit(value: Any, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """
    Coerce a requested result limit into [1, maximum].

    Missing or unparseable values give the default. Fractions are
    truncated toward zero before clamping.

    Examples:
        >>> clamp_limit(None)
        24
        >>> clamp_limit(0), clamp_limit(-5), clamp_limit(1000)
        (1, 1, 200)
        >>> clamp_limit("12")
        12
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    if math.isinf(number):
        return maximum if number > 0 else 1
    return max(1, min(maximum, int(number)))


@dataclass(frozen=True)
class Query:
    """
    Attributes:
        industries: Normalized industry terms (ANY semantics)
        keywords: Normalized keywords, combined according to mode
        mode: AND requires every keyword, OR requires at least one
        description_tokens: Tokens of the free-text description
        match_categories: Broader keyword mode that also searches categories
        text: Raw fuzzy query; None selects the structured path
        limit: Clamped result limit
    """
    industries: FrozenSet[str] = frozenset()
    keywords: FrozenSet[str] = frozenset()
    mode: KeywordMode = KeywordMode.AND
    description_tokens: FrozenSet[str] = frozenset()
    match_categories: bool = False
    text: Optional[str] = None
    limit: int = DEFAULT_LIMIT

    @classmethod
    def build(
        cls,
        industries: Any = None,
        keywords: Any = None,
        mode: Any = None,
        description: Any = None,
        text: Any = None,
        limit: Any = None,
        match_categories: Any = False,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> "Query":
        return cls(
            industries=frozenset(normalize_set(industries)),
            keywords=frozenset(normalize_set(keywords)),
            mode=KeywordMode.parse(mode),
            description_tokens=frozenset(tokenize(description if isinstance(description, str) else None)),
            match_categories=bool(match_categories),
            text=text if isinstance(text, str) else None,
            limit=clamp_limit(limit, default=default_limit, maximum=max_limit),
        )

    @property
    def is_fuzzy(self) -> bool:
        return self.text is not None

    @property
    def has_structured_filters(self) -> bool:
        return bool(self.industries or self.keywords or self.description_tokens)
