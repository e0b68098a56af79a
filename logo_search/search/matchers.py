"""
Criterion matchers for structured search.

Each matcher is a pure function (Record, Query, ScoringWeights) -> MatchResult.
A criterion the query does not use passes with score 0 and supplied=False;
the engine uses `supplied` to decide which criteria take part in the
relevance gate.

Scoring (default weights):
    industry      exact 100, substring either way 50 (best hit per query term)
    keywords      text contains keyword 30, keyword/token overlap 15,
                  +5 x matched when more than one keyword matched
    description   20 per token found in record text,
                  +5 x hits when more than one token hit
"""

from dataclasses import dataclass
from typing import Set

from ..config import ScoringWeights
from ..models import Record
from .normalizer import combined_text, normalize, tokenize
from .query import KeywordMode, Query


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    score: float = 0.0
    supplied: bool = True


NEUTRAL = MatchResult(matched=True, score=0.0, supplied=False)


def industry_bag(record: Record) -> Set[str]:
    """Normalized {category} ∪ categories of a record."""
    bag = {normalize(record.category)}
    bag.update(normalize(c) for c in record.categories)
    bag.discard("")
    return bag


def match_industry(record: Record, query: Query, weights: ScoringWeights) -> MatchResult:
    """ANY semantics: one query industry hitting one bag entry is enough."""
    if not query.industries:
        return NEUTRAL

    bag = industry_bag(record)
    score = 0.0
    hit = False
    for term in query.industries:
        if term in bag:
            score += weights.industry_exact
            hit = True
        elif any(term in entry or entry in term for entry in bag):
            score += weights.industry_partial
            hit = True
    return MatchResult(matched=hit, score=score)


def match_keywords(record: Record, query: Query, weights: ScoringWeights) -> MatchResult:
    """
    Keyword containment against the record's keywords (plus categories in
    the broader mode), falling back to per-token partial overlap.
    """
    if not query.keywords:
        return NEUTRAL

    if query.match_categories:
        text = combined_text(record.keywords, [record.category], record.categories)
    else:
        text = combined_text(record.keywords)
    tokens = tokenize(text)

    score = 0.0
    matched = 0
    for keyword in query.keywords:
        if keyword in text:
            score += weights.keyword_exact
            matched += 1
        elif any(keyword in token or token in keyword for token in tokens):
            score += weights.keyword_partial
            matched += 1

    if matched > 1:
        score += weights.breadth_bonus * matched

    if query.mode is KeywordMode.AND:
        passed = matched == len(query.keywords)
    else:
        passed = matched > 0
    return MatchResult(matched=passed, score=score)


def match_description(record: Record, query: Query, weights: ScoringWeights) -> MatchResult:
    """Free-text token overlap across every textual field of the record."""
    if not query.description_tokens:
        return NEUTRAL

    text = combined_text([record.category], record.categories, record.keywords, record.labels)
    hits = sum(1 for token in query.description_tokens if token in text)

    score = weights.description_token * hits
    if hits > 1:
        score += weights.breadth_bonus * hits
    return MatchResult(matched=hits > 0, score=score)
