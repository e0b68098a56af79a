"""
Facet aggregation: distinct industries and keywords, optionally counted.

One pass over the index. Values are grouped by their normalized form and
displayed with the casing of their first occurrence.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..models import Record
from .normalizer import normalize


@dataclass
class FacetCount:
    name: str
    count: int


def _accumulate(groups: Iterable[Iterable[str]]) -> List[FacetCount]:
    facets: Dict[str, FacetCount] = {}
    for values in groups:
        for value in values:
            key = normalize(value)
            if not key:
                continue
            facet = facets.get(key)
            if facet is None:
                facets[key] = FacetCount(name=value.strip(), count=1)
            else:
                facet.count += 1
    return list(facets.values())


def industry_facets(records: Iterable[Record]) -> List[FacetCount]:
    """Industries from category ∪ categories, counted at most once per record."""
    def per_record(record: Record) -> List[str]:
        seen = set()
        out = []
        for value in [record.category or "", *record.categories]:
            key = normalize(value)
            if key and key not in seen:
                seen.add(key)
                out.append(value)
        return out

    return _accumulate(per_record(r) for r in records)


def keyword_facets(records: Iterable[Record]) -> List[FacetCount]:
    """Keywords, every occurrence counted."""
    return _accumulate(r.keywords for r in records)


def sort_facets(facets: List[FacetCount], by_count: bool = False) -> List[FacetCount]:
    """
    Sort by count descending (ties keep first-seen order) or by name
    (case-insensitive, raw string as tie-break).
    """
    if by_count:
        return sorted(facets, key=lambda f: -f.count)
    return sorted(facets, key=lambda f: (f.name.casefold(), f.name))
