"""
Unit tests for facet aggregation.
"""

import pytest

from logo_search.search.facets import industry_facets, keyword_facets, sort_facets

pytestmark = pytest.mark.unit


def as_pairs(facets):
    return [(f.name, f.count) for f in facets]


class TestIndustryFacets:
    """Industries from category ∪ categories"""

    def test_counted_once_per_record(self, make_record):
        records = [
            make_record("1", category="A", categories=["A", "B"]),
            make_record("2", category="B"),
        ]
        facets = sort_facets(industry_facets(records))
        assert as_pairs(facets) == [("A", 1), ("B", 2)]

    def test_case_variants_merge_with_first_seen_display(self, make_record):
        records = [
            make_record("1", category="Finance & Insurance"),
            make_record("2", categories=["finance & insurance", " FINANCE & INSURANCE "]),
        ]
        assert as_pairs(industry_facets(records)) == [("Finance & Insurance", 2)]

    def test_ignores_empty_values(self, make_record):
        records = [make_record("1", category="", categories=["", "  ", "Health"]), make_record("2")]
        assert as_pairs(industry_facets(records)) == [("Health", 1)]


class TestKeywordFacets:
    """Keywords only, every occurrence counted"""

    def test_flattens_keywords_only(self, make_record):
        records = [
            make_record("1", category="Finance", keywords=["bank", "Secure"], labels=["blue"]),
            make_record("2", keywords=["secure"]),
        ]
        assert as_pairs(keyword_facets(records)) == [("bank", 1), ("Secure", 2)]

    def test_sample_index_counts(self, sample_records):
        counts = dict(as_pairs(keyword_facets(sample_records)))
        assert counts["secure"] == 2
        assert counts["coffee"] == 1
        assert "shield" not in counts  # labels are not keywords


class TestSortFacets:
    """Name and count ordering"""

    def test_by_name_case_insensitive(self, make_record):
        records = [make_record("1", keywords=["beta", "Alpha", "gamma", "Delta"])]
        names = [f.name for f in sort_facets(keyword_facets(records))]
        assert names == ["Alpha", "beta", "Delta", "gamma"]

    def test_by_count_desc_ties_first_seen(self, make_record):
        records = [
            make_record("1", keywords=["zeta", "alpha"]),
            make_record("2", keywords=["alpha", "mid"]),
            make_record("3", keywords=["mid"]),
        ]
        facets = sort_facets(keyword_facets(records), by_count=True)
        assert as_pairs(facets) == [("alpha", 2), ("mid", 2), ("zeta", 1)]

    def test_empty(self):
        assert sort_facets(industry_facets([])) == []
