"""Unit test fixtures - in-memory records and a mocked index endpoint"""

import json

import pytest

from index_server import IndexServer
from logo_search.models import LogoIndex, Record

SAMPLE_INDEX = [
    {
        "id": "101",
        "category": "Finance & Insurance",
        "categories": ["Finance & Insurance", "Technology"],
        "keywords": ["bank", "secure", "money"],
        "labels": ["shield", "blue"],
        "svg": "101.svg",
    },
    {
        "id": "102",
        "category": "Finance & Insurance",
        "keywords": ["insurance", "umbrella"],
        "labels": ["red"],
        "svg": "102.svg",
    },
    {
        "id": "103",
        "category": "Food & Beverage",
        "categories": ["Restaurants"],
        "keywords": ["coffee", "cafe", "bean"],
        "labels": ["cup", "brown"],
        "svg": "103.svg",
    },
    {
        "id": "104",
        "category": "Technology",
        "keywords": ["cloud", "secure", "network"],
        "labels": ["lock"],
    },
    {
        "id": "105",
        "categories": ["Health"],
        "keywords": ["clinic", "care"],
        "labels": ["cross", "green"],
        "svg": "105.svg",
    },
]


@pytest.fixture
def sample_payload():
    """Raw index.json document"""
    return json.loads(json.dumps(SAMPLE_INDEX))


@pytest.fixture
def sample_index(sample_payload):
    return LogoIndex.from_json(sample_payload)


@pytest.fixture
def sample_records(sample_index):
    return list(sample_index.records)


@pytest.fixture
def make_record():
    """Factory for ad-hoc records"""
    def _make(record_id, category=None, categories=(), keywords=(), labels=(), svg=None):
        return Record(
            id=record_id,
            category=category,
            categories=tuple(categories),
            keywords=tuple(keywords),
            labels=tuple(labels),
            svg=svg,
        )
    return _make


@pytest.fixture
def index_server(sample_payload):
    return IndexServer(payload=sample_payload)
