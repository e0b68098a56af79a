"""
Logo records and the in-memory index built from the JSON collection.

Wire shape of one record (index.json is an array of these):
    {
        "id": "966294985",
        "category": "Finance & Insurance",
        "categories": ["Finance & Insurance", "Technology"],
        "keywords": ["bank", "secure"],
        "labels": ["shield", "blue"],
        "svg": "966294985.svg"
    }

Only "id" is required. Missing or malformed optional fields become empty
values so matching code never has to guard against them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

logger = logging.getLogger(__name__)


def _str_list(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(v for v in value if isinstance(v, str))


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


@dataclass(frozen=True)
class Record:
    """One logo entry. Immutable once loaded."""
    id: str
    category: Optional[str] = None
    categories: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    labels: Tuple[str, ...] = ()
    svg: Optional[str] = None  # Stored asset filename, resolved to a URL on output

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Record"]:
        """Build a record from one JSON entry, or None if it has no usable id."""
        if not isinstance(data, dict):
            return None
        record_id = data.get("id")
        if isinstance(record_id, (int, float)) and not isinstance(record_id, bool):
            record_id = str(record_id)
        if not isinstance(record_id, str) or not record_id.strip():
            return None
        return cls(
            id=record_id,
            category=_opt_str(data.get("category")),
            categories=_str_list(data.get("categories")),
            keywords=_str_list(data.get("keywords")),
            labels=_str_list(data.get("labels")),
            svg=_opt_str(data.get("svg")),
        )

    def field_text(self, name: str) -> str:
        """Plain text of one field, list fields joined by spaces."""
        value = getattr(self, name, None)
        if value is None:
            return ""
        if isinstance(value, tuple):
            return " ".join(value)
        return str(value)

    def to_dict(self, svg_url: Optional[str] = None) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "categories": list(self.categories),
            "keywords": list(self.keywords),
            "labels": list(self.labels),
            "svg": svg_url,
        }


class LogoIndex:
    """
    Read-only view over the loaded collection.

    Keeps source order for full scans and an id map for lookups. With
    duplicate ids the first record in source order wins.
    """

    def __init__(self, records: Sequence[Record]):
        self._records: Tuple[Record, ...] = tuple(records)
        self._by_id: Dict[str, Record] = {}
        for record in self._records:
            self._by_id.setdefault(record.id, record)

    @classmethod
    def from_json(cls, payload: Any) -> "LogoIndex":
        """
        Build an index from the decoded index.json document.

        Raises:
            ValueError: If the document is not a JSON array
        """
        if not isinstance(payload, list):
            raise ValueError(f"expected a JSON array, got {type(payload).__name__}")

        records: List[Record] = []
        skipped = 0
        for entry in payload:
            record = Record.from_dict(entry)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        if skipped:
            logger.warning(f"Skipped {skipped} index entries without a usable id")
        return cls(records)

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    def get(self, record_id: str) -> Optional[Record]:
        return self._by_id.get(record_id)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)


def resolve_asset_url(svg: Optional[str], base_url: str, asset_path: str = "/logos/") -> Optional[str]:
    """
    Turn a stored asset filename into an absolute URL.

    Examples:
        >>> resolve_asset_url("966294985.svg", "https://logos.example.com/search")
        'https://logos.example.com/logos/966294985.svg'
        >>> resolve_asset_url(None, "https://logos.example.com") is None
        True
    """
    if not svg:
        return None
    if svg.startswith(("http://", "https://")):
        return svg
    prefix = "/" + asset_path.strip("/") + "/" if asset_path.strip("/") else "/"
    return urljoin(base_url, prefix + svg.lstrip("/"))
