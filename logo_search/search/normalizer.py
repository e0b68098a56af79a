"""
Term normalization shared by query terms and record fields.

Both sides of every comparison go through the same functions; comparing
a normalized query term against a raw record field (or the reverse) is
a bug.
"""

import re
from typing import Any, Iterable, List, Optional, Set

_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """
    Trim surrounding whitespace and lowercase.

    Examples:
        >>> normalize("  Finance & Insurance ")
        'finance & insurance'
        >>> normalize(None)
        ''
    """
    if not text:
        return ""
    return text.strip().lower()


def normalize_set(values: Any) -> Set[str]:
    """
    Normalize each string value, dropping empties and duplicates.

    A bare string is a single term. Anything other than a string or a
    list, tuple or set yields an empty set.
    """
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, (list, tuple, set, frozenset)):
        return set()
    out = set()
    for value in values:
        if not isinstance(value, str):
            continue
        term = normalize(value)
        if term:
            out.add(term)
    return out


def tokenize(text: Optional[str]) -> Set[str]:
    """
    Split normalized text on whitespace runs.

    Examples:
        >>> sorted(tokenize("Blue  Shield\\tBank"))
        ['bank', 'blue', 'shield']
        >>> tokenize("   ")
        set()
    """
    norm = normalize(text)
    if not norm:
        return set()
    return set(_WHITESPACE_RE.split(norm))


def combined_text(*fields: Iterable[Optional[str]]) -> str:
    """Join normalized values of several record fields into one searchable string."""
    parts: List[str] = []
    for values in fields:
        for value in values:
            term = normalize(value)
            if term:
                parts.append(term)
    return " ".join(parts)
