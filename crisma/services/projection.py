# crisma/services/projection.py
"""Filter + sort helpers shared by every list page."""
from __future__ import annotations

import unicodedata
from typing import Callable, Iterable, List, Tuple, TypeVar

T = TypeVar("T")


def collation_key(name: str) -> Tuple[str, str]:
    """Locale-style sort key: accents and case only break ties.

    "Álvaro" sorts with "alvaro" rather than after "Zoe".
    """
    decomposed = unicodedata.normalize("NFKD", name or "")
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), name or ""


def matches(name: str, query: str) -> bool:
    return query.casefold() in (name or "").casefold()


def sort_by_name(items: Iterable[T], name_of: Callable[[T], str]) -> List[T]:
    return sorted(items, key=lambda item: collation_key(name_of(item)))


def project(items: Iterable[T], query: str, name_of: Callable[[T], str]) -> List[T]:
    """Items whose name contains ``query`` (case-insensitive), sorted by name.

    An empty query keeps everything.
    """
    query = query or ""
    if not query:
        return sort_by_name(items, name_of)
    return sort_by_name((i for i in items if matches(name_of(i), query)), name_of)
