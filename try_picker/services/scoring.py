"""Fuzzy-match and recency scoring for candidate directories.

Everything here is pure: the current time is always passed in, and a
candidate that cannot match the query scores exactly zero instead of
raising.
"""

import math
import re
from collections.abc import Iterable, Iterator
from datetime import datetime

from try_picker.models import CatalogEntry

_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")

DATE_PREFIX_BONUS = 2.0
CREATED_WEIGHT = 2.0
ACCESSED_WEIGHT = 3.0
LENGTH_PENALTY_BASE = 10.0


def _is_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def _walk(name: str, query: str) -> Iterator[int]:
    """Yield the position of each query character matched in order, case-insensitively."""
    text = name.lower()
    needle = query.lower()
    qi = 0
    for pos, ch in enumerate(text):
        if qi >= len(needle):
            break
        if ch != needle[qi]:
            continue
        yield pos
        qi += 1


def match_positions(name: str, query: str) -> list[int]:
    """Indices of name matched by the scoring walk, for highlighting.

    Empty when the query is empty or not fully matched.
    """
    if not query:
        return []
    positions = list(_walk(name, query))
    if len(positions) < len(query):
        return []
    return positions


def has_date_prefix(name: str) -> bool:
    return _DATE_PREFIX_RE.match(name) is not None


def recency_bonus(created_at: datetime, accessed_at: datetime, now: datetime) -> float:
    days_old = max((now - created_at).total_seconds() / 86400.0, 0.0)
    hours_since_access = max((now - accessed_at).total_seconds() / 3600.0, 0.0)
    return CREATED_WEIGHT / math.sqrt(days_old + 1) + ACCESSED_WEIGHT / math.sqrt(hours_since_access + 1)


def score(name: str, created_at: datetime, accessed_at: datetime, query: str, now: datetime) -> float:
    total = DATE_PREFIX_BONUS if has_date_prefix(name) else 0.0

    if query:
        lowered = name.lower()
        matched = 0
        last_pos = -1
        for pos in _walk(name, query):
            total += 1.0
            # Word boundary
            if pos == 0 or not _is_alnum(lowered[pos - 1]):
                total += 1.0
            # Proximity
            if last_pos >= 0:
                gap = pos - last_pos - 1
                total += 1.0 / math.sqrt(gap + 1)
            last_pos = pos
            matched += 1

        if matched < len(query):
            return 0.0

        # Density, then length penalty
        total *= len(query) / (last_pos + 1)
        total *= LENGTH_PENALTY_BASE / (len(name) + LENGTH_PENALTY_BASE)

    return total + recency_bonus(created_at, accessed_at, now)


def score_entry(entry: CatalogEntry, query: str, now: datetime) -> float:
    return score(entry.name, entry.created_at, entry.accessed_at, query, now)


def rank(entries: Iterable[CatalogEntry], query: str, now: datetime) -> list[CatalogEntry]:
    """Score, filter and order entries.

    With a non-empty query only positive scores survive. sorted() is stable,
    so equal scores keep scan order.
    """
    scored = []
    for entry in entries:
        value = score_entry(entry, query, now)
        if query and value <= 0:
            continue
        scored.append(entry.model_copy(update={"score": value}))
    return sorted(scored, key=lambda e: e.score, reverse=True)
