"""Pure filter/sort/aggregation helpers over in-memory collections."""
from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Iterable, Mapping

from agora.core.utils import round_half_up

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}

Record = Mapping[str, Any]


def _matches_search(item: Record, query: str, fields: tuple[str, ...]) -> bool:
    needle = query.lower()
    for name in fields:
        value = item.get(name)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def filter_records(
    items: Iterable[Record],
    *,
    equals: Mapping[str, Any] | None = None,
    contains: Mapping[str, Any] | None = None,
    search: str | None = None,
    search_fields: tuple[str, ...] = ("title", "content"),
) -> list[Record]:
    """
    Apply a conjunction of predicates.

    ``equals`` maps field -> required value, ``contains`` maps list field ->
    required member. ``None`` or empty values are ignored so query strings can
    be passed straight through. Soft-deleted records are ordinary records
    here; filter on ``status`` to include or isolate them.
    """
    equals = {k: v for k, v in (equals or {}).items() if v not in (None, "")}
    contains = {k: v for k, v in (contains or {}).items() if v not in (None, "")}

    result = []
    for item in items:
        if any(item.get(k) != v for k, v in equals.items()):
            continue
        if any(v not in (item.get(k) or []) for k, v in contains.items()):
            continue
        if search and not _matches_search(item, search, search_fields):
            continue
        result.append(item)
    return result


def sort_newest(items: Iterable[Record], key: str = "createdAt", tiebreak: str | None = None) -> list[Record]:
    """Newest first. ISO dates/timestamps compare correctly as strings."""
    if tiebreak:
        return sorted(items, key=lambda i: (i.get(key) or "", i.get(tiebreak) or ""), reverse=True)
    return sorted(items, key=lambda i: i.get(key) or "", reverse=True)


def sort_by_priority(items: Iterable[Record]) -> list[Record]:
    """high < medium < low; ties by ``updatedAt`` newest first."""
    ordered = sort_newest(items, "updatedAt")
    return sorted(ordered, key=lambda i: PRIORITY_RANK.get(i.get("priority"), len(PRIORITY_RANK)))


def net_score(item: Record) -> int:
    return int(item.get("upvotes") or 0) - int(item.get("downvotes") or 0)


def sort_by_score(items: Iterable[Record]) -> list[Record]:
    """Net score descending; ties by ``createdAt`` newest first."""
    ordered = sort_newest(items, "createdAt")
    return sorted(ordered, key=net_score, reverse=True)


def count_by(items: Iterable[Record], key: str, default: str = "unknown") -> dict[str, int]:
    return dict(Counter(str(i.get(key) or default) for i in items))


def total(items: Iterable[Record], key: str) -> int:
    return sum(int(i.get(key) or 0) for i in items)


def total_len(items: Iterable[Record], key: str) -> int:
    return sum(len(i.get(key) or []) for i in items)


def top_n(items: Iterable[Record], n: int, key: Callable[[Record], Any]) -> list[Record]:
    return sorted(items, key=key, reverse=True)[:n]


def top_counts(values: Iterable[str], n: int) -> list[list[Any]]:
    """``[[value, count], ...]`` ordered by count descending (first seen wins ties)."""
    counts: dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [[name, count] for name, count in ranked[:n]]


def consensus_rate(upvotes: int, downvotes: int) -> int:
    return round_half_up(100 * upvotes / max(upvotes + downvotes, 1))
