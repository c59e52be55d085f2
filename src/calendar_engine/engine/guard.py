from __future__ import annotations

from typing import AbstractSet, Iterable, Optional

from ..domain import DuplicateEventError, Event


def would_duplicate(
    candidate: Event,
    existing: AbstractSet[Event],
    pending: Iterable[Event] = (),
    *,
    removed: Optional[AbstractSet[Event]] = None,
) -> bool:
    """True when ``candidate`` matches a surviving existing event or a pending one."""

    removed = removed or frozenset()
    if candidate in existing and candidate not in removed:
        return True
    return any(candidate == other for other in pending)


def ensure_unique(
    candidate: Event,
    existing: AbstractSet[Event],
    pending: Iterable[Event] = (),
    *,
    removed: Optional[AbstractSet[Event]] = None,
) -> None:
    if would_duplicate(candidate, existing, removed=removed):
        raise DuplicateEventError(f"An event {candidate.describe()} already exists.")
    if would_duplicate(candidate, frozenset(), pending):
        raise DuplicateEventError(f"The request would create duplicate events {candidate.describe()}.")
