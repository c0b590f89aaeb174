"""Compute the term insertions and removals between two key sequences.

Both inputs are treated as sets for membership, so duplicates never
produce duplicate entries. Output order is first-seen order from the
respective input, which keeps reports reproducible.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import TermsDifference


def _missing_from(keys: Iterable[str], other: set[str]) -> list[str]:
    seen: set[str] = set()
    missing: list[str] = []
    for key in keys:
        if key in other or key in seen:
            continue
        seen.add(key)
        missing.append(key)
    return missing


def diff_terms(local: Sequence[str], remote: Sequence[str]) -> TermsDifference:
    """Return what to add and delete so *remote* matches *local*.

    Args:
        local: Keys declared locally.
        remote: Keys currently present in the remote project.

    Returns:
        ``TermsDifference`` with ``insertions = local - remote`` (in
        ``local`` order) and ``removals = remote - local`` (in ``remote``
        order).
    """
    return TermsDifference(
        insertions=_missing_from(local, set(remote)),
        removals=_missing_from(remote, set(local)),
    )
