"""
Partitioning of export batches by instrumentation scope.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, NamedTuple, TypeVar

__all__ = ["ScopeKey", "scope_key", "group_by_scope"]

T = TypeVar('T')


class ScopeKey(NamedTuple):
    """Identity of a scope block: (name, version)."""
    name: str
    version: str


def scope_key(scope: Any) -> ScopeKey:
    """Key for an SDK InstrumentationScope; a missing scope, name or version is ""."""
    if scope is None:
        return ScopeKey("", "")
    return ScopeKey(getattr(scope, "name", None) or "", getattr(scope, "version", None) or "")


def group_by_scope(
    records: Iterable[T],
    scope_of: Callable[[T], Any],
) -> dict[ScopeKey, list[T]]:
    """
    Group records by the (name, version) of their instrumentation scope.

    Groups appear in order of first appearance and records keep their
    relative batch order within a group.

    Args:
        records: The export batch (not modified)
        scope_of: Returns a record's SDK InstrumentationScope (or None)

    Returns:
        Ordered mapping of scope key to records
    """
    groups: dict[ScopeKey, list[T]] = {}
    for record in records:
        groups.setdefault(scope_key(scope_of(record)), []).append(record)
    return groups
