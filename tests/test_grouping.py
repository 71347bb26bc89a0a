"""
Unit tests for scope grouping.
"""

from __future__ import annotations

import unittest
from types import SimpleNamespace

from otlpfile.grouping import ScopeKey, group_by_scope, scope_key


def _record(name: str, scope_name: str | None, version: str | None = None) -> SimpleNamespace:
    scope = None if scope_name is None else SimpleNamespace(name=scope_name, version=version)
    return SimpleNamespace(name=name, scope=scope)


class TestGroupByScope(unittest.TestCase):
    """Tests for group_by_scope."""

    def test_first_appearance_order(self) -> None:
        records = [_record("1", "b"), _record("2", "a"), _record("3", "b")]
        groups = group_by_scope(records, lambda r: r.scope)
        self.assertEqual(list(groups), [ScopeKey("b", ""), ScopeKey("a", "")])
        self.assertEqual([r.name for r in groups[ScopeKey("b", "")]], ["1", "3"])

    def test_version_distinguishes_scopes(self) -> None:
        records = [_record("1", "lib", "1.0"), _record("2", "lib", "2.0"), _record("3", "lib", "1.0")]
        groups = group_by_scope(records, lambda r: r.scope)
        self.assertEqual(len(groups), 2)
        self.assertEqual([r.name for r in groups[ScopeKey("lib", "1.0")]], ["1", "3"])

    def test_missing_scope(self) -> None:
        groups = group_by_scope([_record("1", None)], lambda r: r.scope)
        self.assertEqual(list(groups), [ScopeKey("", "")])

    def test_nothing_dropped_or_duplicated(self) -> None:
        records = [_record(str(i), f"scope-{i % 3}") for i in range(10)]
        groups = group_by_scope(records, lambda r: r.scope)
        flattened = [r for group in groups.values() for r in group]
        self.assertEqual(sorted(r.name for r in flattened), sorted(r.name for r in records))
        self.assertEqual(len(records), 10)

    def test_scope_key(self) -> None:
        self.assertEqual(scope_key(SimpleNamespace(name="x", version=None)), ScopeKey("x", ""))
        self.assertEqual(scope_key(None), ScopeKey("", ""))


if __name__ == "__main__":
    unittest.main()
