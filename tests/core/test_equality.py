# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

import pytest

from jsonrevive.core.equality import deep_equals


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ("Date", "Date", True),
        ("Date", "RegExp", False),
        ({"a": "Date"}, {"a": "Date"}, True),
        ({"a": {"b": "Date"}}, {"a": {"b": "Date"}}, True),
        ({"a": {"b": "Date"}}, {"a": {"b": "RegExp"}}, False),
        ({"a": "Date"}, "Date", False),
        ({"a": "Date", "b": None}, {"a": "Date"}, True),
        ({"a": "Date"}, {"b": "Date"}, False),
        ({"a": "Date"}, {}, False),
    ],
)
def test_deep_equals(a: object, b: object, expected: bool) -> None:
    assert deep_equals(a, b) is expected


def test_missings_may_patch_the_other_side() -> None:
    """A key missing on one side counts as equal once the callback patches it in."""
    a = {"x": "Date"}
    b: dict = {}

    def patch(key: str, has: dict, has_not: dict) -> bool:
        has_not[key] = has[key]
        return True

    assert deep_equals(a, b, patch)
    assert b == {"x": "Date"}


def test_missings_may_refuse() -> None:
    assert not deep_equals({"x": "Date"}, {}, lambda key, has, has_not: False)


def test_missings_runs_once_per_comparison() -> None:
    """Both sides are patched in a single pass: A's keys first, then B's."""
    calls = []

    def patch(key: str, has: dict, has_not: dict) -> bool:
        calls.append(key)
        has_not[key] = has[key]
        return True

    a = {"x": "Date", "y": "Date"}
    b = {"y": "Date", "z": "RegExp"}
    assert deep_equals(a, b, patch)
    assert calls == ["x", "z"]
    assert a == b == {"x": "Date", "y": "Date", "z": "RegExp"}


def test_patched_values_must_still_match() -> None:
    """Patching the wrong value is detected by the comparison itself."""

    def patch(key: str, has: dict, has_not: dict) -> bool:
        has_not[key] = "Other"
        return True

    assert not deep_equals({"x": "Date"}, {}, patch)
