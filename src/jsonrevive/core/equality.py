# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural equality of captured mappers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

# ###############
# Public Interface
# ###############

Missings = Callable[[str, dict, dict], bool]


def deep_equals(a: Any, b: Any, missings: Missings | None = None) -> bool:
    """Test whether two mapper trees have the same structure.

    Entries whose value is ``None`` are ignored.

    Args:
        a: The first tree.
        b: The second tree.
        missings: Optional ``missings(key, has, has_not)`` callback invoked,
            once per comparison, for each key present in one mapping but not
            in the other. It may patch *has_not* and return ``True`` so that
            the key no longer counts as a mismatch.

    Returns:
        ``True`` if both trees are equal, possibly after patching.
    """
    if a is b:
        return True
    if not isinstance(a, dict) or not isinstance(b, dict):
        return not isinstance(a, dict) and not isinstance(b, dict) and a == b
    keys_a = [key for key, value in a.items() if value is not None]
    keys_b = [key for key, value in b.items() if value is not None]
    processed = False

    def process_missings() -> None:
        nonlocal processed
        if processed:
            return
        processed = True
        only_b = [key for key in keys_b if key not in set(keys_a)]
        for key in list(keys_a):
            if key not in keys_b and missings(key, a, b):  # type: ignore[misc]
                keys_b.append(key)
        for key in only_b:
            if missings(key, b, a):  # type: ignore[misc]
                keys_a.append(key)

    if len(keys_a) != len(keys_b):
        if missings is None:
            return False
        process_missings()
        if len(keys_a) != len(keys_b):
            return False
    # keys_a may grow while patching
    index = 0
    while index < len(keys_a):
        key = keys_a[index]
        if key not in keys_b:
            if missings is None:
                return False
            process_missings()
            if key not in keys_b:
                return False
        if not deep_equals(a[key], b[key], missings):
            return False
        index += 1
    return True
