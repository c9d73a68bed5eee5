# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Mapper model: the inert description of how to revive a value.

A mapper is either a *reference* (a qualified name, a registered type or a
:class:`~jsonrevive.core.reviver.Reviver`) or a *composite* ``dict`` whose
keys are:

* field names (objects) or indices (arrays): exact entries;
* ``"."`` (Self): the builder called once the children are revived;
* ``"*"`` (Any): the sub-mapper applied to every unclaimed key;
* ``"/regexp/"`` (objects) or ``"from-to"`` (arrays): matcher entries,
  tested in declaration order before Any;
* :data:`JOKERS`: an optional ``(any, self, delimiter)`` triple renaming the
  special keys of that node.

In the wire form every reference is a qualified name, builders are dropped,
and the jokers triple travels as a ``"$jokers"`` list.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonrevive.registry.namespace import Registry

# ###############
# Public Interface
# ###############

SELF = "."
ANY = "*"
OBJECT_DELIMITER = "/"
ARRAY_DELIMITER = "-"
WIRE_JOKERS_KEY = "$jokers"


class _JokersKey:
    def __repr__(self) -> str:
        return "JOKERS"


JOKERS: Any = _JokersKey()
"""Key of the ``(any, self, delimiter)`` override triple in a composite mapper."""

Mapper = Any


def jokers_of(mapper: dict, is_array: bool) -> tuple[str, str, str]:
    """Return the ``(any, self, delimiter)`` keys in effect for a composite node."""
    jokers = mapper.get(JOKERS)
    if jokers:
        return tuple(jokers)  # type: ignore[return-value]
    return ANY, SELF, ARRAY_DELIMITER if is_array else OBJECT_DELIMITER


def is_regexp(key: Any, delim: str = OBJECT_DELIMITER) -> bool:
    """Tell whether a key is a regular expression matcher, e.g. ``"/\\w+Date/"``."""
    return isinstance(key, str) and len(key) > 1 and key[0] == delim and key[-1] == delim


def parse_range(key: Any, delim: str = ARRAY_DELIMITER) -> tuple[int, int] | None:
    """Parse a range matcher such as ``"8-12"`` (both ends included).

    Returns:
        The ``(from, to)`` pair, or ``None`` if *key* is not a range. ``"3"``,
        ``"3-3"``, ``"5-2"``, ``"-1-2"`` and ``"1-2-3"`` are not ranges.
    """
    if not isinstance(key, str):
        return None
    parts = key.split(delim)
    if len(parts) != 2 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    start, end = int(parts[0]), int(parts[1])
    return (start, end) if start < end else None


def is_range(key: Any, delim: str = ARRAY_DELIMITER) -> bool:
    return parse_range(key, delim) is not None


def array_index(key: Any) -> int | None:
    """Return the index designated by an exact array key (``3``, ``"3"``, ``"-3"``)."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return abs(key)
    if isinstance(key, str):
        match = _INDEX_PATTERN.match(key)
        if match:
            return int(match.group(1))
    return None


def matching_mapper(mapper: dict, key: str | int) -> Mapper | None:
    """Return the first regexp (string key) or range (integer key) matcher entry that holds.

    Exact and Any entries are not considered.
    """
    jokers = mapper.get(JOKERS)
    if isinstance(key, str):
        delim = jokers[2] if jokers else OBJECT_DELIMITER
        for entry, sub in mapper.items():
            if is_regexp(entry, delim) and re.search(entry[1:-1], key):
                return sub
        return None
    delim = jokers[2] if jokers else ARRAY_DELIMITER
    for entry, sub in mapper.items():
        bounds = parse_range(entry, delim)
        if bounds is not None and bounds[0] <= key <= bounds[1]:
            return sub
    return None


def resolve_key_mapper(mapper: Mapper, key: str | int) -> Mapper | None:
    """Return the sub-mapper that applies to one field or index.

    Exact match first, then matchers in declaration order, then Any. An
    integer key (or a string of digits) is looked up as an array index.

    Returns:
        The raw sub-mapper, or ``None`` when the value is left unchanged.
    """
    if not isinstance(mapper, dict):
        return None
    if key in mapper and key is not JOKERS:
        return mapper[key]
    index = key if isinstance(key, int) else None
    if isinstance(key, str) and key.isascii() and key.isdigit():
        index = int(key)
    if index is not None:
        for exact in (index, str(index)):
            if exact in mapper:
                return mapper[exact]
    found = matching_mapper(mapper, key) if isinstance(key, str) else None
    if found is None and index is not None:
        found = matching_mapper(mapper, index)
    if found is not None:
        return found
    any_key = jokers_of(mapper, index is not None)[0]
    return mapper.get(any_key)


def to_wire(mapper: Mapper, registry: Registry, *, top: bool = True) -> Any:
    """Convert a mapper to its wire form.

    Types become qualified names (``{".": name}`` at top level), builder
    functions are dropped, integer keys become strings, and the jokers
    triple becomes a ``"$jokers"`` list.

    Returns:
        A plain JSON value, or ``None`` for an entry that has no wire form.
    """
    if mapper is None:
        return {}
    if isinstance(mapper, str):
        return {SELF: mapper} if top else mapper
    if isinstance(mapper, type):
        name = registry.qualified_name_of(mapper)
        return {SELF: name} if top else name
    if hasattr(mapper, "to_wire"):
        return mapper.to_wire(top=top)
    if not isinstance(mapper, dict):
        return None
    jokers = mapper.get(JOKERS)
    self_key = jokers[1] if jokers else SELF
    wire: dict[str, Any] = {}
    if jokers:
        wire[WIRE_JOKERS_KEY] = list(jokers)
    for key, sub in mapper.items():
        if key is JOKERS:
            continue
        converted = to_wire(sub, registry, top=False)
        if key == self_key and not isinstance(converted, str):
            continue
        if converted is not None:
            wire[str(key)] = converted
    return wire


def from_wire(wire: Any) -> Mapper:
    """Convert a parsed wire form back into a mapper; references stay lazy."""
    if not isinstance(wire, dict):
        return wire
    mapper: dict[Any, Any] = {}
    for key, sub in wire.items():
        if key == WIRE_JOKERS_KEY:
            mapper[JOKERS] = tuple(sub)
        else:
            mapper[key] = from_wire(sub)
    return mapper


def iter_references(mapper: Mapper, path: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], str]]:
    """Yield every ``(path, qualified_name)`` pair of a wire-form mapper."""
    if isinstance(mapper, str):
        yield path, mapper
    elif isinstance(mapper, dict):
        for key, sub in mapper.items():
            if key is JOKERS or key == WIRE_JOKERS_KEY:
                continue
            yield from iter_references(sub, (*path, str(key)))


# ################
# Implementation
# ################

_INDEX_PATTERN = re.compile(r"-?(\d+)")
