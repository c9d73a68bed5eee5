# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Capture: deriving a mapper while serializing a value.

A :class:`Replacer` walks the value being serialized, converts it to plain
data, and records on the way which keys hold values of a type with a bound
reviver. The resulting mapper revives the serialized text into equivalent
typed values::

    capture = replacer()
    text = stringify(data, capture)
    mapper_text = str(capture)
    ...
    data = parse(text, parse(mapper_text, get_reviver()))

Array frames are compressed: adjacent indices with the same mapping are
folded into ranges (``"1-5"``), adjacent ranges whose mappings are
compatible are merged, and an array whose every item is mapped collapses to
the Any entry (``"*"``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from jsonrevive.core.equality import deep_equals
from jsonrevive.core.plain import is_terminal, json_key, to_plain, to_plain_deep
from jsonrevive.core.reviver import Reviver
from jsonrevive.errors import CircularReferenceError, IllegalAccessError
from jsonrevive.model.mappers import ANY, SELF, matching_mapper
from jsonrevive.registry.namespace import Registry, default_registry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

FRESH = "fresh"
CAPTURING = "capturing"
ENDED = "ended"


class Replacer:
    """Single-use capture context.

    Call it once with the root value (or with ``("", root)``): it returns the
    plain form of the value and captures its mapper. Any further call raises
    :class:`~jsonrevive.errors.IllegalAccessError`.

    Attributes:
        keep_tuples: When true, an array mixing distinct mappings with no
            range is kept as a tuple of per-index entries instead of
            collapsing its last entry to Any.
        mapper: The captured mapper in wire form, ``None`` for a terminal root.
        state: ``"fresh"``, ``"capturing"`` or ``"ended"``.
    """

    keep_tuples = True

    def __init__(self, registry: Registry | None = None) -> None:
        self.registry = registry or default_registry
        self.mapper: dict[str, Any] | None = None
        self.state = FRESH
        self._stack: list[_Frame] = []
        self._path: set[int] = set()

    def __call__(self, *args: Any) -> Any:
        if len(args) == 1:
            value = args[0]
        elif len(args) == 2:
            value = args[1]
        else:
            raise TypeError(f"Replacer expects a value or a (key, value) pair, got {len(args)} arguments")
        if self.state != FRESH:
            raise IllegalAccessError(
                "This replacer was already used; create a new one with replacer() for each serialization"
            )
        self.state = CAPTURING
        try:
            return self._capture(value)
        finally:
            self.state = ENDED

    def get_reviver(self) -> Reviver | None:
        """Return a Reviver of the captured mapper, ``None`` for a terminal root.

        Raises:
            IllegalAccessError: If the replacer was not used yet.
        """
        if self.state != ENDED:
            raise IllegalAccessError("This replacer wasn't used yet")
        if self.mapper is None:
            return None
        return Reviver(_freeze(self.mapper), registry=self.registry)

    def is_empty(self) -> bool:
        return not self.mapper

    def to_json(self) -> dict[str, Any] | None:
        return self.mapper

    def __str__(self) -> str:
        return json.dumps(self.mapper, separators=(",", ":"))

    # ################
    # Implementation
    # ################

    def _capture(self, value: Any) -> Any:
        if is_terminal(value):
            return value
        name = self.registry.bound_name_of(type(value))
        if name is not None:
            self.mapper = {SELF: name}
            return to_plain_deep(value, self.registry, seen=self._path)
        plain = to_plain(value, self.registry)
        if is_terminal(plain):
            return plain
        if not isinstance(plain, (list, dict)):
            if plain is value:
                raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
            return self._capture(plain)
        root = _CaptureNode()
        result = self._walk("", value, plain, root)
        self.mapper = _freeze(root)
        logger.debug("Captured mapper %s", self)
        return result

    def _walk(self, key: Any, value: Any, plain: list | dict, node: _CaptureNode) -> Any:
        marker = id(value)
        if marker in self._path:
            raise CircularReferenceError(f"Circular reference detected at key {key!r}")
        self._path.add(marker)
        frame = _Frame(node, isinstance(plain, list))
        self._stack.append(frame)
        try:
            if frame.is_array:
                result: Any = [self._visit(frame, index, item) for index, item in enumerate(plain)]
            else:
                result = {}
                for name, item in plain.items():
                    name = json_key(name)
                    result[name] = self._visit(frame, name, item)
            self._close(frame)
            return result
        finally:
            self._stack.pop()
            self._path.discard(marker)

    def _visit(self, frame: _Frame, key: Any, item: Any) -> Any:
        frame.count += 1
        if is_terminal(item):
            frame.node.unmapped.add(str(key))
            return item
        name = self.registry.bound_name_of(type(item))
        if name is not None:
            self._record(frame, key, name)
            return to_plain_deep(item, self.registry, seen=self._path)
        plain = to_plain(item, self.registry)
        if is_terminal(plain):
            frame.node.unmapped.add(str(key))
            return plain
        if not isinstance(plain, (list, dict)):
            if plain is item:
                raise TypeError(f"Object of type {type(item).__name__} is not JSON serializable")
            frame.count -= 1
            return self._visit(frame, key, plain)
        child = _CaptureNode()
        if frame.is_array:
            frame.keys.append(_RangeKey(key, key))
        frame.node[str(key)] = child
        return self._walk(key, item, plain, child)

    def _record(self, frame: _Frame, key: Any, name: str) -> None:
        if frame.is_array:
            last = frame.keys[-1] if frame.keys else None
            if last is not None and last.end + 1 == key and frame.node.get(last.key) == name:
                del frame.node[last.key]
                last.end = key
                frame.count -= 1
                frame.node[last.key] = name
                return
            frame.keys.append(_RangeKey(key, key))
        frame.node[str(key)] = name

    def _close(self, frame: _Frame) -> None:
        if frame.is_array:
            self._compress(frame)
        node = frame.node
        for key in [key for key, sub in node.items() if isinstance(sub, bool) or (isinstance(sub, dict) and not sub)]:
            del node[key]

    def _compress(self, frame: _Frame) -> None:
        node = frame.node
        maybe_tuple = True
        if len(frame.keys) > 1:
            kept_keys: list[_RangeKey] = []
            for current in frame.keys:
                if current.end != current.start:
                    maybe_tuple = False
                if kept_keys:
                    other = kept_keys[-1]
                    mapper = node[current.key]
                    previous = node[other.key]
                    if other.end + 1 == current.start and deep_equals(mapper, previous, _missings):
                        if isinstance(mapper, _CaptureNode) and isinstance(previous, _CaptureNode):
                            mapper.unmapped |= previous.unmapped
                        del node[current.key]
                        del node[other.key]
                        frame.count -= 1
                        other.end = current.end
                        node[other.key] = mapper
                        maybe_tuple = False
                        continue
                kept_keys.append(current)
            frame.keys = kept_keys
        # an item whose sub-mapper ended up empty is left as is, like a terminal
        mapped = [key for key in frame.keys if not (isinstance(node[key.key], dict) and not node[key.key])]
        if (
            mapped
            and len(mapped) == frame.count
            and (len(mapped) == 1 or not maybe_tuple or not self.keep_tuples)
        ):
            node[ANY] = node.pop(mapped[-1].key)


def replacer(registry: Registry | None = None) -> Replacer:
    """Create a Replacer for one serialization."""
    return Replacer(registry)


def stringify(value: Any, replacer: Any = None, *, registry: Registry | None = None, **json_options: Any) -> str:
    """Serialize *value* to JSON text.

    Args:
        value: The value to serialize; rich values are converted to plain data
            as described in :mod:`jsonrevive.core.plain`.
        replacer: A :class:`Replacer` capturing the mapper of *value*, or a
            step function ``(key, value)`` applied top-down to every member
            after its plain-form conversion.
        registry: The registry holding the bound hooks.
        json_options: Keyword arguments passed to :func:`json.dumps`.

    Raises:
        TypeError: If *replacer* is a Reviver, or *value* holds a value that
            can't be serialized.
        CircularReferenceError: If *value* contains itself.
    """
    registry = registry or default_registry
    if isinstance(replacer, Reviver):
        raise TypeError("A Reviver can't be used to serialize; use replacer() instead")
    if isinstance(replacer, Replacer):
        plain = replacer(value)
    elif replacer is None:
        plain = to_plain_deep(value, registry)
    elif callable(replacer):
        plain = _replace_deep(replacer, "", value, registry, set())
    else:
        raise TypeError(f"Invalid replacer {replacer!r}")
    return json.dumps(plain, **json_options)


# ################
# Implementation
# ################


class _CaptureNode(dict):
    """A mapper under construction, remembering the keys that hold terminals."""

    def __init__(self) -> None:
        super().__init__()
        self.unmapped: set[str] = set()


@dataclass
class _RangeKey:
    start: int
    end: int

    @property
    def key(self) -> str:
        return str(self.start) if self.start == self.end else f"{self.start}-{self.end}"


@dataclass
class _Frame:
    node: _CaptureNode
    is_array: bool
    keys: list[_RangeKey] = field(default_factory=list)
    count: int = 0


def _missings(key: str, has: dict, has_not: dict) -> bool:
    """Patch *has_not* with the mapping of *key* found in *has*, if compatible."""
    if isinstance(has_not, _CaptureNode) and key in has_not.unmapped:
        return False
    sub = matching_mapper(has_not, int(key)) if key.isascii() and key.isdigit() else None
    if sub is None:
        sub = has_not.get(ANY)
    if sub is not None:
        if deep_equals(has[key], sub, _missings):
            has_not[key] = sub
            return True
        return False
    has_not[key] = has[key]
    return True


def _freeze(node: Any) -> Any:
    if isinstance(node, dict):
        return {key: _freeze(sub) for key, sub in node.items()}
    return node


def _replace_deep(step: Any, key: str, value: Any, registry: Registry, seen: set[int]) -> Any:
    replaced = step(key, to_plain(value, registry))
    if is_terminal(replaced):
        return replaced
    plain = to_plain(replaced, registry)
    marker = id(value)
    if marker in seen:
        raise CircularReferenceError(f"Circular reference detected at key {key!r}")
    seen.add(marker)
    try:
        if isinstance(plain, list):
            return [_replace_deep(step, str(index), item, registry, seen) for index, item in enumerate(plain)]
        if isinstance(plain, dict):
            return {
                json_key(name): _replace_deep(step, json_key(name), item, registry, seen) for name, item in plain.items()
            }
        return to_plain_deep(plain, registry, seen=seen)
    finally:
        seen.discard(marker)
