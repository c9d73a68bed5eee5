# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Revival: turning parsed JSON data back into typed values.

A :class:`Reviver` wraps a mapper (see :mod:`jsonrevive.model.mappers`) and
applies it recursively. The children of a value are revived first, in place,
then the Self builder of the node (if any) is called with the enclosing
values and the value itself::

    person = reviver({
        ".": lambda ancestors, data: Person(**data),
        "birthDate": "Date",
        "hobbies": {"*": {"startDate": "Date"}},
    })
    parse(text, person)

Mappers may reference types by qualified name. A reference is resolved
through the registry on first use and memoized onto its mapper node.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from jsonrevive.errors import IllegalAccessError
from jsonrevive.model.mappers import (
    SELF,
    Mapper,
    array_index,
    from_wire,
    is_regexp,
    jokers_of,
    parse_range,
    resolve_key_mapper,
    to_wire,
)
from jsonrevive.registry.namespace import Registry, default_registry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

NAMESPACE = "jsonrevive"

Builder = Callable[[tuple, Any], Any]


class Reviver:
    """An executable mapper, optionally bound to the type it builds.

    A Reviver is called either with one argument, the value to revive, or
    with a ``(key, value)`` pair as a parse step callback: only the root key
    ``""`` triggers the revival, other keys return their value unchanged.

    Attributes:
        mapper: The wrapped mapper.
        bound_type: The type this Reviver builds, if it is bound to one.
        registry: The registry used to resolve qualified names.
    """

    def __init__(self, mapper: Mapper = None, bound_type: type | None = None, registry: Registry | None = None) -> None:
        self.mapper = mapper
        self.bound_type = bound_type
        self.registry = registry or default_registry

    def __call__(self, *args: Any) -> Any:
        if len(args) == 1:
            return self.revive(args[0])
        if len(args) == 2:
            key, value = args
            return self.revive(value) if key == "" else value
        raise TypeError(f"Reviver expects a value or a (key, value) pair, got {len(args)} arguments")

    def revive(self, value: Any) -> Any:
        """Revive an already parsed value."""
        return revive([], value, self, self.registry)

    def sub_reviver(self, key: str | int) -> Reviver:
        """Return the Reviver that applies to one field or index.

        For the Any or Self key itself, the raw entry of that slot is wrapped.
        A key no entry applies to gives an identity Reviver.
        """
        mapper = self._composite()
        if not isinstance(mapper, dict):
            return Reviver(registry=self.registry)
        any_key, self_key, _ = jokers_of(mapper, isinstance(key, int))
        if key in (any_key, self_key):
            sub = mapper.get(key)
            if key == self_key and callable(sub) and not isinstance(sub, (type, Reviver)):
                sub = {SELF: sub}
        else:
            sub = resolve_key_mapper(mapper, key)
        return self._wrap(sub)

    def to_wire(self, *, top: bool = True) -> Any:
        """Return the wire form of this Reviver.

        A bound Reviver is the qualified name of its type, or
        ``{".": name}`` at top level.
        """
        if self.bound_type is not None:
            name = self.registry.qualified_name_of(self.bound_type)
            return {SELF: name} if top else name
        return to_wire(self.mapper, self.registry, top=top)

    def to_json(self) -> Any:
        return self.to_wire(top=True)

    def __repr__(self) -> str:
        if self.bound_type is not None:
            return f"Reviver({self.registry.qualified_name_of(self.bound_type)!r})"
        return f"Reviver({self.to_wire()!r})"

    def _composite(self) -> Mapper:
        mapper = self.mapper
        if isinstance(mapper, (str, type)):
            mapper = _dereference(mapper, self.registry)
        if isinstance(mapper, Reviver):
            mapper = mapper.mapper
        return mapper

    def _wrap(self, sub: Mapper) -> Reviver:
        if isinstance(sub, (str, type)):
            sub = _dereference(sub, self.registry)
        if isinstance(sub, Reviver):
            return sub
        return Reviver(sub, registry=self.registry)


class Identity:
    """Marker type leaving a value unchanged.

    Map a key to ``Identity`` to exclude it from an Any or matcher entry::

        {"*": "Date", "label": Identity}
    """

    def __init__(self) -> None:
        raise TypeError("Identity is a marker type and can't be instantiated")


def revive(ancestors: list, value: Any, mapper: Mapper, registry: Registry | None = None) -> Any:
    """Revive *value* with *mapper*.

    Args:
        ancestors: The values enclosing *value*, outermost first. *value* is
            pushed for the duration of the call.
        value: The parsed value; containers are revived in place.
        mapper: A composite mapper, a reference, a Reviver or ``None``.
        registry: The registry used to resolve qualified names.

    Returns:
        The revived value.

    Raises:
        NameNotFoundError: If a referenced name is unknown.
        NameConflictError: If a referenced name is ambiguous.
        IllegalAccessError: If a reference has no bound reviver, or a
            builder is not callable.
    """
    registry = registry or default_registry
    ancestors.append(value)
    try:
        return _revive_node(ancestors, value, mapper, registry)
    finally:
        ancestors.pop()


def reviver(mapper: Mapper = None) -> Reviver:
    """Create a Reviver from a mapper."""
    if isinstance(mapper, Reviver):
        return mapper
    return Reviver(mapper)


def bind(
    target: type,
    mapper: Mapper,
    *,
    to_json: Callable[[Any], Any] | None = None,
    registry: Registry | None = None,
) -> Reviver:
    """Bind a mapper to a type, making the type referable from other mappers.

    The type is placed in its default namespace if it has none yet: ``""``
    or ``"error"`` for exception types.

    Args:
        target: The type to bind.
        mapper: Its mapper; the Self entry builds instances of *target*.
        to_json: Optional function converting an instance to plain data,
            for types that do not define ``to_json()`` themselves.
        registry: The registry to bind into.

    Returns:
        The bound Reviver.
    """
    registry = registry or default_registry
    bound = Reviver(mapper, bound_type=target, registry=registry)
    registry.bind(target, bound, to_json)
    logger.debug("Bound reviver of %r", target)
    return bound


def get_reviver(target: type | None = None, registry: Registry | None = None) -> Reviver | None:
    """Return the Reviver bound to *target* or to one of its base classes.

    Without *target*, return the meta reviver, which turns a parsed mapper
    into a Reviver.
    """
    registry = registry or default_registry
    return registry.reviver_of(Reviver if target is None else target)


def parse(text: str | bytes, reviver: Callable[..., Any] | None = None, **json_options: Any) -> Any:
    """Parse JSON text, then revive it.

    A :class:`Reviver` is applied once to the whole parsed tree. Any other
    callable is used as a step function ``(key, value)`` called bottom-up for
    every member, array indices as strings, then for the root with key ``""``.
    """
    data = json.loads(text, **json_options)
    if reviver is None:
        return data
    if isinstance(reviver, Reviver):
        return reviver.revive(data)
    return _internalize(reviver, {"": data}, "")


def install_core(registry: Registry) -> None:
    """Register the meta reviver and the Identity marker."""

    def build_reviver(ancestors: tuple, wire: Any) -> Reviver:
        return Reviver(from_wire(wire), registry=registry)

    registry.register(NAMESPACE, Reviver)
    bind(Reviver, {SELF: build_reviver}, registry=registry)
    registry.register(NAMESPACE, Identity)
    bind(Identity, {}, registry=registry)


# ################
# Implementation
# ################

_JSON_NATIVE = (dict, list, str, int, float, bool)


def _dereference(ref: Any, registry: Registry, node: dict | None = None, key: Any = None) -> Any:
    """Resolve a qualified name or a type to its bound Reviver, memoizing onto ``node[key]``."""
    target = registry.resolve(ref) if isinstance(ref, str) else ref
    if not isinstance(target, type):
        return target
    bound = registry.reviver_of(target)
    if bound is None:
        raise IllegalAccessError(f"{registry.qualified_name_of(target)!r} has no bound reviver")
    if node is not None:
        node[key] = bound
    return bound


def _self_builder(entry: Any, registry: Registry, is_array: bool) -> tuple[Builder | None, dict | None]:
    """Return the builder of a Self entry and, for a type reference, its class mapper."""
    target = _dereference(entry, registry) if isinstance(entry, (str, type)) else entry
    if isinstance(target, Reviver):
        class_mapper = target.mapper if isinstance(target.mapper, dict) else {}
        builder = class_mapper.get(jokers_of(class_mapper, is_array)[1])
        if isinstance(builder, (str, type, Reviver)):
            builder, _ = _self_builder(builder, registry, is_array)
        return builder, class_mapper
    if callable(target):
        return target, None
    raise IllegalAccessError(f"Invalid builder {entry!r}: expected a function or a reference to a bound type")


class _Pass:
    """State of the revival of one container."""

    def __init__(self, value: Any, registry: Registry) -> None:
        self.value = value
        self.registry = registry
        self.is_array = isinstance(value, list)
        self.builder: Builder | None = None
        self.class_mapper: dict | None = None
        self.any: tuple[dict, Any] | None = None
        self.matchers: list[tuple[dict, Any, Callable[[Any], bool]]] = []
        self.claimed: set[Any] = set()

    def scan(self, ancestors: list, mapper: dict, *, with_self: bool = True) -> None:
        any_key, self_key, delim = jokers_of(mapper, self.is_array)
        for key, sub in list(mapper.items()):
            if not isinstance(key, (str, int)) or isinstance(key, bool):
                continue
            if key == any_key:
                if self.any is None:
                    self.any = (mapper, key)
            elif key == self_key:
                if with_self and sub is not None:
                    self.builder, self.class_mapper = _self_builder(sub, self.registry, self.is_array)
            elif not self.is_array and is_regexp(key, delim):
                self.matchers.append((mapper, key, _regexp_test(key[1:-1])))
            elif self.is_array and (bounds := parse_range(key, delim)) is not None:
                self.matchers.append((mapper, key, _range_test(*bounds)))
            elif sub is not None:
                self.apply_exact(ancestors, mapper, key, sub)

    def apply_exact(self, ancestors: list, mapper: dict, key: Any, sub: Any) -> None:
        if self.is_array:
            field = array_index(key)
            if field is None or field >= len(self.value):
                return
        elif isinstance(self.value, dict):
            field = key if isinstance(key, str) else str(key)
            if field not in self.value:
                return
        else:
            return
        if field in self.claimed:
            return
        self.claimed.add(field)
        self.revive_field(ancestors, field, mapper, key, sub)

    def apply_catch_all(self, ancestors: list) -> None:
        if not self.matchers and self.any is None:
            return
        if self.is_array:
            fields: Any = range(len(self.value))
        elif isinstance(self.value, dict):
            fields = list(self.value)
        else:
            return
        for field in fields:
            if field in self.claimed:
                continue
            for mapper, key, test in self.matchers:
                if test(field):
                    self.revive_field(ancestors, field, mapper, key, mapper[key])
                    break
            else:
                if self.any is not None:
                    mapper, key = self.any
                    self.revive_field(ancestors, field, mapper, key, mapper[key])

    def revive_field(self, ancestors: list, field: Any, mapper: dict, key: Any, sub: Any) -> None:
        item = self.value[field]
        if item is None:
            return
        if isinstance(sub, (str, type)):
            sub = _dereference(sub, self.registry, mapper, key)
        self.value[field] = revive(ancestors, item, sub, self.registry)


def _revive_node(ancestors: list, value: Any, mapper: Mapper, registry: Registry) -> Any:
    if value is None:
        return None
    if isinstance(mapper, (str, type)):
        mapper = _dereference(mapper, registry)
    if isinstance(mapper, Reviver):
        bound_type = mapper.bound_type
        if bound_type is not None and isinstance(value, bound_type) and type(value) not in _JSON_NATIVE:
            return value
        mapper = mapper.mapper
        if isinstance(mapper, (str, type, Reviver)):
            return _revive_node(ancestors, value, mapper, registry)
    if mapper is None:
        return value
    if not isinstance(mapper, dict):
        raise IllegalAccessError(f"Invalid mapper {mapper!r}")
    state = _Pass(value, registry)
    state.scan(ancestors, mapper)
    if state.class_mapper is not None:
        state.scan(ancestors, state.class_mapper, with_self=False)
    state.apply_catch_all(ancestors)
    value = state.value
    if state.builder is None:
        return value
    return state.builder(tuple(ancestors[:-1]), value)


def _regexp_test(pattern: str) -> Callable[[Any], bool]:
    compiled = re.compile(pattern)
    return lambda field: isinstance(field, str) and compiled.search(field) is not None


def _range_test(start: int, end: int) -> Callable[[Any], bool]:
    return lambda field: isinstance(field, int) and start <= field <= end


def _internalize(step: Callable[[str, Any], Any], holder: Any, key: str | int) -> Any:
    value = holder[key]
    if isinstance(value, list):
        for index in range(len(value)):
            value[index] = _internalize(step, value, index)
    elif isinstance(value, dict):
        for name in list(value):
            value[name] = _internalize(step, value, name)
    return step(str(key) if isinstance(key, int) else key, value)