# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of rich values to their plain (JSON-ready) form.

The conversion of a value is looked up in this order:

1. a hook bound with ``bind(..., to_json=...)`` on its type or a base class;
2. a ``to_json()`` method on the value;
3. the fields of a pydantic model or a dataclass (one level only);
4. ``list``/``tuple``/``set`` to a list, mappings to a dict;
5. the public instance attributes of any other object.

``None``, booleans, numbers and strings are terminals and stay unchanged.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from jsonrevive.errors import CircularReferenceError
from jsonrevive.registry.namespace import Registry, default_registry

# ###############
# Public Interface
# ###############


def is_terminal(value: Any) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def to_plain(value: Any, registry: Registry | None = None) -> Any:
    """Convert one level of *value*; nested values are left untouched."""
    if is_terminal(value):
        return value
    registry = registry or default_registry
    hook = registry.json_hook_of(type(value))
    if hook is not None:
        return hook(value)
    to_json = getattr(value, "to_json", None)
    if callable(to_json) and not isinstance(value, type):
        return to_json()
    if isinstance(value, BaseModel):
        return dict(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    attributes = getattr(value, "__dict__", None)
    if attributes is None:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return {name: item for name, item in attributes.items() if not name.startswith("_")}


def to_plain_deep(value: Any, registry: Registry | None = None, *, seen: set[int] | None = None) -> Any:
    """Convert *value* and everything it contains to plain JSON data.

    Args:
        value: The value to convert.
        registry: The registry holding the bound hooks.
        seen: Ids of the values on the current path, shared with an
            enclosing traversal.

    Raises:
        CircularReferenceError: If *value* contains itself.
    """
    return _to_plain_deep(value, registry or default_registry, set() if seen is None else seen)


def json_key(key: Any) -> str:
    """Convert a mapping key the way :func:`json.dumps` does."""
    if isinstance(key, str):
        return key
    if is_terminal(key):
        return json.dumps(key)
    raise TypeError(f"keys must be str, int, float, bool or None, not {type(key).__name__}")


# ################
# Implementation
# ################


def _to_plain_deep(value: Any, registry: Registry, seen: set[int]) -> Any:
    plain = to_plain(value, registry)
    if is_terminal(plain):
        return plain
    marker = id(value)
    if marker in seen:
        raise CircularReferenceError(f"Circular reference detected in {type(value).__name__} object")
    seen.add(marker)
    try:
        if isinstance(plain, list):
            return [_to_plain_deep(item, registry, seen) for item in plain]
        if isinstance(plain, dict):
            return {json_key(key): _to_plain_deep(item, registry, seen) for key, item in plain.items()}
        if plain is value:
            raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
        return _to_plain_deep(plain, registry, seen)
    finally:
        seen.discard(marker)
