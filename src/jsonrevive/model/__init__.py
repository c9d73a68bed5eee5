# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Mapper model: special keys, matchers and wire form."""

from jsonrevive.model.mappers import (
    ANY,
    ARRAY_DELIMITER,
    JOKERS,
    OBJECT_DELIMITER,
    SELF,
    WIRE_JOKERS_KEY,
    Mapper,
    array_index,
    from_wire,
    is_range,
    is_regexp,
    iter_references,
    jokers_of,
    matching_mapper,
    parse_range,
    resolve_key_mapper,
    to_wire,
)

__all__ = [
    # Special keys
    "SELF",
    "ANY",
    "OBJECT_DELIMITER",
    "ARRAY_DELIMITER",
    "JOKERS",
    "WIRE_JOKERS_KEY",
    "Mapper",
    # Matchers
    "jokers_of",
    "is_regexp",
    "is_range",
    "parse_range",
    "array_index",
    "matching_mapper",
    "resolve_key_mapper",
    # Wire form
    "to_wire",
    "from_wire",
    "iter_references",
]
