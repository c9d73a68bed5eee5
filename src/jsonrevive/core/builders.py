# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Ready-made Self builders.

Each helper returns a function suitable for the ``"."`` entry of a mapper::

    bind(Point, {".": builders.apply(Point)})
    bind(Settings, {".": builders.validate(Settings), "updated": "Date"})
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

from jsonrevive.core.reviver import Builder

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

# ###############
# Public Interface
# ###############


def apply(cls: type[T]) -> Builder:
    """Pass the values of the record (or the items of the array) positionally to *cls*."""

    def build(ancestors: tuple, data: Any) -> T:
        if isinstance(data, dict):
            return cls(*data.values())
        if isinstance(data, list):
            return cls(*data)
        return cls(data)  # type: ignore[call-arg]

    return build


def assign(cls: type[T]) -> Builder:
    """Instantiate *cls* without arguments, then set each field of the record as an attribute."""

    def build(ancestors: tuple, data: dict) -> T:
        instance = cls()
        for name, value in data.items():
            setattr(instance, name, value)
        return instance

    return build


def keywords(cls: type[T]) -> Builder:
    """Pass the fields of the record as keyword arguments to *cls*."""

    def build(ancestors: tuple, data: dict) -> T:
        return cls(**data)

    return build


def validate(model: type[M]) -> Builder:
    """Validate the record with a pydantic model."""

    def build(ancestors: tuple, data: Any) -> M:
        return model.model_validate(data)

    return build
