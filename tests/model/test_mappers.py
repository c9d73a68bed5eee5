# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the mapper model: special keys, matchers and wire form."""

from datetime import datetime

import pytest

from jsonrevive import Identity, bind, register, reviver
from jsonrevive.model.mappers import (
    ANY,
    JOKERS,
    SELF,
    WIRE_JOKERS_KEY,
    array_index,
    from_wire,
    is_range,
    is_regexp,
    iter_references,
    jokers_of,
    parse_range,
    resolve_key_mapper,
    to_wire,
)
from jsonrevive.registry.namespace import default_registry

# -------- matchers --------


@pytest.mark.parametrize(
    "key,expected",
    [
        ("/\\w+Date/", True),
        ("//", True),
        ("/", False),
        ("date", False),
        ("/date", False),
        (3, False),
    ],
)
def test_is_regexp(key: object, expected: bool) -> None:
    assert is_regexp(key) is expected


@pytest.mark.parametrize(
    "key,expected",
    [
        ("8-12", (8, 12)),
        ("0-1", (0, 1)),
        ("", None),
        ("abc", None),
        ("0", None),
        ("1", None),
        ("a-b", None),
        ("0-a", None),
        ("1-2-3", None),
        ("-1-2", None),
        ("0-0", None),
        ("3-3", None),
        ("5-2", None),
    ],
)
def test_parse_range(key: str, expected: tuple[int, int] | None) -> None:
    assert parse_range(key) == expected
    assert is_range(key) is (expected is not None)


def test_parse_range_with_custom_delimiter() -> None:
    assert parse_range("2..4", "..") == (2, 4)


@pytest.mark.parametrize("key,expected", [(3, 3), ("3", 3), ("-10", 10), ("12-12", 12), ("name", None), (True, None)])
def test_array_index(key: object, expected: int | None) -> None:
    assert array_index(key) == expected


def test_jokers_defaults_depend_on_container_kind() -> None:
    assert jokers_of({}, is_array=True) == ("*", ".", "-")
    assert jokers_of({}, is_array=False) == ("*", ".", "/")
    assert jokers_of({JOKERS: ("any", "self", "~")}, is_array=True) == ("any", "self", "~")


# -------- key resolution --------


def test_resolve_key_mapper_prefers_exact_match() -> None:
    mapper = {"date": "Date", "/da/": "RegExp", ANY: "Error"}
    assert resolve_key_mapper(mapper, "date") == "Date"
    assert resolve_key_mapper(mapper, "data") == "RegExp"
    assert resolve_key_mapper(mapper, "other") == "Error"


def test_resolve_key_mapper_matchers_in_declaration_order() -> None:
    mapper = {"/Date$/": "Date", "/^start/": "RegExp"}
    assert resolve_key_mapper(mapper, "startDate") == "Date"
    assert resolve_key_mapper(mapper, "startTime") == "RegExp"
    assert resolve_key_mapper(mapper, "other") is None


def test_resolve_key_mapper_for_indices() -> None:
    mapper = {0: "RegExp", "1-3": "Date", ANY: "Error"}
    assert resolve_key_mapper(mapper, 0) == "RegExp"
    assert resolve_key_mapper(mapper, "0") == "RegExp"
    assert resolve_key_mapper(mapper, 2) == "Date"
    assert resolve_key_mapper(mapper, 4) == "Error"


def test_resolve_key_mapper_on_reference_is_none() -> None:
    assert resolve_key_mapper("Date", "anything") is None


# -------- wire form --------


def test_to_wire_replaces_types_by_qualified_names() -> None:
    mapper = {"birthDate": datetime, "hobbies": {ANY: {"startDate": datetime}}, 1: "RegExp"}
    assert to_wire(mapper, default_registry) == {
        "birthDate": "Date",
        "hobbies": {"*": {"startDate": "Date"}},
        "1": "RegExp",
    }


def test_to_wire_drops_builder_functions() -> None:
    mapper = {SELF: lambda ancestors, value: value, "date": "Date"}
    assert to_wire(mapper, default_registry) == {"date": "Date"}


def test_to_wire_keeps_self_references() -> None:
    Person = type("Person", (), {})
    register("org.example", Person)
    bind(Person, {})
    assert to_wire({SELF: Person}, default_registry) == {".": "org.example.Person"}
    assert to_wire(Person, default_registry) == {".": "org.example.Person"}
    assert to_wire({"who": Person}, default_registry) == {"who": "org.example.Person"}


def test_to_wire_of_nested_revivers() -> None:
    inner = reviver({"date": "Date"})
    mapper = {"inner": inner, "marker": Identity}
    assert to_wire(mapper, default_registry) == {"inner": {"date": "Date"}, "marker": "jsonrevive.Identity"}


def test_jokers_travel_on_the_wire() -> None:
    mapper = {JOKERS: ("any", "self", "~"), "any": "Date"}
    wire = to_wire(mapper, default_registry)
    assert wire == {WIRE_JOKERS_KEY: ["any", "self", "~"], "any": "Date"}
    assert from_wire(wire) == mapper


def test_from_wire_keeps_references_lazy() -> None:
    wire = {"a": {"b": "Unknown.Type"}}
    assert from_wire(wire) == wire


def test_iter_references() -> None:
    wire = {".": "Person", "birthDate": "Date", "hobbies": {"*": {"startDate": "Date"}}, "$jokers": ["*", ".", "/"]}
    assert sorted(iter_references(from_wire(wire))) == [
        ((".",), "Person"),
        (("birthDate",), "Date"),
        (("hobbies", "*", "startDate"), "Date"),
    ]
