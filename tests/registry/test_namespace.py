# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the qualified-name registry."""

import logging
import threading

import pytest

from jsonrevive import bind, default_registry
from jsonrevive.errors import IllegalAccessError, NameConflictError, NameNotFoundError
from jsonrevive.registry.namespace import (
    Namespace,
    Registry,
    dedup,
    namespace,
    qualified_name_of,
    register,
    resolve,
)

# ###############
# Helpers
# ###############


def _make_class(name: str, base: type = object) -> type:
    return type(name, (base,), {})


# -------- qualified names --------


def test_unregistered_type_is_named_after_itself() -> None:
    """A type never placed in a namespace is named after itself."""
    Foo = _make_class("Foo")
    assert qualified_name_of(Foo) == "Foo"


def test_unregistered_error_falls_in_error_namespace() -> None:
    """Exception types default to the error namespace."""
    MyError = _make_class("MyError", Exception)
    assert qualified_name_of(MyError) == "error.MyError"


def test_register_under_dotted_namespace() -> None:
    """Registering under a dotted string prefixes the type name."""
    Person = _make_class("Person")
    register("org.example.people", Person)
    assert qualified_name_of(Person) == "org.example.people.Person"
    assert resolve("org.example.people.Person") is Person


def test_register_returns_the_type() -> None:
    """register() returns its target so it can wrap a class statement."""
    Person = _make_class("Person")
    assert register("", Person) is Person


def test_register_with_name_renames_the_segment() -> None:
    """The name argument replaces the last segment."""
    Person = _make_class("Person")
    register("org.example", Person, name="Human")
    assert qualified_name_of(Person) == "org.example.Human"
    with pytest.raises(NameNotFoundError):
        resolve("org.example.Person")


def test_register_under_a_type() -> None:
    """A registered type can be the namespace of another."""
    Parent = _make_class("Parent")
    Child = _make_class("Child")
    register("", Parent)
    register(Parent, Child)
    assert qualified_name_of(Child) == "Parent.Child"


def test_namespace_chaining_is_retroactive() -> None:
    """Relocating a parent relocates the children registered before."""
    Parent = _make_class("Parent")
    Child = _make_class("Child")
    register(Parent, Child)
    assert qualified_name_of(Child) == "Parent.Child"

    register("org.example", Parent)

    assert qualified_name_of(Parent) == "org.example.Parent"
    assert qualified_name_of(Child) == "org.example.Parent.Child"
    assert resolve("org.example.Parent.Child") is Child
    with pytest.raises(NameNotFoundError):
        resolve("Parent.Child")


def test_relocating_a_placeholder_moves_nested_types() -> None:
    """A dotted namespace handle relocates every type nested under it."""
    Foo = _make_class("Foo")
    Bar = _make_class("Bar")
    register("lib.models", Foo)
    register("lib.models.sub", Bar)

    register("vendor", namespace("lib"))

    assert qualified_name_of(Foo) == "vendor.lib.models.Foo"
    assert qualified_name_of(Bar) == "vendor.lib.models.sub.Bar"
    assert resolve("vendor.lib.models.sub.Bar") is Bar


def test_placeholder_cannot_be_renamed() -> None:
    """The segment of a dotted namespace is locked."""
    register("lib", _make_class("Foo"))
    with pytest.raises(IllegalAccessError):
        register("", namespace("lib"), name="other")


def test_cannot_place_a_type_under_itself() -> None:
    """A cyclic placement is rejected."""
    Parent = _make_class("Parent")
    Child = _make_class("Child")
    register(Parent, Child)
    with pytest.raises(IllegalAccessError):
        register(Child, Parent)


def test_namespace_returns_the_same_placeholder() -> None:
    """namespace() materializes a dotted string once."""
    handle = namespace("a.b")
    assert isinstance(handle, Namespace)
    assert handle is namespace("a.b")
    assert handle.is_placeholder
    assert handle.path() == "a.b"


def test_reregistering_in_place_is_a_no_op() -> None:
    """Registering a type twice at the same place keeps one entry."""
    Foo = _make_class("Foo")
    register("lib", Foo)
    register("lib", Foo)
    assert resolve("lib.Foo") is Foo
    assert default_registry.names()["lib.Foo"] == 1


# -------- resolution --------


def test_resolve_unknown_name_raises() -> None:
    """Unknown names raise NameNotFoundError, which is also a LookupError."""
    with pytest.raises(NameNotFoundError) as exc_info:
        resolve("nowhere.Nothing")
    assert exc_info.value.name == "nowhere.Nothing"
    assert isinstance(exc_info.value, LookupError)
    assert "not found" in str(exc_info.value)


def test_resolve_unknown_error_falls_back_to_base_error() -> None:
    """Names of the error namespace degrade to Exception."""
    assert resolve("error.SomethingWentWrong") is Exception
    assert resolve("error") is Exception


def test_registered_error_resolves_to_itself() -> None:
    """An error type bound without a namespace lands in the error namespace."""
    QuotaError = _make_class("QuotaError", Exception)
    bind(QuotaError, {})
    assert qualified_name_of(QuotaError) == "error.QuotaError"
    assert resolve("error.QuotaError") is QuotaError


def test_lookup_returns_none_for_unknown_name() -> None:
    """lookup() has no error fallback."""
    assert default_registry.lookup("error.Unknown") is None


# -------- conflicts --------


def test_conflict_then_dedup() -> None:
    """Two types under one name conflict until deduplicated."""
    First = _make_class("Person")
    Second = _make_class("Person")
    register("org.example", First)
    register("org.example", Second)

    with pytest.raises(NameConflictError) as exc_info:
        resolve("org.example.Person")
    assert exc_info.value.name == "org.example.Person"
    assert exc_info.value.count == 2
    assert "twice" in str(exc_info.value)

    assert dedup("org.example.Person") is First
    assert resolve("org.example.Person") is First


def test_conflict_message_counts_types() -> None:
    """The message states how many types own the name."""
    for _ in range(3):
        register("lib", _make_class("Foo"))
    with pytest.raises(NameConflictError, match="3 times"):
        resolve("lib.Foo")


def test_dedup_logs_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    """dedup() reports the dropped types."""
    register("lib", _make_class("Foo"))
    register("lib", _make_class("Foo"))
    with caplog.at_level(logging.WARNING, logger="jsonrevive.registry.namespace"):
        dedup("lib.Foo")
    assert "lib.Foo" in caplog.text


def test_dedup_unknown_name_raises() -> None:
    """Deduplicating an unknown name is an error."""
    with pytest.raises(NameNotFoundError):
        dedup("lib.Missing")


def test_relocating_a_shadowed_type_restores_it() -> None:
    """A type dropped by dedup answers again once explicitly relocated."""
    First = _make_class("Foo")
    Second = _make_class("Foo")
    register("lib", First)
    register("lib", Second)
    dedup("lib.Foo")

    register("lib.v2", Second)

    assert resolve("lib.Foo") is First
    assert resolve("lib.v2.Foo") is Second


def test_names_reports_conflicts() -> None:
    """names() maps every name to the number of its owners."""
    register("lib", _make_class("Foo"))
    register("lib", _make_class("Foo"))
    names = default_registry.names()
    assert names["lib.Foo"] == 2
    assert names["Date"] == 1


# -------- bindings --------


def test_reviver_is_inherited_along_the_mro() -> None:
    """A subclass inherits the reviver of its base class."""
    Base = _make_class("Base")
    Derived = _make_class("Derived", Base)
    bound = bind(Base, {})
    assert default_registry.reviver_of(Derived) is bound


def test_bound_name_of_unplaced_subclass_uses_the_base_name() -> None:
    """Instances of an unplaced subclass are captured under the base class name."""
    Base = _make_class("Base")
    Derived = _make_class("Derived", Base)
    register("app", Base)
    bind(Base, {})
    assert default_registry.bound_name_of(Derived) == "app.Base"
    register("app", Derived)
    assert default_registry.bound_name_of(Derived) == "app.Derived"


def test_bound_name_of_unbound_type_is_none() -> None:
    assert default_registry.bound_name_of(_make_class("Plain")) is None


# -------- lifecycle --------


def test_reset_forgets_everything() -> None:
    """reset() empties the registry, init() runs the bootstraps again."""
    register("lib", _make_class("Foo"))
    default_registry.reset()
    assert default_registry.names() == {}
    default_registry.init()
    assert "lib.Foo" not in default_registry.names()
    assert "Date" in default_registry.names()


def test_independent_registry() -> None:
    """A Registry instance does not share state with the default one."""
    registry = Registry()
    Foo = _make_class("Foo")
    registry.register("isolated", Foo)
    assert registry.resolve("isolated.Foo") is Foo
    with pytest.raises(NameNotFoundError):
        resolve("isolated.Foo")


def test_concurrent_registration() -> None:
    """Concurrent registrations all end up in the registry."""
    classes = [_make_class(f"Type{index}") for index in range(50)]

    def place(cls: type) -> None:
        register("concurrent", cls)

    threads = [threading.Thread(target=place, args=(cls,)) for cls in classes]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for cls in classes:
        assert resolve(f"concurrent.{cls.__name__}") is cls
