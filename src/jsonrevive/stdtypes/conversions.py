# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Built-in conversions for dates, regular expressions and errors.

============================  ==========  ==================================
Type                          Name        Plain form
============================  ==========  ==================================
``datetime.datetime``         ``Date``    ISO 8601 text
``re.Pattern``                ``RegExp``  ``"/source/flags"``
``Exception``                 ``Error``   ``"Name: message"``
============================  ==========  ==================================

The common built-in exception classes are registered at the root namespace
under their own names, so that ``"ValueError: bad input"`` revives as a
:class:`ValueError`. An error name that is not registered revives as a
dynamically created :class:`Exception` subclass of that name.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from jsonrevive.core.reviver import bind
from jsonrevive.model.mappers import SELF
from jsonrevive.registry.namespace import DEFAULT_NAMESPACE, Registry

# ###############
# Public Interface
# ###############

BUILTIN_ERRORS: tuple[type[BaseException], ...] = (
    ArithmeticError,
    AssertionError,
    AttributeError,
    ConnectionError,
    EOFError,
    FileExistsError,
    FileNotFoundError,
    ImportError,
    IndexError,
    KeyError,
    LookupError,
    NameError,
    NotImplementedError,
    OSError,
    OverflowError,
    PermissionError,
    RecursionError,
    RuntimeError,
    SyntaxError,
    TimeoutError,
    TypeError,
    UnicodeError,
    ValueError,
    ZeroDivisionError,
)


def install_stdtypes(registry: Registry) -> None:
    """Register and bind the built-in conversions into *registry*."""
    registry.register(DEFAULT_NAMESPACE, datetime, name="Date")
    bind(datetime, {SELF: _build_date}, to_json=_date_to_json, registry=registry)

    registry.register(DEFAULT_NAMESPACE, re.Pattern, name="RegExp")
    bind(re.Pattern, {SELF: _build_pattern}, to_json=pattern_to_text, registry=registry)

    registry.register(DEFAULT_NAMESPACE, Exception, name="Error")
    bind(
        Exception,
        {SELF: lambda ancestors, text: error_from_text(text, registry)},
        to_json=lambda error: error_to_text(error, registry),
        registry=registry,
    )
    for error_class in BUILTIN_ERRORS:
        registry.register(DEFAULT_NAMESPACE, error_class)


def pattern_to_text(pattern: re.Pattern) -> str:
    flags = "".join(letter for letter, flag in _PATTERN_FLAGS if pattern.flags & flag)
    return f"/{pattern.pattern}/{flags}"


def pattern_from_text(text: str) -> re.Pattern:
    """Compile ``"/source/flags"``; flags without a Python equivalent (``g``, ``u``, ``y``) are ignored."""
    end = text.rfind("/")
    if text.startswith("/") and end > 0 and set(text[end + 1 :]) <= _KNOWN_FLAG_LETTERS:
        flags = 0
        for letter, flag in _PATTERN_FLAGS:
            if letter in text[end + 1 :]:
                flags |= flag
        return re.compile(text[1:end], flags)
    return re.compile(text)


def error_to_text(error: BaseException, registry: Registry) -> str:
    name = registry.qualified_name_of(type(error))
    message = str(error.args[0]) if len(error.args) == 1 else str(error)
    return f"{name}: {message}" if message else name


def error_from_text(text: Any, registry: Registry) -> BaseException | None:
    """Rebuild an error from its ``"Name: message"`` text.

    The class is looked up by qualified name in *registry*. A name that is
    not registered gives a dynamically created :class:`Exception` subclass;
    the same subclass is reused for the same name.
    """
    if text is None or isinstance(text, BaseException):
        return text
    text = str(text)
    match = _ERROR_PATTERN.fullmatch(text)
    if match is None:
        name = text.strip()
        if _ERROR_NAME.fullmatch(name):
            found = registry.lookup(name)
            if found is not None and issubclass(found, BaseException):
                return found()
        return Exception(text)
    name, message = match.group(1).strip(), match.group(2)
    error_class = error_class_of(name, registry)
    try:
        return error_class(message)
    except TypeError:
        return dynamic_error(name.rsplit(".", 1)[-1])(message)


def error_class_of(name: str, registry: Registry) -> type[BaseException]:
    found = registry.lookup(name)
    if found is not None and issubclass(found, BaseException):
        return found
    return dynamic_error(name.rsplit(".", 1)[-1])


def dynamic_error(name: str) -> type[Exception]:
    """Return the :class:`Exception` subclass created for an unknown error name."""
    error_class = _DYNAMIC_ERRORS.get(name)
    if error_class is None:
        error_class = type(name, (Exception,), {"__module__": __name__})
        _DYNAMIC_ERRORS[name] = error_class
    return error_class


# ################
# Implementation
# ################

_PATTERN_FLAGS = (("i", re.IGNORECASE), ("m", re.MULTILINE), ("s", re.DOTALL), ("x", re.VERBOSE))
_KNOWN_FLAG_LETTERS = set("gimsuxy")
_ERROR_PATTERN = re.compile(r"(\w[\w.\s]*):\s*(.*)", re.DOTALL)
_ERROR_NAME = re.compile(r"\w[\w.]*")
_DYNAMIC_ERRORS: dict[str, type[Exception]] = {}


def _date_to_json(value: datetime) -> str:
    return value.isoformat()


def _build_date(ancestors: tuple, value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return datetime.fromisoformat(value)


def _build_pattern(ancestors: tuple, value: Any) -> re.Pattern | None:
    if value is None or isinstance(value, re.Pattern):
        return value
    return pattern_from_text(value)
