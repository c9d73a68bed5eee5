# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by jsonrevive.

Every failure is raised synchronously with enough context (the offending
name, the number of conflicting types) for the caller to fix the
declaration at fault.
"""

# ###############
# Public Interface
# ###############


class JsonReviveError(Exception):
    """Base class of the errors raised by jsonrevive."""


class NameConflictError(JsonReviveError):
    """Raised when a qualified name is owned by more than one live type.

    This typically happens when the same library is loaded twice in one
    process. Relocate one of the types with ``register()`` or collapse the
    conflict with ``dedup()``.

    Attributes:
        name: The ambiguous qualified name.
        count: The number of types currently registered under *name*.
    """

    def __init__(self, name: str, count: int) -> None:
        times = "twice" if count == 2 else f"{count} times"
        super().__init__(
            f'"{name}" was registered {times}. Consider registering the types under distinct namespaces.'
        )
        self.name = name
        self.count = count


class NameNotFoundError(JsonReviveError, LookupError):
    """Raised when a qualified name is not present in the registry.

    Attributes:
        name: The qualified name that could not be resolved.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f'"{name}" not found in registry')
        self.name = name


class IllegalAccessError(JsonReviveError):
    """Raised on a programming error: misuse of a replacer, a malformed builder, etc."""


class CircularReferenceError(TypeError):
    """Raised when a cyclic object graph is being converted to its plain form."""


class ConfigError(JsonReviveError):
    """Raised when a registry configuration file is invalid or cannot be loaded."""
