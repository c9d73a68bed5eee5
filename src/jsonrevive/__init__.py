# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""jsonrevive: restore the types of JSON data.

Declare once how plain parsed data maps back to rich types, or capture that
mapping while serializing, and ship it alongside the data::

    import jsonrevive

    capture = jsonrevive.replacer()
    text = jsonrevive.stringify(data, capture)
    mapper_text = str(capture)

    # elsewhere
    mapper = jsonrevive.parse(mapper_text, jsonrevive.get_reviver())
    data = jsonrevive.parse(text, mapper)
"""

from jsonrevive.core import builders
from jsonrevive.core.replacer import Replacer, replacer, stringify
from jsonrevive.core.reviver import Identity, Reviver, bind, get_reviver, install_core, parse, reviver
from jsonrevive.errors import (
    CircularReferenceError,
    ConfigError,
    IllegalAccessError,
    JsonReviveError,
    NameConflictError,
    NameNotFoundError,
)
from jsonrevive.model.mappers import ANY, JOKERS, SELF
from jsonrevive.registry.namespace import (
    Namespace,
    Registry,
    dedup,
    default_registry,
    namespace,
    qualified_name_of,
    register,
    resolve,
)
from jsonrevive.stdtypes.conversions import install_stdtypes

default_registry.add_bootstrap(install_core)
default_registry.add_bootstrap(install_stdtypes)
default_registry.init()

__all__ = [
    # Revival
    "Reviver",
    "Identity",
    "reviver",
    "bind",
    "get_reviver",
    "parse",
    "builders",
    # Capture
    "Replacer",
    "replacer",
    "stringify",
    # Mapper keys
    "SELF",
    "ANY",
    "JOKERS",
    # Registry
    "Namespace",
    "Registry",
    "default_registry",
    "register",
    "namespace",
    "qualified_name_of",
    "resolve",
    "dedup",
    # Errors
    "JsonReviveError",
    "NameConflictError",
    "NameNotFoundError",
    "IllegalAccessError",
    "CircularReferenceError",
    "ConfigError",
]
