# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Revival and capture algorithms."""

from jsonrevive.core import builders
from jsonrevive.core.equality import deep_equals
from jsonrevive.core.plain import is_terminal, to_plain, to_plain_deep
from jsonrevive.core.replacer import Replacer, replacer, stringify
from jsonrevive.core.reviver import (
    Identity,
    Reviver,
    bind,
    get_reviver,
    install_core,
    parse,
    revive,
    reviver,
)

__all__ = [
    # Revival
    "Identity",
    "Reviver",
    "bind",
    "get_reviver",
    "install_core",
    "parse",
    "revive",
    "reviver",
    "builders",
    # Capture
    "Replacer",
    "replacer",
    "stringify",
    # Plain form
    "deep_equals",
    "is_terminal",
    "to_plain",
    "to_plain_deep",
]
