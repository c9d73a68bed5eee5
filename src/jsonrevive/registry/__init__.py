# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Qualified-name registry for jsonrevive."""

from jsonrevive.registry.namespace import (
    DEFAULT_NAMESPACE,
    ERROR_NAMESPACE,
    Namespace,
    Registry,
    dedup,
    default_registry,
    namespace,
    qualified_name_of,
    register,
    resolve,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "ERROR_NAMESPACE",
    "Namespace",
    "Registry",
    "dedup",
    "default_registry",
    "namespace",
    "qualified_name_of",
    "register",
    "resolve",
]
