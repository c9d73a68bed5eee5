# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the jsonrevive tests."""

import pytest

from jsonrevive import default_registry


@pytest.fixture(autouse=True)
def fresh_registry() -> None:
    """Every test starts with a registry holding only the built-in conversions."""
    default_registry.init()
