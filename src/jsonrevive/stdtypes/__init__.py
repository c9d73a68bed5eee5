# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Built-in conversions for dates, regular expressions and errors."""

from jsonrevive.stdtypes.conversions import (
    BUILTIN_ERRORS,
    dynamic_error,
    error_class_of,
    error_from_text,
    error_to_text,
    install_stdtypes,
    pattern_from_text,
    pattern_to_text,
)

__all__ = [
    "BUILTIN_ERRORS",
    "dynamic_error",
    "error_class_of",
    "error_from_text",
    "error_to_text",
    "install_stdtypes",
    "pattern_from_text",
    "pattern_to_text",
]
