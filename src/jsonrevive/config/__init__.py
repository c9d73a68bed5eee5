# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Registry configuration files."""

from jsonrevive.config.loader import (
    CONFIG_FILE_NAME,
    NamespacePlacement,
    RegistryConfig,
    apply_config,
    import_type,
    load_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "NamespacePlacement",
    "RegistryConfig",
    "apply_config",
    "import_type",
    "load_config",
]
