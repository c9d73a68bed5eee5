# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML registry configuration.

A configuration file lists the modules whose ``register()``/``bind()`` calls
populate the registry, explicit namespace placements, and names whose
conflict is resolved by keeping the first registered type::

    imports:
      - myapp.models
    namespaces:
      - type: myapp.models:Person
        namespace: org.example.people
    dedup:
      - org.example.people.Person
"""

import importlib
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from jsonrevive.errors import ConfigError, JsonReviveError
from jsonrevive.registry.namespace import Registry, default_registry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".jsonrevive.yaml"


class NamespacePlacement(BaseModel):
    """Placement of one type, given as ``module:QualName``, under a namespace."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type_path: str = Field(alias="type")
    namespace: str = ""
    name: str | None = None


class RegistryConfig(BaseModel):
    """Top-level registry configuration."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    imports: list[str] = Field(default_factory=list)
    namespaces: list[NamespacePlacement] = Field(default_factory=list)
    dedup: list[str] = Field(default_factory=list)


def load_config(path: Path) -> RegistryConfig:
    """Load and validate a registry configuration file.

    An empty file is an empty configuration.

    Args:
        path: Path to the YAML file.

    Returns:
        A validated RegistryConfig instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML, or
            does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration '{path}': {exc}") from exc

    if data is None:
        data = {}

    try:
        return RegistryConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration '{path}': {exc}") from exc


def apply_config(config: RegistryConfig, registry: Registry | None = None) -> None:
    """Import the configured modules, then apply placements and dedups.

    Raises:
        ConfigError: If a module or type can't be imported, or a placement or
            dedup is rejected by the registry.
    """
    registry = registry or default_registry
    for module_name in config.imports:
        _import_module(module_name)
    for placement in config.namespaces:
        target = import_type(placement.type_path)
        try:
            registry.register(placement.namespace, target, name=placement.name)
        except JsonReviveError as exc:
            raise ConfigError(f"Cannot place '{placement.type_path}': {exc}") from exc
    for name in config.dedup:
        try:
            registry.dedup(name)
        except JsonReviveError as exc:
            raise ConfigError(f"Cannot dedup '{name}': {exc}") from exc
    logger.info(
        "Applied configuration: %d import(s), %d placement(s), %d dedup(s)",
        len(config.imports),
        len(config.namespaces),
        len(config.dedup),
    )


def import_type(type_path: str) -> type:
    """Import a type given as ``package.module:Outer.Inner``.

    Raises:
        ConfigError: If the path is malformed or does not designate a type.
    """
    module_name, sep, qualname = type_path.partition(":")
    if not sep or not module_name or not qualname:
        raise ConfigError(f"Invalid type path '{type_path}': expected 'module:QualName'")
    target: object = _import_module(module_name)
    for attribute in qualname.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as exc:
            raise ConfigError(f"Cannot find '{qualname}' in module '{module_name}'") from exc
    if not isinstance(target, type):
        raise ConfigError(f"'{type_path}' is not a type")
    return target


# ################
# Implementation
# ################


def _import_module(module_name: str) -> object:
    try:
        return importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import module '{module_name}': {exc}") from exc
