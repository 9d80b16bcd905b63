"""
vfs_locator/config.py - Provider registry configuration

Registries can be assembled from a YAML document:

    providers:
      - id: folders
        type: dir
        factory: vfs_locator.providers:DirectoryProvider
        label: Project folders
        options:
          roots:
            docs: /srv/docs
"""

import functools
import importlib
import inspect
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from vfs_locator.events import InvalidationBus
from vfs_locator.exceptions import ConfigurationError
from vfs_locator.registry import FileSystemDescriptor, ProviderRegistry

logger = logging.getLogger(__name__)


class ProviderEntryConfig(BaseModel):
    """One provider in a registry configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique provider id")
    fs_type: str = Field(..., alias="type", min_length=1, description="File system type")
    factory: str = Field(
        ...,
        pattern=r"^[\w.]+:[\w.]+$",
        description="Provider factory as 'module:attribute'",
    )
    label: str | None = Field(default=None, description="Human readable name")
    description: str = Field(default="", description="Free form description")
    options: dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments for the factory"
    )


class RegistryConfig(BaseModel):
    """A complete registry configuration."""

    model_config = ConfigDict(frozen=True)

    providers: list[ProviderEntryConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "RegistryConfig":
        seen: set[str] = set()
        for entry in self.providers:
            key = entry.id.lower()
            if key in seen:
                raise ValueError(f"Duplicate provider id '{entry.id}'")
            seen.add(key)
        return self


def parse_registry_config(data: dict[str, Any] | None) -> RegistryConfig:
    """Validate an already loaded configuration mapping"""
    try:
        return RegistryConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid registry configuration: {e}") from e


def load_registry_config(path: str | os.PathLike[str]) -> RegistryConfig:
    """Read and validate a YAML registry configuration file"""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read registry configuration {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Registry configuration {path} must be a mapping")
    logger.debug(f"Loaded registry configuration from {path}")
    return parse_registry_config(data)


def import_factory(reference: str) -> Callable[..., Any]:
    """Import ``module:attribute`` and return the attribute"""
    module_name, _, attr_path = reference.partition(":")
    try:
        target: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            target = getattr(target, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot import provider factory '{reference}': {e}") from e

    if not callable(target):
        raise ConfigurationError(f"Provider factory '{reference}' is not callable")
    return target


def _accepts(factory: Callable[..., Any], name: str) -> bool:
    try:
        return name in inspect.signature(factory).parameters
    except (TypeError, ValueError):
        return False


def build_registry(
    config: RegistryConfig, bus: InvalidationBus | None = None
) -> ProviderRegistry:
    """
    Create a ProviderRegistry from configuration.

    Factories are imported eagerly so broken entries fail here rather than
    on the first reload. Providers themselves are created lazily. A factory
    with ``fs_type`` or ``bus`` parameters receives the entry type and
    ``bus`` unless its options set them.
    """
    registry = ProviderRegistry()
    for entry in config.providers:
        factory = import_factory(entry.factory)
        options = dict(entry.options)
        if "fs_type" not in options and _accepts(factory, "fs_type"):
            options["fs_type"] = entry.fs_type
        if bus is not None and "bus" not in options and _accepts(factory, "bus"):
            options["bus"] = bus

        registry.register_provider(
            FileSystemDescriptor(
                id=entry.id,
                fs_type=entry.fs_type,
                factory=functools.partial(factory, **options),
                label=entry.label,
                description=entry.description,
            )
        )
    logger.info(f"Configured {len(registry)} file system provider(s)")
    return registry
