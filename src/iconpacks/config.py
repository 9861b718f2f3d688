# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog configuration read from ``pyproject.toml`` or ``iconpacks.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cache import CachePort
from .catalog import CatalogSnapshot, IconCatalog
from .errors import IconPackConfigError
from .extractors import ExtractorServices
from .loader import PackDefinitionLoader
from .model_pack import PackProvider
from .registry import ExtractorRegistry, default_registry
from .resolver import PatternResolver
from .scanner import DefinitionScanner
from .schema import SchemaRepository
from .types import DEFAULT_CACHE_KEY

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAME: Final[str] = "iconpacks.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "iconpacks"


class ProviderConfig(BaseModel):
    """Module or theme declaring a ``<name>.icons.yml`` document."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    path: Path = Field(default_factory=Path)


class CatalogConfig(BaseModel):
    """Settings used to assemble an :class:`IconCatalog`."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    root: Path = Field(default_factory=Path.cwd)
    providers: list[ProviderConfig] = Field(default_factory=list)
    validate_schema: bool = True
    schema_path: Path | None = None
    strict: bool = True
    cache_key: str = DEFAULT_CACHE_KEY

    def pack_providers(self) -> tuple[PackProvider, ...]:
        """Return the configured providers, or the ones found by scanning ``root``.

        Returns:
            tuple[PackProvider, ...]: Providers with paths relative to ``root``.

        Raises:
            IconPackConfigError: If a provider directory lies outside ``root``.
        """

        if not self.providers:
            return DefinitionScanner(self.root).providers()
        providers: list[PackProvider] = []
        root = self.root.resolve()
        for provider in self.providers:
            directory = provider.path if provider.path.is_absolute() else root / provider.path
            try:
                relative = directory.resolve().relative_to(root).as_posix()
            except ValueError as exc:
                raise IconPackConfigError(
                    f"Provider '{provider.name}' path {directory} is outside of the root {root}",
                ) from exc
            providers.append(PackProvider(name=provider.name, relative_path="" if relative == "." else relative))
        return tuple(providers)


def load_config(
    root: Path | None = None,
    *,
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CatalogConfig:
    """Load the catalog configuration.

    ``[tool.iconpacks]`` of ``<root>/pyproject.toml`` is read first, then
    ``<root>/iconpacks.toml`` whose keys win. An explicit ``config_path`` replaces both.
    ``overrides`` entries that are not ``None`` win over every file. Relative paths
    inside a file resolve against the directory holding it.

    Args:
        root: Application root, the working directory when omitted.
        config_path: Explicit configuration file.
        overrides: Values supplied on the command line.

    Returns:
        CatalogConfig: Validated configuration.

    Raises:
        IconPackConfigError: If a file cannot be parsed or a value is invalid.
    """

    base = (root or Path.cwd()).resolve()
    data: dict[str, Any] = {"root": base}
    if config_path is not None:
        if not config_path.is_file():
            raise IconPackConfigError(f"Configuration file {config_path} not found")
        data.update(_read_config_file(config_path.resolve()))
    else:
        for candidate in (base / PYPROJECT_FILENAME, base / CONFIG_FILENAME):
            if candidate.is_file():
                data.update(_read_config_file(candidate))
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    try:
        return CatalogConfig.model_validate(data)
    except ValidationError as exc:
        raise IconPackConfigError(f"Invalid iconpacks configuration: {exc}") from exc


def build_catalog(
    config: CatalogConfig,
    *,
    cache: CachePort[CatalogSnapshot] | None = None,
    registry: ExtractorRegistry | None = None,
    resolver: PatternResolver | None = None,
) -> IconCatalog:
    """Wire an :class:`IconCatalog` from ``config``.

    Args:
        config: Catalog configuration.
        cache: Cache port, process-local when omitted.
        registry: Extractor registry, the built-in one plus entry points when omitted.
        resolver: Pattern resolver injected into the default registry.

    Returns:
        IconCatalog: Ready to query catalog.
    """

    validator = SchemaRepository.load(config.schema_path).validator if config.validate_schema else None
    loader = PackDefinitionLoader(config.root, config.pack_providers(), validator)
    if registry is None:
        registry = default_registry(ExtractorServices(resolver=resolver or PatternResolver()))
    return IconCatalog(
        loader,
        registry,
        cache=cache,
        cache_key=config.cache_key,
        strict=config.strict,
    )


def _read_config_file(path: Path) -> dict[str, Any]:
    """Return the iconpacks table of ``path`` with relative paths anchored to its directory."""

    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise IconPackConfigError(f"{path}: invalid TOML: {exc}") from exc
    if path.name == PYPROJECT_FILENAME:
        tool_section = document.get(PYPROJECT_TOOL_KEY)
        section = tool_section.get(PYPROJECT_SECTION_KEY) if isinstance(tool_section, Mapping) else None
        if section is None:
            return {}
    else:
        section = document
    if not isinstance(section, Mapping):
        raise IconPackConfigError(f"{path}: iconpacks configuration must be a table")
    return _anchor_paths(dict(section), path.parent)


def _anchor_paths(section: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    for key in ("root", "schema_path"):
        value = section.get(key)
        if isinstance(value, str):
            section[key] = _resolve_path(Path(value), base_dir)
    providers = section.get("providers")
    if isinstance(providers, list):
        anchored: list[Any] = []
        for provider in providers:
            if isinstance(provider, Mapping) and isinstance(provider.get("path"), str):
                provider = {**provider, "path": _resolve_path(Path(provider["path"]), base_dir)}
            anchored.append(provider)
        section["providers"] = anchored
    return section


def _resolve_path(path: Path, base_dir: Path) -> Path:
    return path if path.is_absolute() else (base_dir / path)


__all__ = ["CatalogConfig", "ProviderConfig", "build_catalog", "load_config"]
