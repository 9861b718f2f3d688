# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Icon pack discovery: definitions, extractors and the cached icon catalog."""

from __future__ import annotations

from importlib import metadata

from .catalog import CatalogSnapshot, IconCatalog
from .config import CatalogConfig, ProviderConfig, build_catalog, load_config
from .errors import (
    BinaryFormatError,
    CatalogValidationError,
    IconDefinitionError,
    IconPackConfigError,
    IconPackError,
)
from .extractors import ExtractorServices, IconExtractor
from .model_icon import IconEntry
from .model_pack import PackDefinition, PackProvider, PackSetting
from .registry import ExtractorRegistry, default_registry
from .resolver import FileRef, PatternResolver

__all__ = [
    "BinaryFormatError",
    "CatalogConfig",
    "CatalogSnapshot",
    "CatalogValidationError",
    "ExtractorRegistry",
    "ExtractorServices",
    "FileRef",
    "IconCatalog",
    "IconDefinitionError",
    "IconEntry",
    "IconExtractor",
    "IconPackConfigError",
    "IconPackError",
    "PackDefinition",
    "PackProvider",
    "PackSetting",
    "PatternResolver",
    "ProviderConfig",
    "__version__",
    "build_catalog",
    "default_registry",
    "load_config",
]

try:
    __version__ = metadata.version("iconpacks")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
