# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Registry mapping extractor identifiers to extractor factories."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Sequence
from importlib import metadata
from typing import Final, TypeAlias

from .errors import IconPackConfigError, IconPackError
from .extractors import BUILTIN_EXTRACTORS, ExtractorServices, IconExtractor

LOGGER = logging.getLogger(__name__)

ENTRY_POINT_GROUP: Final[str] = "iconpacks.extractors"

ExtractorFactory: TypeAlias = Callable[[ExtractorServices], IconExtractor]


class ExtractorRegistry:
    """Lookup table of extractor factories sharing one set of injected services."""

    def __init__(self, services: ExtractorServices | None = None) -> None:
        """Create an empty registry.

        Args:
            services: Collaborators handed to every extractor created by the registry.
        """

        self.services = services or ExtractorServices()
        self._factories: dict[str, ExtractorFactory] = {}
        self._instances: dict[str, IconExtractor] = {}

    def __contains__(self, extractor_id: object) -> bool:
        return extractor_id in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._factories))

    def register(self, extractor_id: str, factory: ExtractorFactory, *, replace: bool = False) -> None:
        """Register ``factory`` under ``extractor_id``.

        Args:
            extractor_id: Identifier referenced by the ``extractor`` key of pack definitions.
            factory: Callable receiving :class:`ExtractorServices` and returning an extractor.
            replace: Allow overriding an existing registration.

        Raises:
            IconPackError: If ``extractor_id`` is already registered and ``replace`` is false.
        """

        if extractor_id in self._factories and not replace:
            raise IconPackError(f"Extractor '{extractor_id}' is already registered")
        self._factories[extractor_id] = factory
        self._instances.pop(extractor_id, None)

    def register_class(self, extractor_cls: type[IconExtractor], *, replace: bool = False) -> None:
        """Register an extractor class under its declared ``extractor_id``."""

        self.register(extractor_cls.extractor_id, extractor_cls, replace=replace)

    def create(self, extractor_id: str) -> IconExtractor:
        """Return the extractor registered as ``extractor_id``.

        Instances are created lazily and reused for the lifetime of the registry.

        Args:
            extractor_id: Identifier of the extractor.

        Returns:
            IconExtractor: Extractor instance.

        Raises:
            IconPackConfigError: If no extractor is registered under ``extractor_id``.
        """

        instance = self._instances.get(extractor_id)
        if instance is not None:
            return instance
        factory = self._factories.get(extractor_id)
        if factory is None:
            known = ", ".join(sorted(self._factories)) or "none"
            raise IconPackConfigError(f"Unknown extractor '{extractor_id}', registered extractors: {known}")
        instance = factory(self.services)
        if not isinstance(instance, IconExtractor):
            raise IconPackError(f"Extractor factory {factory!r} did not return an IconExtractor")
        self._instances[extractor_id] = instance
        return instance

    def load_entry_points(self, *, entry_points: Sequence[metadata.EntryPoint] | None = None) -> tuple[str, ...]:
        """Register extractors advertised under the ``iconpacks.extractors`` entry-point group.

        Each entry point loads either an :class:`IconExtractor` subclass, registered under
        its ``extractor_id``, or a factory callable registered under the entry-point name.
        Entry points that fail to load are skipped with a warning.

        Args:
            entry_points: Optional entry points overriding discovery, used by tests.

        Returns:
            tuple[str, ...]: Identifiers registered by this call.
        """

        selected = entry_points if entry_points is not None else _discover_entry_points()
        registered: list[str] = []
        for entry in selected:
            try:
                target = entry.load()
            except (AttributeError, ImportError, ValueError) as exc:
                LOGGER.warning("unable to load extractor entry point '%s': %s", entry.name, exc)
                continue
            if inspect.isclass(target) and issubclass(target, IconExtractor):
                extractor_id = getattr(target, "extractor_id", entry.name)
            elif callable(target):
                extractor_id = entry.name
            else:
                LOGGER.warning("extractor entry point '%s' is not callable", entry.name)
                continue
            if extractor_id in self._factories:
                LOGGER.warning("extractor entry point '%s' ignored, '%s' already registered", entry.name, extractor_id)
                continue
            self.register(extractor_id, target)
            registered.append(extractor_id)
        return tuple(registered)


def default_registry(
    services: ExtractorServices | None = None,
    *,
    discover_plugins: bool = True,
) -> ExtractorRegistry:
    """Return a registry holding the built-in extractors.

    Args:
        services: Collaborators handed to the extractors.
        discover_plugins: Also register extractors published through entry points.

    Returns:
        ExtractorRegistry: Populated registry.
    """

    registry = ExtractorRegistry(services)
    for extractor_cls in BUILTIN_EXTRACTORS:
        registry.register_class(extractor_cls)
    if discover_plugins:
        registry.load_entry_points()
    return registry


def _discover_entry_points() -> tuple[metadata.EntryPoint, ...]:
    return tuple(metadata.entry_points(group=ENTRY_POINT_GROUP))


__all__ = ["ENTRY_POINT_GROUP", "ExtractorFactory", "ExtractorRegistry", "default_registry"]
