# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Extractor abstractions shared by every built-in and custom extractor."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from ..errors import IconPackConfigError
from ..model_icon import IconEntry
from ..model_pack import PackDefinition
from ..resolver import FileRef, PatternResolver

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractorServices:
    """Collaborators injected into every extractor instance.

    Attributes:
        resolver: Pattern resolver used by file based extractors.
        logger: Logger receiving parse warnings.
    """

    resolver: PatternResolver = field(default_factory=PatternResolver)
    logger: logging.Logger = LOGGER


class IconExtractor(ABC):
    """Strategy turning a pack definition into icon entries."""

    extractor_id: ClassVar[str]
    label: ClassVar[str]
    description: ClassVar[str] = ""

    def __init__(self, services: ExtractorServices) -> None:
        self.services = services

    @property
    def logger(self) -> logging.Logger:
        """Return the injected logger."""

        return self.services.logger

    @abstractmethod
    def discover_icons(self, pack: PackDefinition) -> list[IconEntry]:
        """Return the icons provided by ``pack``.

        Args:
            pack: Definition of the pack being extracted.

        Returns:
            list[IconEntry]: Entries with unique icon ids, in discovery order.

        Raises:
            IconPackConfigError: If the definition lacks required configuration.
        """

    def create_icon(
        self,
        pack: PackDefinition,
        icon_id: str,
        *,
        source: str | None = None,
        group: str | None = None,
        content: str | None = None,
    ) -> IconEntry:
        """Build an entry for ``icon_id`` carrying the pack level attributes.

        Args:
            pack: Definition owning the icon.
            icon_id: Identifier of the icon inside the pack.
            source: Resolved path or URL of the asset.
            group: Group captured from the source expression.
            content: Inline payload.

        Returns:
            IconEntry: Newly created entry.

        Raises:
            IconPackConfigError: If the pack declares no ``template``.
        """

        if not pack.template:
            raise IconPackConfigError(
                f"{self._context(pack)}: Missing `template` in your definition, "
                f"extractor {self.extractor_id} require this value.",
            )
        return IconEntry(
            pack_id=pack.id,
            icon_id=icon_id,
            source=source,
            group=group,
            content=content,
            pack_label=pack.label,
            template=pack.template,
            library=pack.library,
            extractor_id=self.extractor_id,
        )

    def require_sources(self, pack: PackDefinition) -> tuple[str, ...]:
        """Return ``config.sources`` of ``pack``.

        Raises:
            IconPackConfigError: If ``config.sources`` is missing or empty.
        """

        if not pack.has_sources:
            raise IconPackConfigError(
                f"{self._context(pack)}: Missing `config: sources` in your definition, "
                f"extractor {self.extractor_id} require this value.",
            )
        return pack.sources

    def require_base_path(self, pack: PackDefinition, sources: tuple[str, ...]) -> tuple[str, ...]:
        """Return ``sources`` once pack-relative ones are known to have a base directory.

        Raises:
            IconPackConfigError: If a pack-relative source is declared by a pack whose
                relative path is empty.
        """

        if not pack.relative_path and any(_is_pack_relative(source) for source in sources):
            raise IconPackConfigError(
                f"{self._context(pack)}: Empty relative path for extractor {self.extractor_id}.",
            )
        return sources

    def unique_entries(self, pack: PackDefinition, entries: Iterable[IconEntry]) -> list[IconEntry]:
        """Drop entries whose icon id was already produced, keeping the first one."""

        result: dict[str, IconEntry] = {}
        for entry in entries:
            if entry.icon_id in result:
                self.logger.debug("%s: duplicate icon '%s' from '%s' ignored", pack.id, entry.icon_id, entry.source)
                continue
            result[entry.icon_id] = entry
        return list(result.values())

    @staticmethod
    def _context(pack: PackDefinition) -> str:
        return f"{pack.provider}: icon pack '{pack.id}'"


class FinderExtractor(IconExtractor):
    """Extractor whose entries come from files matched by the pattern resolver."""

    def discover_icons(self, pack: PackDefinition) -> list[IconEntry]:
        files = self.files_from_sources(pack)
        return self.unique_entries(pack, self.entries_from_files(pack, files))

    def files_from_sources(self, pack: PackDefinition) -> dict[str, FileRef]:
        """Resolve the sources of ``pack`` into file references.

        Args:
            pack: Definition being extracted.

        Returns:
            dict[str, FileRef]: File references keyed by icon id.

        Raises:
            IconPackConfigError: If sources are missing or a pack-relative source has no
                base directory.
        """

        sources = self.require_base_path(pack, self.require_sources(pack))
        return self.services.resolver.resolve(
            sources,
            pack.relative_path,
            pack.root_path,
            normalize_ids=pack.normalize_ids,
            context=pack.id,
        )

    @abstractmethod
    def entries_from_files(self, pack: PackDefinition, files: Mapping[str, FileRef]) -> Iterable[IconEntry]:
        """Turn resolved files into entries."""


def _is_pack_relative(source: str) -> bool:
    """Return ``True`` when ``source`` resolves against the pack directory."""

    return not source.startswith("/") and "://" not in source


__all__ = ["ExtractorServices", "FinderExtractor", "IconExtractor"]
