# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog builder aggregating every enabled pack into one cached icon map."""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from .cache import CachePort, InMemoryCache
from .checksum import compute_definitions_checksum
from .errors import IconPackConfigError, IconPackError
from .loader import PackDefinitionLoader
from .model_icon import IconEntry, split_full_id
from .model_pack import PackDefinition
from .registry import ExtractorRegistry
from .types import DEFAULT_CACHE_KEY, JSONValue

LOGGER = logging.getLogger(__name__)

SEARCH_MIN_LENGTH: Final[int] = 2


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Immutable result of one full catalog build.

    Attributes:
        packs: Enabled definitions that were extracted, keyed by pack id.
        icons: Every entry keyed by ``full_id``, grouped by pack in definition order.
        counts: Number of entries produced by each pack.
        checksum: Checksum of the definition documents the build was based on.
        errors: Messages of the packs excluded by a non-strict build.
    """

    packs: Mapping[str, PackDefinition] = field(default_factory=lambda: MappingProxyType({}))
    icons: Mapping[str, IconEntry] = field(default_factory=lambda: MappingProxyType({}))
    counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    checksum: str = ""
    errors: tuple[str, ...] = ()

    def icons_for(self, allowed_pack_ids: Collection[str] | None = None) -> dict[str, IconEntry]:
        """Return the entries of ``allowed_pack_ids``, every entry when ``None``."""

        if allowed_pack_ids is None:
            return dict(self.icons)
        allowed = set(allowed_pack_ids)
        return {full_id: entry for full_id, entry in self.icons.items() if entry.pack_id in allowed}


class IconCatalog:
    """Build, cache and query the icon catalog.

    The catalog is rebuilt wholesale on every cache miss: all definitions are loaded,
    every enabled pack is extracted, and the complete snapshot is stored under a single
    cache key. Queries never trigger a partial rebuild.
    """

    def __init__(
        self,
        loader: PackDefinitionLoader,
        registry: ExtractorRegistry,
        *,
        cache: CachePort[CatalogSnapshot] | None = None,
        cache_key: str = DEFAULT_CACHE_KEY,
        strict: bool = True,
    ) -> None:
        """Initialise the catalog.

        Args:
            loader: Loader producing the enabled, validated pack definitions.
            registry: Registry resolving ``extractor_id`` values to extractors.
            cache: Cache port storing built snapshots, process-local when omitted.
            cache_key: Key the snapshot is stored under.
            strict: Abort the build on the first configuration error instead of
                excluding the offending pack.
        """

        self.loader = loader
        self.registry = registry
        self.cache: CachePort[CatalogSnapshot] = cache if cache is not None else InMemoryCache()
        self.cache_key = cache_key
        self.strict = strict

    def snapshot(self) -> CatalogSnapshot:
        """Return the cached snapshot, building it on a miss."""

        cached = self.cache.get(self.cache_key)
        if cached is not None:
            return cached
        built = self.build()
        self.cache.set(self.cache_key, built)
        return built

    def build(self) -> CatalogSnapshot:
        """Load and extract every enabled pack without touching the cache.

        Returns:
            CatalogSnapshot: Freshly built snapshot.

        Raises:
            IconPackError: In strict mode, on the first configuration or font format error.
        """

        checksum = self.current_checksum()
        errors: list[str] = []

        def record(error: IconPackError) -> None:
            LOGGER.error("%s", error)
            errors.append(str(error))

        definitions = self.loader.load_definitions(on_error=None if self.strict else record)
        packs: dict[str, PackDefinition] = {}
        icons: dict[str, IconEntry] = {}
        counts: dict[str, int] = {}
        for definition in definitions:
            try:
                entries = self._extract(definition)
            except IconPackError as exc:
                if self.strict:
                    raise
                record(exc)
                continue
            packs[definition.id] = definition
            counts[definition.id] = 0
            for entry in entries:
                if entry.full_id in icons:
                    LOGGER.debug("%s: duplicate icon '%s' ignored", definition.id, entry.full_id)
                    continue
                icons[entry.full_id] = entry
                counts[definition.id] += 1
        LOGGER.debug("catalog built: %d packs, %d icons", len(packs), len(icons))
        return CatalogSnapshot(
            packs=MappingProxyType(packs),
            icons=MappingProxyType(icons),
            counts=MappingProxyType(counts),
            checksum=checksum,
            errors=tuple(errors),
        )

    def invalidate(self) -> None:
        """Drop the cached snapshot so that the next query rebuilds it."""

        self.cache.invalidate(self.cache_key)

    def refresh(self) -> CatalogSnapshot:
        """Invalidate the cache and rebuild immediately."""

        self.invalidate()
        return self.snapshot()

    def current_checksum(self) -> str:
        """Return the checksum of the definition documents as they are on disk."""

        return compute_definitions_checksum(self.loader.root_path, self.loader.definition_paths())

    def is_stale(self) -> bool:
        """Return ``True`` when no snapshot is cached or the definitions changed since."""

        cached = self.cache.get(self.cache_key)
        return cached is None or cached.checksum != self.current_checksum()

    def get_icons(self, allowed_pack_ids: Collection[str] | None = None) -> dict[str, IconEntry]:
        """Return the catalog keyed by ``full_id``.

        Args:
            allowed_pack_ids: Restrict the result to these packs.

        Returns:
            dict[str, IconEntry]: Matching entries.
        """

        return self.snapshot().icons_for(allowed_pack_ids)

    def get_icon(self, full_id: str) -> IconEntry | None:
        """Return the entry stored under ``full_id`` or ``None``.

        Malformed identifiers are reported as absent.
        """

        try:
            split_full_id(full_id)
        except ValueError:
            return None
        return self.snapshot().icons.get(full_id)

    def get_pack(self, pack_id: str) -> PackDefinition | None:
        """Return the definition of an extracted pack."""

        return self.snapshot().packs.get(pack_id)

    def packs(self) -> tuple[PackDefinition, ...]:
        """Return the definitions of every extracted pack, in definition order."""

        return tuple(self.snapshot().packs.values())

    def count(self, pack_id: str) -> int:
        """Return the number of icons provided by ``pack_id``."""

        return self.snapshot().counts.get(pack_id, 0)

    def list_pack_options(self) -> dict[str, str]:
        """Return ``"Label (count)"`` for every pack providing at least one icon."""

        snapshot = self.snapshot()
        return {
            pack_id: f"{pack.label} ({snapshot.counts[pack_id]})"
            for pack_id, pack in snapshot.packs.items()
            if snapshot.counts.get(pack_id)
        }

    def list_pack_with_description_options(self) -> dict[str, str]:
        """Return ``"Label (count) - description"`` for every non-empty pack."""

        snapshot = self.snapshot()
        options: dict[str, str] = {}
        for pack_id, pack in snapshot.packs.items():
            count = snapshot.counts.get(pack_id, 0)
            if not count:
                continue
            suffix = f" - {pack.description}" if pack.description else ""
            options[pack_id] = f"{pack.label} ({count}){suffix}"
        return options

    def list_icon_options(self, allowed_pack_ids: Collection[str] | None = None) -> dict[str, str]:
        """Return ``full_id -> label`` for the allowed packs."""

        return {full_id: entry.label for full_id, entry in self.get_icons(allowed_pack_ids).items()}

    def search_icons(self, query: str, allowed_pack_ids: Collection[str] | None = None) -> list[IconEntry]:
        """Return entries whose ``full_id`` contains the lower-cased ``query``.

        Queries shorter than two characters do not filter.

        Args:
            query: Text typed into the picker.
            allowed_pack_ids: Restrict the search to these packs.

        Returns:
            list[IconEntry]: Matching entries sorted by ``full_id``.
        """

        icons = self.get_icons(allowed_pack_ids)
        needle = query.strip().lower()
        if len(needle) >= SEARCH_MIN_LENGTH:
            icons = {full_id: entry for full_id, entry in icons.items() if needle in full_id}
        return [icons[full_id] for full_id in sorted(icons)]

    def get_extractor_form_defaults(self, pack_id: str) -> dict[str, JSONValue]:
        """Return the declared ``default`` of every setting of ``pack_id``.

        Unknown packs yield an empty mapping.
        """

        pack = self.get_pack(pack_id)
        return pack.form_defaults() if pack is not None else {}

    def _extract(self, definition: PackDefinition) -> list[IconEntry]:
        if not definition.extractor_id:
            LOGGER.warning("%s: icon pack '%s' declares no extractor", definition.provider, definition.id)
            return []
        try:
            extractor = self.registry.create(definition.extractor_id)
        except IconPackConfigError as exc:
            raise IconPackConfigError(f"{definition.provider}: icon pack '{definition.id}': {exc}") from exc
        return extractor.discover_icons(definition)


__all__ = ["SEARCH_MIN_LENGTH", "CatalogSnapshot", "IconCatalog"]
