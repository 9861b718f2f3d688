# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""High-level loader that materialises pack definitions."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .errors import IconPackConfigError
from .io import load_document
from .model_pack import PackDefinition, PackProvider
from .schema import SchemaValidator, validate_definition
from .types import JSONValue
from .utils import expect_mapping, optional_bool

LOGGER = logging.getLogger(__name__)

PACK_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"[a-z0-9_]+")

ErrorHandler = Callable[[IconPackConfigError], None]


@dataclass(slots=True)
class PackDefinitionLoader:
    """Read, filter and validate the pack definitions of every provider.

    Attributes:
        root_path: Application root the provider paths are relative to.
        providers: Providers whose ``<name>.icons.yml`` documents are read, in order.
        validator: Optional schema validator, validation is skipped when ``None``.
    """

    root_path: Path
    providers: Sequence[PackProvider]
    validator: SchemaValidator | None = None
    _seen: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def definition_paths(self) -> tuple[Path, ...]:
        """Return the definition document path of every provider.

        Returns:
            tuple[Path, ...]: Paths in provider order, including missing ones.
        """

        return tuple(provider.definition_path(self.root_path) for provider in self.providers)

    def load_definitions(self, *, on_error: ErrorHandler | None = None) -> tuple[PackDefinition, ...]:
        """Load every enabled pack definition.

        Args:
            on_error: Receives configuration errors instead of raising them. The offending
                pack (or document, for parse errors) is left out of the result.

        Returns:
            tuple[PackDefinition, ...]: Enabled definitions in provider then document order.

        Raises:
            IconPackConfigError: On the first configuration error when ``on_error`` is ``None``.
        """

        self._seen.clear()
        definitions: list[PackDefinition] = []
        for provider in self.providers:
            path = provider.definition_path(self.root_path)
            if not path.is_file():
                LOGGER.warning("%s: definition file '%s' not found", provider.name, path)
                continue
            try:
                document = load_document(path)
            except IconPackConfigError as exc:
                _dispatch(exc, on_error)
                continue
            for pack_id, data in document.items():
                try:
                    definition = self._load_pack(provider, path, pack_id, data)
                except IconPackConfigError as exc:
                    _dispatch(exc, on_error)
                    continue
                if definition is not None:
                    definitions.append(definition)
        return tuple(definitions)

    def _load_pack(
        self,
        provider: PackProvider,
        path: Path,
        pack_id: str,
        data: JSONValue,
    ) -> PackDefinition | None:
        """Turn one document entry into a definition, ``None`` when disabled.

        Raises:
            IconPackConfigError: If the id, the structure or the schema check fails.
        """

        if not PACK_ID_PATTERN.fullmatch(pack_id):
            raise IconPackConfigError(
                f"Invalid Icon Pack id in: {provider.name}, name: {pack_id} "
                "must contain only lowercase letters, numbers, and underscores.",
            )
        mapping: Mapping[str, JSONValue] = expect_mapping(data, key=pack_id, context=f"{provider.name}: {path}")
        if not optional_bool(mapping.get("enabled"), key="enabled", context=f"icon pack '{pack_id}'", default=True):
            LOGGER.debug("%s: icon pack '%s' is disabled", provider.name, pack_id)
            return None
        owner = self._seen.get(pack_id)
        if owner is not None:
            raise IconPackConfigError(
                f"Icon pack '{pack_id}' from {provider.name} is already declared by {owner}.",
            )
        if self.validator is not None:
            validate_definition(self.validator, pack_id, mapping)
        self._seen[pack_id] = provider.name
        return PackDefinition.from_mapping(
            pack_id,
            mapping,
            provider=provider,
            root_path=self.root_path,
            source_file=path,
        )


def _dispatch(error: IconPackConfigError, on_error: ErrorHandler | None) -> None:
    if on_error is None:
        raise error
    on_error(error)


__all__ = ["PACK_ID_PATTERN", "PackDefinitionLoader"]
