# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Pack definition models materialised from declarative definition files."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .types import DEFINITION_SUFFIX, JSONValue
from .utils import (
    expect_mapping,
    freeze_json_mapping,
    optional_bool,
    optional_int,
    optional_string,
    string_array,
    thaw_json_value,
)


@dataclass(frozen=True, slots=True)
class PackProvider:
    """Module or theme that ships one definition file.

    Attributes:
        name: Provider machine name, also the definition file prefix.
        relative_path: POSIX path of the provider directory relative to the application root.
    """

    name: str
    relative_path: str

    def definition_path(self, root_path: Path) -> Path:
        """Return the definition file location for this provider under ``root_path``."""

        return root_path / self.relative_path / f"{self.name}{DEFINITION_SUFFIX}"


@dataclass(frozen=True, slots=True)
class PackSetting:
    """Schema fragment describing one user-facing setting of a pack."""

    name: str
    schema: Mapping[str, JSONValue]

    @property
    def title(self) -> str:
        """Return the display title, falling back to the setting name."""

        title = self.schema.get("title")
        return title if isinstance(title, str) else self.name

    @property
    def description(self) -> str | None:
        """Return the optional help text of the setting."""

        description = self.schema.get("description")
        return description if isinstance(description, str) else None

    @property
    def setting_type(self) -> str:
        """Return the JSON-Schema type name, ``string`` when undeclared."""

        value = self.schema.get("type")
        return value if isinstance(value, str) else "string"

    @property
    def has_default(self) -> bool:
        """Return ``True`` when the fragment declares a non-null ``default`` value."""

        return self.schema.get("default") is not None

    @property
    def default(self) -> JSONValue:
        """Return the declared default as plain JSON, ``None`` when absent."""

        return thaw_json_value(self.schema.get("default"))


@dataclass(frozen=True, slots=True)
class PackDefinition:
    """Validated description of one icon pack.

    Attributes:
        id: Pack identifier restricted to lowercase letters, digits and underscores.
        label: Display label of the pack.
        provider: Name of the module or theme providing the definition.
        extractor_id: Identifier of the extractor responsible for the pack.
        description: Optional display description.
        enabled: ``False`` removes the pack from the catalog.
        sources: Ordered source expressions from ``config.sources``.
        config: Complete ``config`` mapping, frozen.
        settings: Declared user-facing settings.
        template: Opaque render template forwarded to entries.
        library: Opaque asset library forwarded to entries.
        relative_path: Provider directory relative to ``root_path``.
        absolute_path: Provider directory on disk.
        root_path: Application root used for ``/``-prefixed sources.
        source_file: Definition file the pack was read from, when known.
    """

    id: str
    label: str
    provider: str
    extractor_id: str | None
    root_path: Path
    relative_path: str
    absolute_path: Path
    description: str | None = None
    enabled: bool = True
    sources: tuple[str, ...] = ()
    config: Mapping[str, JSONValue] = field(default_factory=lambda: MappingProxyType({}))
    settings: tuple[PackSetting, ...] = ()
    template: str | None = None
    library: str | None = None
    source_file: Path | None = None

    @classmethod
    def from_mapping(
        cls,
        pack_id: str,
        data: Mapping[str, JSONValue],
        *,
        provider: PackProvider,
        root_path: Path,
        source_file: Path | None = None,
    ) -> PackDefinition:
        """Create a pack definition from one entry of a definition document.

        Args:
            pack_id: Key of the entry inside the definition document.
            data: Raw mapping describing the pack.
            provider: Provider owning the definition document.
            root_path: Application root directory.
            source_file: Definition document path used for diagnostics.

        Returns:
            PackDefinition: Materialised definition with derived paths.

        Raises:
            IconPackConfigError: If a field carries an unexpected type.
        """

        context = f"{provider.name}: icon pack '{pack_id}'"
        label = optional_string(data.get("label"), key="label", context=context) or pack_id
        config_value = data.get("config")
        config = (
            freeze_json_mapping(expect_mapping(config_value, key="config", context=context), context=f"{context}.config")
            if config_value is not None
            else MappingProxyType({})
        )
        sources = string_array(config.get("sources"), key="config.sources", context=context)
        settings_value = data.get("settings")
        settings: tuple[PackSetting, ...] = ()
        if settings_value is not None:
            settings_mapping = expect_mapping(settings_value, key="settings", context=context)
            settings = tuple(
                PackSetting(
                    name=name,
                    schema=freeze_json_mapping(
                        expect_mapping(fragment, key=f"settings.{name}", context=context),
                        context=f"{context}.settings.{name}",
                    ),
                )
                for name, fragment in settings_mapping.items()
            )
        relative_path = provider.relative_path.strip("/")
        return cls(
            id=pack_id,
            label=label,
            provider=provider.name,
            extractor_id=optional_string(data.get("extractor"), key="extractor", context=context),
            root_path=root_path,
            relative_path=relative_path,
            absolute_path=root_path / relative_path if relative_path else root_path,
            description=optional_string(data.get("description"), key="description", context=context),
            enabled=optional_bool(data.get("enabled"), key="enabled", context=context, default=True),
            sources=sources,
            config=config,
            settings=settings,
            template=optional_string(data.get("template"), key="template", context=context),
            library=optional_string(data.get("library"), key="library", context=context),
            source_file=source_file,
        )

    @property
    def has_sources(self) -> bool:
        """Return ``True`` when ``config.sources`` is declared and non-empty."""

        return bool(self.sources)

    @property
    def offset(self) -> int:
        """Return the number of leading entries to skip, ``0`` when undeclared."""

        value = optional_int(self.config.get("offset"), key="config.offset", context=f"icon pack '{self.id}'")
        return value or 0

    @property
    def normalize_ids(self) -> bool:
        """Return ``True`` when derived ids should be lower-cased and sanitised."""

        return optional_bool(
            self.config.get("normalize_ids"),
            key="config.normalize_ids",
            context=f"icon pack '{self.id}'",
            default=False,
        )

    def form_defaults(self) -> dict[str, JSONValue]:
        """Return the ``default`` of every setting that declares one."""

        return {setting.name: setting.default for setting in self.settings if setting.has_default}


__all__ = ["PackDefinition", "PackProvider", "PackSetting"]
