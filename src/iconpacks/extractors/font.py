# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Web font extractor reading glyph lists from text maps or binary font files."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path, PurePosixPath
from typing import Final

import yaml

from ..errors import BinaryFormatError, IconPackConfigError
from ..model_icon import IconEntry
from ..model_pack import PackDefinition
from .base import IconExtractor
from .truetype import TrueTypeFont, parse_sfnt
from .woff import parse_woff

_Reader = Callable[["FontExtractor", PackDefinition, Path, str], list[IconEntry]]


class FontExtractor(IconExtractor):
    """Read icon names from codepoint lists, JSON/YAML maps, or TrueType/WOFF fonts.

    Sources are plain file paths, ``/``-prefixed ones resolve against the application
    root and the others against the pack directory. The format is chosen by the file
    extension, unknown extensions are skipped with a warning. ``config.offset`` drops
    that many leading entries once every source has been read.
    """

    extractor_id = "font"
    label = "Web Font"
    description = "Provide icons from web fonts."

    def discover_icons(self, pack: PackDefinition) -> list[IconEntry]:
        entries: list[IconEntry] = []
        for source in self.require_base_path(pack, self.require_sources(pack)):
            path = _source_path(pack, source)
            extension = path.suffix.lstrip(".").lower()
            reader = _READERS.get(extension)
            if reader is None:
                self.logger.warning(
                    "%s: unsupported font source '%s', expected one of: %s",
                    pack.id,
                    source,
                    ", ".join(FONT_EXTENSIONS),
                )
                continue
            if not path.is_file():
                self.logger.warning("%s: font source '%s' not found", pack.id, source)
                continue
            entries.extend(reader(self, pack, path, _web_path(pack, source)))
        return self.unique_entries(pack, entries)[pack.offset :]

    def read_codepoints(self, pack: PackDefinition, path: Path, source: str) -> list[IconEntry]:
        """Read a ``.codepoints`` file: icon id then optional content on each line."""

        entries: list[IconEntry] = []
        for line in self._read_text(pack, path).splitlines():
            fields = line.split(maxsplit=1)
            if not fields:
                continue
            content = fields[1].strip() if len(fields) > 1 else None
            entries.append(self.create_icon(pack, fields[0], source=source, content=content or None))
        return entries

    def read_json(self, pack: PackDefinition, path: Path, source: str) -> list[IconEntry]:
        """Read a JSON object whose keys are icon ids.

        Raises:
            IconPackConfigError: If the document is not valid JSON or not an object.
        """

        try:
            data = json.loads(self._read_text(pack, path))
        except json.JSONDecodeError as exc:
            raise IconPackConfigError(f"{self._context(pack)}: The {path} contains invalid json: {exc.msg}") from exc
        return self._entries_from_mapping(pack, data, path, source, kind="json")

    def read_yaml(self, pack: PackDefinition, path: Path, source: str) -> list[IconEntry]:
        """Read a YAML mapping whose keys are icon ids.

        Raises:
            IconPackConfigError: If the document is not valid YAML or not a mapping.
        """

        try:
            data = yaml.safe_load(self._read_text(pack, path))
        except yaml.YAMLError as exc:
            raise IconPackConfigError(f"{self._context(pack)}: The {path} contains invalid YAML: {exc}") from exc
        return self._entries_from_mapping(pack, data, path, source, kind="YAML")

    def read_sfnt(self, pack: PackDefinition, path: Path, source: str) -> list[IconEntry]:
        """Read glyph names from a raw TrueType or CFF OpenType file."""

        return self._font_entries(pack, source, path, lambda data: parse_sfnt(data, path=path))

    def read_woff(self, pack: PackDefinition, path: Path, source: str) -> list[IconEntry]:
        """Read glyph names from a WOFF container."""

        return self._font_entries(pack, source, path, lambda data: parse_woff(data, path=path).to_truetype(path=path))

    def _font_entries(
        self,
        pack: PackDefinition,
        source: str,
        path: Path,
        parse: Callable[[bytes], TrueTypeFont],
    ) -> list[IconEntry]:
        try:
            font = parse(self._read_bytes(pack, path))
        except BinaryFormatError as exc:
            raise IconPackConfigError(f"{self._context(pack)}: invalid font file {path}: {exc}") from exc
        return [
            self.create_icon(pack, name, source=source, content=f"{codepoint:x}")
            for codepoint, name in font.named_codepoints()
        ]

    def _entries_from_mapping(
        self,
        pack: PackDefinition,
        data: object,
        path: Path,
        source: str,
        *,
        kind: str,
    ) -> list[IconEntry]:
        if data is None:
            return []
        if not isinstance(data, dict):
            raise IconPackConfigError(f"{self._context(pack)}: The {path} must contain a {kind} mapping of icon ids.")
        return [
            self.create_icon(pack, str(icon_id), source=source, content=value if isinstance(value, str) else None)
            for icon_id, value in data.items()
        ]

    def _read_text(self, pack: PackDefinition, path: Path) -> str:
        try:
            return self._read_bytes(pack, path).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise IconPackConfigError(f"{self._context(pack)}: The {path} is not valid UTF-8: {exc}") from exc

    def _read_bytes(self, pack: PackDefinition, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise IconPackConfigError(f"{self._context(pack)}: unable to read {path}: {exc}") from exc


_READERS: Final[dict[str, _Reader]] = {
    "codepoints": FontExtractor.read_codepoints,
    "json": FontExtractor.read_json,
    "yml": FontExtractor.read_yaml,
    "yaml": FontExtractor.read_yaml,
    "ttf": FontExtractor.read_sfnt,
    "otf": FontExtractor.read_sfnt,
    "woff": FontExtractor.read_woff,
}

FONT_EXTENSIONS: Final[tuple[str, ...]] = tuple(_READERS)


def _source_path(pack: PackDefinition, source: str) -> Path:
    if source.startswith("/"):
        return pack.root_path / source.lstrip("/")
    return pack.absolute_path / source


def _web_path(pack: PackDefinition, source: str) -> str:
    if source.startswith("/"):
        return source
    return "/" + str(PurePosixPath(pack.relative_path, source)).lstrip("/")


__all__ = ["FONT_EXTENSIONS", "FontExtractor"]
