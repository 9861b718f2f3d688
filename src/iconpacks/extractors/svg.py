# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""SVG file and SVG sprite extractors."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping
from typing import Final

from lxml import etree

from ..model_icon import IconEntry
from ..model_pack import PackDefinition
from ..resolver import FileRef
from .base import FinderExtractor

_SYMBOL_XPATH: Final[str] = ".//*[local-name()='symbol']"


def _parser() -> etree.XMLParser:
    """Return a non-recovering parser that never resolves entities or touches the network."""

    return etree.XMLParser(recover=False, resolve_entities=False, no_network=True, remove_comments=True)


class _SvgFileExtractor(FinderExtractor):
    """Shared parsing for the SVG based extractors."""

    def parse_svg(self, pack: PackDefinition, ref: FileRef) -> etree._Element | None:
        """Return the root element of ``ref`` or ``None`` when unreadable or malformed.

        Args:
            pack: Pack being extracted, used in log messages.
            ref: File reference produced by the resolver.

        Returns:
            etree._Element | None: Parsed root element.
        """

        data = self.services.resolver.read_contents(ref)
        if not data:
            return None
        try:
            return etree.fromstring(data, parser=_parser())
        except etree.XMLSyntaxError as exc:
            diagnostics = "; ".join(entry.message.strip() for entry in exc.error_log) or str(exc)
            self.logger.warning("%s: invalid svg '%s': %s", pack.id, ref.source, diagnostics)
            return None

    @staticmethod
    def symbols(root: etree._Element) -> list[etree._Element]:
        """Return every ``<symbol>`` descendant of ``root``, at any depth."""

        return list(root.xpath(_SYMBOL_XPATH))


class SvgExtractor(_SvgFileExtractor):
    """Embed the markup of standalone SVG files as icon content."""

    extractor_id = "svg"
    label = "SVG"
    description = "Handle SVG files and embed their markup."

    def entries_from_files(self, pack: PackDefinition, files: Mapping[str, FileRef]) -> Iterable[IconEntry]:
        for icon_id, ref in files.items():
            root = self.parse_svg(pack, ref)
            if root is None or self.symbols(root):
                continue
            yield self.create_icon(pack, icon_id, source=ref.source, group=ref.group, content=inner_markup(root))


class SvgSpriteExtractor(_SvgFileExtractor):
    """Expose each ``<symbol id>`` of SVG sprite sheets as an icon."""

    extractor_id = "svg_sprite"
    label = "SVG Sprite"
    description = "Handle SVG sprite files, one icon per symbol."

    def entries_from_files(self, pack: PackDefinition, files: Mapping[str, FileRef]) -> Iterable[IconEntry]:
        for ref in files.values():
            root = self.parse_svg(pack, ref)
            if root is None:
                continue
            for symbol_id in _symbol_ids(self.symbols(root)):
                yield self.create_icon(pack, symbol_id, source=ref.source, group=ref.group)


def inner_markup(root: etree._Element) -> str:
    """Serialise the children of ``root`` without the wrapping element.

    Namespace declarations are dropped so that the markup can be embedded inside an
    ``<svg>`` element of the rendering template.

    Args:
        root: Element whose content is serialised.

    Returns:
        str: Markup of the text and child nodes of ``root``.
    """

    clean = _strip_namespaces(root)
    parts = [clean.text or ""]
    parts.extend(etree.tostring(child, encoding="unicode", with_tail=True) for child in clean)
    return "".join(parts).strip()


def _strip_namespaces(root: etree._Element) -> etree._Element:
    clean = copy.deepcopy(root)
    for element in clean.iter():
        if isinstance(element.tag, str):
            element.tag = etree.QName(element).localname
    etree.cleanup_namespaces(clean)
    return clean


def _symbol_ids(symbols: Iterable[etree._Element]) -> Iterator[str]:
    for symbol in symbols:
        symbol_id = symbol.get("id")
        if symbol_id:
            yield symbol_id


__all__ = ["SvgExtractor", "SvgSpriteExtractor", "inner_markup"]
