# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the path, svg and svg_sprite extractors."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from lxml import etree

from iconpacks.errors import IconPackConfigError
from iconpacks.extractors import ExtractorServices, PathExtractor, SvgExtractor, SvgSpriteExtractor
from iconpacks.extractors.svg import inner_markup
from iconpacks.resolver import PatternResolver
from tests.helpers.packs import PackFactory, touch_files, write_svg

SPRITE_BODY = (
    '<defs><symbol id="home" viewBox="0 0 24 24"><path d="M1 1"/></symbol></defs>'
    '<symbol id="user"><circle r="4"/></symbol>'
    "<symbol><rect/></symbol>"
)


def test_path_extractor_lists_files(make_pack: PackFactory, pack_dir: Path, services: ExtractorServices) -> None:
    touch_files(pack_dir / "icons", ["solid/home.svg", "solid/star.png", "brands/github.svg"])
    pack = make_pack(extractor="path", config={"sources": ["icons/{group}/{icon_id}.{svg,png}"]})

    entries = PathExtractor(services).discover_icons(pack)

    assert [(entry.icon_id, entry.group) for entry in entries] == [
        ("github", "brands"),
        ("home", "solid"),
        ("star", "solid"),
    ]
    github = entries[0]
    assert github.full_id == "demo:github"
    assert github.source == "/modules/demo/icons/brands/github.svg"
    assert github.template == "<i>{{ icon_id }}</i>"
    assert github.pack_label == "Demo"
    assert github.extractor_id == "path"
    assert github.content is None


def test_path_extractor_accepts_remote_sources(make_pack: PackFactory, services: ExtractorServices) -> None:
    pack = make_pack(extractor="path", config={"sources": ["https://cdn.example.com/icons/star.svg"]})

    entries = PathExtractor(services).discover_icons(pack)

    assert [entry.source for entry in entries] == ["https://cdn.example.com/icons/star.svg"]


def test_missing_sources_is_a_configuration_error(make_pack: PackFactory, services: ExtractorServices) -> None:
    pack = make_pack(extractor="path")

    with pytest.raises(IconPackConfigError, match="Missing `config: sources` in your definition, extractor path"):
        PathExtractor(services).discover_icons(pack)


def test_missing_template_is_a_configuration_error(
    make_pack: PackFactory,
    pack_dir: Path,
    services: ExtractorServices,
) -> None:
    touch_files(pack_dir / "icons", ["home.svg"])
    pack = make_pack(extractor="path", template=None, config={"sources": ["icons/*.svg"]})

    with pytest.raises(IconPackConfigError, match="Missing `template` in your definition, extractor path"):
        PathExtractor(services).discover_icons(pack)


def test_empty_relative_path_rejects_pack_relative_sources(
    make_pack: PackFactory,
    services: ExtractorServices,
) -> None:
    pack = make_pack(relative_path="", extractor="path", config={"sources": ["icons/*.svg"]})

    with pytest.raises(IconPackConfigError, match="Empty relative path for extractor path"):
        PathExtractor(services).discover_icons(pack)


def test_empty_relative_path_allows_root_sources(
    tmp_path: Path,
    make_pack: PackFactory,
    services: ExtractorServices,
) -> None:
    touch_files(tmp_path / "assets", ["logo.svg"])
    pack = make_pack(relative_path="", extractor="path", config={"sources": ["/assets/*.svg"]})

    entries = PathExtractor(services).discover_icons(pack)

    assert [entry.source for entry in entries] == ["/assets/logo.svg"]


def test_svg_extractor_embeds_inner_markup(
    make_pack: PackFactory,
    pack_dir: Path,
    services: ExtractorServices,
) -> None:
    write_svg(pack_dir / "icons" / "home.svg", '<!-- drawn by hand --><path d="M0 0h24v24H0z"/>')
    pack = make_pack(extractor="svg", config={"sources": ["icons/*.svg"]})

    entries = SvgExtractor(services).discover_icons(pack)

    assert len(entries) == 1
    assert entries[0].icon_id == "home"
    assert entries[0].content == '<path d="M0 0h24v24H0z"/>'
    assert entries[0].extractor_id == "svg"


def test_svg_extractor_skips_sprites_and_invalid_files(
    make_pack: PackFactory,
    pack_dir: Path,
    services: ExtractorServices,
    caplog: pytest.LogCaptureFixture,
) -> None:
    write_svg(pack_dir / "icons" / "sprite.svg", SPRITE_BODY)
    write_svg(pack_dir / "icons" / "star.svg", "<polygon/>")
    (pack_dir / "icons" / "broken.svg").write_text("<svg><path></svg>", encoding="utf-8")
    pack = make_pack(extractor="svg", config={"sources": ["icons/*.svg"]})

    with caplog.at_level(logging.WARNING):
        entries = SvgExtractor(services).discover_icons(pack)

    assert [entry.icon_id for entry in entries] == ["star"]
    assert "invalid svg '/modules/demo/icons/broken.svg'" in caplog.text


def test_svg_extractor_ignores_unreachable_remote_files(make_pack: PackFactory, services: ExtractorServices) -> None:
    pack = make_pack(extractor="svg", config={"sources": ["https://cdn.example.com/star.svg"]})

    assert SvgExtractor(services).discover_icons(pack) == []


def test_svg_extractor_reads_remote_files(make_pack: PackFactory) -> None:
    def fetch(url: str) -> bytes:
        return b'<svg xmlns="http://www.w3.org/2000/svg"><circle r="2"/></svg>'

    pack = make_pack(extractor="svg", config={"sources": ["https://cdn.example.com/dot.svg"]})

    entries = SvgExtractor(ExtractorServices(resolver=PatternResolver(fetcher=fetch))).discover_icons(pack)

    assert [(entry.icon_id, entry.content) for entry in entries] == [("dot", '<circle r="2"/>')]


def test_svg_sprite_extractor_lists_symbols(
    make_pack: PackFactory,
    pack_dir: Path,
    services: ExtractorServices,
) -> None:
    write_svg(pack_dir / "sprites" / "main.svg", SPRITE_BODY)
    write_svg(pack_dir / "sprites" / "extra.svg", '<symbol id="home"/><symbol id="bell"/>')
    pack = make_pack(extractor="svg_sprite", config={"sources": ["sprites/*.svg"]})

    entries = SvgSpriteExtractor(services).discover_icons(pack)

    assert [entry.icon_id for entry in entries] == ["home", "bell", "user"]
    assert entries[0].source == "/modules/demo/sprites/extra.svg"
    assert entries[2].source == "/modules/demo/sprites/main.svg"
    assert all(entry.content is None for entry in entries)


def test_inner_markup_strips_namespaces() -> None:
    root = etree.fromstring(
        b'<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
        b'<g><use xlink:href="#a"/></g></svg>',
    )

    markup = inner_markup(root)

    assert markup.startswith("<g")
    assert "xmlns=" not in markup
    assert "#a" in markup
