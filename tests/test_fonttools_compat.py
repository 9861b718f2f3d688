# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cross-check the font parsers against fonts written by fontTools."""

from __future__ import annotations

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont

from iconpacks.extractors.truetype import TrueTypeFont, parse_sfnt
from iconpacks.extractors.woff import parse_woff

GLYPH_ORDER = [".notdef", "home", "star", "bell", "space"]
CMAP = {0x20: "space", 0xE001: "home", 0xE002: "star", 0xF101: "bell"}


@pytest.fixture
def ttf_path(tmp_path: Path) -> Path:
    """Return a TrueType icon font built with ``FontBuilder``."""

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap(CMAP)
    fb.setupGlyf({name: TTGlyphPen(None).glyph() for name in GLYPH_ORDER})
    fb.setupHorizontalMetrics({name: (500 + index, 0) for index, name in enumerate(GLYPH_ORDER)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, sTypoLineGap=0, usWinAscent=800, usWinDescent=200)
    fb.setupNameTable({
        "familyName": "Test Icons",
        "styleName": "Regular",
        "psName": "TestIcons-Regular",
    })
    fb.setupPost()
    fb.setupMaxp()
    path = tmp_path / "icons.ttf"
    fb.save(str(path))
    return path


def _assert_matches(font: TrueTypeFont, reference: TTFont) -> None:
    best_cmap = reference.getBestCmap()
    assert dict(font.char_to_glyph) == {codepoint: reference.getGlyphID(name) for codepoint, name in best_cmap.items()}
    assert list(font.glyph_names) == reference.getGlyphOrder()
    assert font.named_codepoints() == sorted(best_cmap.items())
    assert font.postscript_name == "TestIcons-Regular"
    assert font.units_per_em == reference["head"].unitsPerEm
    assert font.num_glyphs == reference["maxp"].numGlyphs
    assert list(font.widths) == [reference["hmtx"][name][0] for name in reference.getGlyphOrder()]


def test_truetype_parser_agrees_with_fonttools(ttf_path: Path) -> None:
    font = parse_sfnt(ttf_path.read_bytes(), path=ttf_path)

    _assert_matches(font, TTFont(ttf_path))


def test_woff_parser_agrees_with_fonttools(ttf_path: Path, tmp_path: Path) -> None:
    reference = TTFont(ttf_path)
    reference.flavor = "woff"
    woff_path = tmp_path / "icons.woff"
    reference.save(str(woff_path))

    woff = parse_woff(woff_path.read_bytes(), path=woff_path)

    assert woff.is_cff is False
    _assert_matches(woff.to_truetype(path=woff_path), TTFont(woff_path))
