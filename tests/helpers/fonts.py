# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Builders producing minimal TrueType and WOFF files for the font parser tests."""

from __future__ import annotations

import struct
import zlib
from collections.abc import Mapping, Sequence

from iconpacks.extractors.truetype import HEAD_MAGIC, MAC_GLYPH_NAMES, SFNT_VERSION_TRUETYPE

WOFF_SIGNATURE = 0x774F4646


def _int16(value: int) -> int:
    return ((value + 0x8000) % 0x10000) - 0x8000


def _pad4(data: bytes) -> bytes:
    return data + b"\0" * (-len(data) % 4)


def head_table(*, units_per_em: int = 1000, bbox: tuple[int, int, int, int] = (0, -200, 1000, 800)) -> bytes:
    return struct.pack(
        ">IIIIHHqqhhhhHHhhh",
        0x00010000,
        0x00010000,
        0,
        HEAD_MAGIC,
        0,
        units_per_em,
        0,
        0,
        *bbox,
        0,
        8,
        2,
        0,
        0,
    )


def hhea_table(number_of_h_metrics: int) -> bytes:
    return struct.pack(">Ihhh", 0x00010000, 800, -200, 0) + bytes(24) + struct.pack(">H", number_of_h_metrics)


def maxp_table(num_glyphs: int) -> bytes:
    return struct.pack(">IH", 0x00005000, num_glyphs)


def hmtx_table(widths: Sequence[int]) -> bytes:
    return b"".join(struct.pack(">Hh", width, 0) for width in widths)


CmapSegment = tuple[int, int, int, Sequence[int] | None]


def cmap_table(mapping: Mapping[int, int], *, platform: tuple[int, int] = (3, 1)) -> bytes:
    """Return a ``cmap`` table holding one format 4 subtable, one segment per codepoint."""

    segments: list[CmapSegment] = [
        (codepoint, codepoint, _int16(glyph_id - codepoint), None) for codepoint, glyph_id in sorted(mapping.items())
    ]
    segments.append((0xFFFF, 0xFFFF, 1, None))
    return cmap_segments_table(segments, platform=platform)


def cmap_segments_table(segments: Sequence[CmapSegment], *, platform: tuple[int, int] = (3, 1)) -> bytes:
    """Return a format 4 ``cmap`` table from raw ``(start, end, id_delta, glyph_ids)`` segments.

    Segments with ``glyph_ids`` look their glyphs up in the glyphIdArray through
    ``idRangeOffset``; the others use ``id_delta`` alone.
    """

    seg_count = len(segments)
    range_offsets: list[int] = []
    glyph_id_array: list[int] = []
    for index, (_, _, _, glyph_ids) in enumerate(segments):
        if glyph_ids is None:
            range_offsets.append(0)
            continue
        range_offsets.append(2 * (seg_count - index) + 2 * len(glyph_id_array))
        glyph_id_array.extend(glyph_ids)

    body = struct.pack(f">{seg_count}H", *(end for _, end, _, _ in segments))
    body += b"\0\0"
    body += struct.pack(f">{seg_count}H", *(start for start, _, _, _ in segments))
    body += struct.pack(f">{seg_count}h", *(delta for _, _, delta, _ in segments))
    body += struct.pack(f">{seg_count}H", *range_offsets)
    body += struct.pack(f">{len(glyph_id_array)}H", *glyph_id_array)
    header = struct.pack(">HHHHHHH", 4, 14 + len(body), 0, seg_count * 2, 0, 0, 0)
    subtable = header + body
    return struct.pack(">HHHHI", 0, 1, platform[0], platform[1], 12) + subtable


def name_table(postscript_name: str) -> bytes:
    encoded = postscript_name.encode("utf-16-be")
    return struct.pack(">HHHHHHHHH", 0, 1, 18, 3, 1, 0x409, 6, len(encoded), 0) + encoded


def os2_table(*, fs_type: int = 0, fs_selection: int = 0, cap_height: int = 700) -> bytes:
    data = struct.pack(">HhHHH", 4, 500, 400, 5, fs_type)
    data += bytes(52)
    data += struct.pack(">HHHhh", fs_selection, 0x20, 0xF8FF, 800, -200)
    data += bytes(16)
    data += struct.pack(">h", cap_height)
    return data + bytes(6)


def post_table(names: Sequence[str], *, version: int = 0x00020000, is_fixed_pitch: bool = False) -> bytes:
    """Return a ``post`` table, glyph names are only written for format 2.0."""

    header = struct.pack(">IhHhhIIIII", version, -12, 0, -100, 50, int(is_fixed_pitch), 0, 0, 0, 0)
    if version != 0x00020000:
        return header
    indices: list[int] = []
    custom: list[str] = []
    for name in names:
        if name in MAC_GLYPH_NAMES:
            indices.append(MAC_GLYPH_NAMES.index(name))
        else:
            indices.append(len(MAC_GLYPH_NAMES) + len(custom))
            custom.append(name)
    data = header + struct.pack(f">H{len(indices)}H", len(indices), *indices)
    for name in custom:
        encoded = name.encode("latin-1")
        data += struct.pack(">B", len(encoded)) + encoded
    return data


def font_tables(
    glyphs: Sequence[tuple[int, str]],
    *,
    postscript_name: str = "TestIcons",
    post_version: int = 0x00020000,
    cmap_platform: tuple[int, int] = (3, 1),
    fs_type: int = 0,
    fs_selection: int = 0,
) -> dict[str, bytes]:
    """Return the required tables of a font mapping each ``(codepoint, name)`` to its own glyph.

    Glyph ``0`` is ``.notdef``; the glyphs follow in the given order.
    """

    names = [".notdef", *(name for _, name in glyphs)]
    mapping = {codepoint: index for index, (codepoint, _) in enumerate(glyphs, start=1)}
    widths = [500 + index for index in range(len(names))]
    return {
        "OS/2": os2_table(fs_type=fs_type, fs_selection=fs_selection),
        "cmap": cmap_table(mapping, platform=cmap_platform),
        "head": head_table(),
        "hhea": hhea_table(len(widths)),
        "hmtx": hmtx_table(widths),
        "maxp": maxp_table(len(names)),
        "name": name_table(postscript_name),
        "post": post_table(names, version=post_version),
    }


def build_sfnt(tables: Mapping[str, bytes], *, version: int = SFNT_VERSION_TRUETYPE) -> bytes:
    """Assemble ``tables`` into an sfnt file."""

    tags = sorted(tables)
    offset = 12 + 16 * len(tags)
    directory = b""
    payload = b""
    for tag in tags:
        data = tables[tag]
        directory += struct.pack(">4sIII", tag.encode("latin-1"), 0, offset + len(payload), len(data))
        payload += _pad4(data)
    return struct.pack(">IHHHH", version, len(tags), 0, 0, 0) + directory + payload


def build_woff(
    tables: Mapping[str, bytes],
    *,
    flavor: int = SFNT_VERSION_TRUETYPE,
    metadata: bytes = b"",
    private_data: bytes = b"",
) -> bytes:
    """Wrap ``tables`` in a WOFF container, compressing tables when it saves space."""

    tags = sorted(tables)
    offset = 44 + 20 * len(tags)
    directory = b""
    payload = b""
    for tag in tags:
        data = tables[tag]
        compressed = zlib.compress(data)
        stored = compressed if len(compressed) < len(data) else data
        directory += struct.pack(">4sIIII", tag.encode("latin-1"), offset + len(payload), len(stored), len(data), 0)
        payload += _pad4(stored)

    meta_offset = meta_length = 0
    if metadata:
        meta_offset = offset + len(payload)
        packed = zlib.compress(metadata)
        meta_length = len(packed)
        payload += _pad4(packed)
    priv_offset = 0
    if private_data:
        priv_offset = offset + len(payload)
        payload += private_data

    total_sfnt_size = 12 + 16 * len(tags) + sum(len(_pad4(data)) for data in tables.values())
    length = offset + len(payload)
    header = struct.pack(
        ">IIIHHIHHIIIII",
        WOFF_SIGNATURE,
        flavor,
        length,
        len(tags),
        0,
        total_sfnt_size,
        1,
        0,
        meta_offset,
        meta_length,
        len(metadata),
        priv_offset,
        len(private_data),
    )
    return header + directory + payload


__all__ = ["build_sfnt", "build_woff", "cmap_segments_table", "cmap_table", "font_tables"]
