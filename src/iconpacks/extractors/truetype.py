# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""TrueType/OpenType table parsing for font based icon packs.

Only the tables needed to enumerate glyphs are decoded: the character map (format 4
subtables), glyph names from ``post`` and the handful of metrics found in ``head``,
``hhea``, ``maxp``, ``hmtx``, ``name`` and ``OS/2``. Glyph outlines are never read.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final

from ..errors import BinaryFormatError
from .binary import ByteReader

LOGGER = logging.getLogger(__name__)

SFNT_VERSION_TRUETYPE: Final[int] = 0x00010000
SFNT_VERSION_CFF: Final[int] = 0x4F54544F  # "OTTO"
HEAD_MAGIC: Final[int] = 0x5F0F3CF5

REQUIRED_TABLES: Final[tuple[str, ...]] = ("head", "hhea", "maxp", "hmtx", "cmap", "name", "OS/2", "post")

_CMAP_SENTINEL: Final[int] = 0xFFFF
_GLYPH_SPACE: Final[int] = 65536
_NAME_ID_POSTSCRIPT: Final[int] = 6
_POSTSCRIPT_FORBIDDEN: Final[str] = " [](){}<>/%\x00"
_FS_TYPE_RESTRICTED: Final[int] = 0x0002
_FS_TYPE_BITMAP_ONLY: Final[int] = 0x0200
_FS_SELECTION_BOLD: Final[int] = 0x0020
_POST_HEADER_SIZE: Final[int] = 32
NOTDEF: Final[str] = ".notdef"

# Standard Macintosh glyph order shared by ``post`` formats 1.0 and 2.0.
MAC_GLYPH_NAMES: Final[tuple[str, ...]] = (
    ".notdef", ".null", "nonmarkingreturn",
    "space", "exclam", "quotedbl", "numbersign", "dollar", "percent", "ampersand", "quotesingle",
    "parenleft", "parenright", "asterisk", "plus", "comma", "hyphen", "period", "slash",
    "zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "colon", "semicolon", "less", "equal", "greater", "question", "at",
    "A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K", "L", "M",
    "N", "O", "P", "Q", "R", "S", "T", "U", "V", "W", "X", "Y", "Z",
    "bracketleft", "backslash", "bracketright", "asciicircum", "underscore", "grave",
    "a", "b", "c", "d", "e", "f", "g", "h", "i", "j", "k", "l", "m",
    "n", "o", "p", "q", "r", "s", "t", "u", "v", "w", "x", "y", "z",
    "braceleft", "bar", "braceright", "asciitilde",
    "Adieresis", "Aring", "Ccedilla", "Eacute", "Ntilde", "Odieresis", "Udieresis",
    "aacute", "agrave", "acircumflex", "adieresis", "atilde", "aring", "ccedilla",
    "eacute", "egrave", "ecircumflex", "edieresis", "iacute", "igrave", "icircumflex",
    "idieresis", "ntilde", "oacute", "ograve", "ocircumflex", "odieresis", "otilde",
    "uacute", "ugrave", "ucircumflex", "udieresis",
    "dagger", "degree", "cent", "sterling", "section", "bullet", "paragraph", "germandbls",
    "registered", "copyright", "trademark", "acute", "dieresis", "notequal", "AE", "Oslash",
    "infinity", "plusminus", "lessequal", "greaterequal", "yen", "mu", "partialdiff",
    "summation", "product", "pi", "integral", "ordfeminine", "ordmasculine", "Omega", "ae",
    "oslash", "questiondown", "exclamdown", "logicalnot", "radical", "florin", "approxequal",
    "Delta", "guillemotleft", "guillemotright", "ellipsis", "nonbreakingspace", "Agrave",
    "Atilde", "Otilde", "OE", "oe", "endash", "emdash", "quotedblleft", "quotedblright",
    "quoteleft", "quoteright", "divide", "lozenge", "ydieresis", "Ydieresis", "fraction",
    "currency", "guilsinglleft", "guilsinglright", "fi", "fl", "daggerdbl", "periodcentered",
    "quotesinglbase", "quotedblbase", "perthousand", "Acircumflex", "Ecircumflex", "Aacute",
    "Edieresis", "Egrave", "Iacute", "Icircumflex", "Idieresis", "Igrave", "Oacute",
    "Ocircumflex", "apple", "Ograve", "Uacute", "Ucircumflex", "Ugrave", "dotlessi",
    "circumflex", "tilde", "macron", "breve", "dotaccent", "ring", "cedilla", "hungarumlaut",
    "ogonek", "caron", "Lslash", "lslash", "Scaron", "scaron", "Zcaron", "zcaron",
    "brokenbar", "Eth", "eth", "Yacute", "yacute", "Thorn", "thorn", "minus", "multiply",
    "onesuperior", "twosuperior", "threesuperior", "onehalf", "onequarter", "threequarters",
    "franc", "Gbreve", "gbreve", "Idotaccent", "Scedilla", "scedilla", "Cacute", "cacute",
    "Ccaron", "ccaron", "dcroat",
)  # fmt: skip


@dataclass(frozen=True, slots=True)
class TableRecord:
    """Entry of the sfnt table directory."""

    tag: str
    checksum: int
    offset: int
    length: int


@dataclass(frozen=True, slots=True)
class TrueTypeFont:
    """Glyph map and metrics decoded from a set of sfnt tables.

    Attributes:
        postscript_name: PostScript name (``name`` record 6) stripped of forbidden characters.
        units_per_em: Design units per em square.
        bbox: Font bounding box ``(x_min, y_min, x_max, y_max)``.
        number_of_h_metrics: Count of full ``hmtx`` records.
        num_glyphs: Glyph count from ``maxp``.
        widths: Advance width per glyph, padded to ``num_glyphs``.
        embeddable: ``False`` when ``fsType`` forbids embedding.
        bold: ``True`` when ``fsSelection`` flags the face as bold.
        typo_ascender: Typographic ascender.
        typo_descender: Typographic descender.
        cap_height: Capital height, ``0`` before ``OS/2`` version 2.
        italic_angle: Italic angle in degrees, integer part only.
        underline_position: Suggested underline offset.
        underline_thickness: Suggested underline thickness.
        is_fixed_pitch: ``True`` for monospaced faces.
        post_format: ``post`` table version as a float (``2.0``, ``3.0`` ...).
        char_to_glyph: Codepoint to glyph index map, glyph ``0`` excluded.
        glyph_names: Glyph names indexed by glyph id, empty when the ``post`` format has none.
    """

    postscript_name: str
    units_per_em: int
    bbox: tuple[int, int, int, int]
    number_of_h_metrics: int
    num_glyphs: int
    widths: tuple[int, ...]
    embeddable: bool
    bold: bool
    typo_ascender: int
    typo_descender: int
    cap_height: int
    italic_angle: int
    underline_position: int
    underline_thickness: int
    is_fixed_pitch: bool
    post_format: float
    char_to_glyph: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))
    glyph_names: tuple[str, ...] = ()

    @classmethod
    def from_tables(cls, tables: Mapping[str, bytes], *, path: Path | str | None = None) -> TrueTypeFont:
        """Decode the font from raw table payloads keyed by tag.

        Args:
            tables: Table payloads, as found in an sfnt file or reconstructed from WOFF.
            path: Optional file path reported in errors.

        Returns:
            TrueTypeFont: Decoded font description.

        Raises:
            BinaryFormatError: If a required table is missing or malformed.
        """

        missing = [tag for tag in REQUIRED_TABLES if tag not in tables]
        if missing:
            raise BinaryFormatError(f"missing required table(s): {', '.join(missing)}", path=path)

        def reader(tag: str) -> ByteReader:
            return ByteReader(tables[tag], path=path)

        units_per_em, bbox = _parse_head(reader("head"))
        number_of_h_metrics = _parse_hhea(reader("hhea"))
        num_glyphs = _parse_maxp(reader("maxp"))
        widths = _parse_hmtx(reader("hmtx"), number_of_h_metrics, num_glyphs)
        char_to_glyph = _parse_cmap(reader("cmap"))
        postscript_name = _parse_name(reader("name"))
        os2 = _parse_os2(reader("OS/2"))
        post = _parse_post(reader("post"), path=path)
        return cls(
            postscript_name=postscript_name,
            units_per_em=units_per_em,
            bbox=bbox,
            number_of_h_metrics=number_of_h_metrics,
            num_glyphs=num_glyphs,
            widths=widths,
            embeddable=os2.embeddable,
            bold=os2.bold,
            typo_ascender=os2.typo_ascender,
            typo_descender=os2.typo_descender,
            cap_height=os2.cap_height,
            italic_angle=post.italic_angle,
            underline_position=post.underline_position,
            underline_thickness=post.underline_thickness,
            is_fixed_pitch=post.is_fixed_pitch,
            post_format=post.version,
            char_to_glyph=MappingProxyType(char_to_glyph),
            glyph_names=post.glyph_names,
        )

    @property
    def codepoints(self) -> tuple[int, ...]:
        """Return every mapped codepoint in ascending order."""

        return tuple(sorted(self.char_to_glyph))

    def glyph_name(self, glyph_id: int) -> str | None:
        """Return the name of ``glyph_id`` or ``None`` when unnamed."""

        if 0 <= glyph_id < len(self.glyph_names):
            return self.glyph_names[glyph_id] or None
        return None

    def named_codepoints(self) -> list[tuple[int, str]]:
        """Return ``(codepoint, glyph_name)`` pairs for every named, non-``.notdef`` glyph.

        Returns:
            list[tuple[int, str]]: Pairs ordered by codepoint.
        """

        pairs: list[tuple[int, str]] = []
        for codepoint in self.codepoints:
            name = self.glyph_name(self.char_to_glyph[codepoint])
            if name is None or name == NOTDEF:
                continue
            pairs.append((codepoint, name))
        return pairs


@dataclass(frozen=True, slots=True)
class _OS2Metrics:
    embeddable: bool
    bold: bool
    typo_ascender: int
    typo_descender: int
    cap_height: int


@dataclass(frozen=True, slots=True)
class _PostTable:
    version: float
    italic_angle: int
    underline_position: int
    underline_thickness: int
    is_fixed_pitch: bool
    glyph_names: tuple[str, ...]


def read_table_directory(reader: ByteReader) -> tuple[int, dict[str, TableRecord]]:
    """Read the sfnt header and table directory at the current cursor.

    Args:
        reader: Cursor positioned at the start of an sfnt file.

    Returns:
        tuple[int, dict[str, TableRecord]]: The sfnt version and the records keyed by tag.
    """

    version = reader.u32()
    num_tables = reader.u16()
    reader.skip(6)  # searchRange, entrySelector, rangeShift
    records: dict[str, TableRecord] = {}
    for _ in range(num_tables):
        tag = reader.tag()
        records[tag] = TableRecord(tag=tag, checksum=reader.u32(), offset=reader.u32(), length=reader.u32())
    return version, records


def parse_sfnt(data: bytes, *, path: Path | str | None = None) -> TrueTypeFont:
    """Parse a raw TrueType or CFF-flavoured OpenType file.

    Args:
        data: Complete font file.
        path: Optional file path reported in errors.

    Returns:
        TrueTypeFont: Decoded font description.

    Raises:
        BinaryFormatError: If the sfnt version is unknown or a table is malformed.
    """

    reader = ByteReader(data, path=path)
    version, records = read_table_directory(reader)
    if version not in (SFNT_VERSION_TRUETYPE, SFNT_VERSION_CFF):
        raise BinaryFormatError(f"unsupported sfnt version 0x{version:08X}", path=path)
    tables: dict[str, bytes] = {}
    for tag, record in records.items():
        reader.seek(record.offset)
        tables[tag] = reader.read(record.length)
    return TrueTypeFont.from_tables(tables, path=path)


def wrap_glyph_id(glyph_id: int) -> int:
    """Fold ``glyph_id`` back into the 16-bit glyph space after ``idDelta`` arithmetic."""

    if glyph_id >= _GLYPH_SPACE:
        return glyph_id - _GLYPH_SPACE
    if glyph_id < 0:
        return glyph_id + _GLYPH_SPACE
    return glyph_id


def _parse_head(reader: ByteReader) -> tuple[int, tuple[int, int, int, int]]:
    reader.skip(12)  # version, fontRevision, checkSumAdjustment
    magic = reader.u32()
    if magic != HEAD_MAGIC:
        raise BinaryFormatError(f"invalid 'head' magic number 0x{magic:08X}", path=reader.path)
    reader.skip(2)  # flags
    units_per_em = reader.u16()
    reader.skip(16)  # created, modified
    bbox = (reader.i16(), reader.i16(), reader.i16(), reader.i16())
    return units_per_em, bbox


def _parse_hhea(reader: ByteReader) -> int:
    reader.seek(34)
    return reader.u16()


def _parse_maxp(reader: ByteReader) -> int:
    reader.seek(4)
    return reader.u16()


def _parse_hmtx(reader: ByteReader, number_of_h_metrics: int, num_glyphs: int) -> tuple[int, ...]:
    widths: list[int] = []
    for _ in range(number_of_h_metrics):
        widths.append(reader.u16())
        reader.skip(2)  # left side bearing
    last_width = widths[-1] if widths else 0
    widths.extend(last_width for _ in range(num_glyphs - len(widths)))
    return tuple(widths)


def _parse_cmap(reader: ByteReader) -> dict[int, int]:
    """Return the codepoint to glyph map from the preferred Unicode subtable.

    Windows Unicode BMP (platform 3, encoding 1) is preferred, any platform 0 subtable is
    the fallback.

    Raises:
        BinaryFormatError: If no Unicode subtable exists or it is not format 4.
    """

    reader.skip(2)  # version
    num_tables = reader.u16()
    subtables: dict[tuple[int, int], int] = {}
    for _ in range(num_tables):
        platform_id = reader.u16()
        encoding_id = reader.u16()
        subtables.setdefault((platform_id, encoding_id), reader.u32())
    offset = subtables.get((3, 1))
    if offset is None:
        offset = next((value for (platform_id, _), value in sorted(subtables.items()) if platform_id == 0), None)
    if offset is None:
        raise BinaryFormatError("No Unicode encoding found in 'cmap' table", path=reader.path)

    reader.seek(offset)
    subtable_format = reader.u16()
    if subtable_format != 4:
        raise BinaryFormatError(f"unsupported 'cmap' subtable format {subtable_format}", path=reader.path)
    reader.skip(4)  # length, language
    seg_count = reader.u16() // 2
    reader.skip(6)  # searchRange, entrySelector, rangeShift
    end_counts = reader.u16_array(seg_count)
    reader.skip(2)  # reservedPad
    start_counts = reader.u16_array(seg_count)
    id_deltas = reader.i16_array(seg_count)
    range_offsets_start = reader.tell()
    id_range_offsets = reader.u16_array(seg_count)

    char_to_glyph: dict[int, int] = {}
    for index in range(seg_count):
        start, end = start_counts[index], end_counts[index]
        delta, range_offset = id_deltas[index], id_range_offsets[index]
        for codepoint in range(start, end + 1):
            if codepoint == _CMAP_SENTINEL:
                break
            if range_offset == 0:
                glyph_id = wrap_glyph_id(codepoint + delta)
            else:
                address = range_offsets_start + 2 * index + range_offset + 2 * (codepoint - start)
                if address + 2 > len(reader):
                    continue
                reader.seek(address)
                glyph_id = reader.u16()
                if glyph_id > 0:
                    glyph_id = wrap_glyph_id(glyph_id + delta)
            if glyph_id > 0:
                char_to_glyph[codepoint] = glyph_id
    return char_to_glyph


def _parse_name(reader: ByteReader) -> str:
    reader.skip(2)  # format
    count = reader.u16()
    string_offset = reader.u16()
    for _ in range(count):
        platform_id = reader.u16()
        reader.skip(4)  # encodingID, languageID
        name_id = reader.u16()
        length = reader.u16()
        offset = reader.u16()
        if name_id != _NAME_ID_POSTSCRIPT:
            continue
        position = reader.tell()
        reader.seek(string_offset + offset)
        raw = reader.read(length)
        reader.seek(position)
        text = raw.decode("utf-16-be", errors="ignore") if platform_id in (0, 3) else raw.decode("latin-1")
        name = "".join(char for char in text if char not in _POSTSCRIPT_FORBIDDEN)
        if name:
            return name
    raise BinaryFormatError("font has no PostScript name", path=reader.path)


def _parse_os2(reader: ByteReader) -> _OS2Metrics:
    version = reader.u16()
    reader.skip(6)  # xAvgCharWidth, usWeightClass, usWidthClass
    fs_type = reader.u16()
    reader.skip(52)
    fs_selection = reader.u16()
    reader.skip(4)  # usFirstCharIndex, usLastCharIndex
    typo_ascender = reader.i16()
    typo_descender = reader.i16()
    cap_height = 0
    if version >= 2:
        reader.skip(16)
        cap_height = reader.i16()
    return _OS2Metrics(
        embeddable=fs_type != _FS_TYPE_RESTRICTED and not fs_type & _FS_TYPE_BITMAP_ONLY,
        bold=bool(fs_selection & _FS_SELECTION_BOLD),
        typo_ascender=typo_ascender,
        typo_descender=typo_descender,
        cap_height=cap_height,
    )


def _parse_post(reader: ByteReader, *, path: Path | str | None) -> _PostTable:
    raw_version = reader.u32()
    version = raw_version / 65536
    italic_angle = reader.i16()
    reader.skip(2)  # fractional part
    underline_position = reader.i16()
    underline_thickness = reader.i16()
    is_fixed_pitch = reader.u32() != 0

    glyph_names: tuple[str, ...] = ()
    if raw_version == 0x00020000:
        reader.seek(_POST_HEADER_SIZE)
        glyph_names = _post_glyph_names(reader)
    elif raw_version == 0x00010000:
        glyph_names = MAC_GLYPH_NAMES
    else:
        LOGGER.warning("%s: 'post' table format %s carries no glyph names", path or "font", version)
    return _PostTable(
        version=version,
        italic_angle=italic_angle,
        underline_position=underline_position,
        underline_thickness=underline_thickness,
        is_fixed_pitch=is_fixed_pitch,
        glyph_names=glyph_names,
    )


def _post_glyph_names(reader: ByteReader) -> tuple[str, ...]:
    """Walk a format 2.0 ``post`` table and return one name per glyph."""

    num_glyphs = reader.u16()
    indices = reader.u16_array(num_glyphs)
    custom: list[str] = []
    while reader.tell() < len(reader):
        length = reader.u8()
        custom.append(reader.read(length).decode("latin-1"))

    standard_count = len(MAC_GLYPH_NAMES)
    names: list[str] = []
    for index in indices:
        if index < standard_count:
            names.append(MAC_GLYPH_NAMES[index])
        elif index - standard_count < len(custom):
            names.append(custom[index - standard_count])
        else:
            names.append("")
    return tuple(names)


__all__ = [
    "HEAD_MAGIC",
    "MAC_GLYPH_NAMES",
    "NOTDEF",
    "REQUIRED_TABLES",
    "SFNT_VERSION_CFF",
    "SFNT_VERSION_TRUETYPE",
    "TableRecord",
    "TrueTypeFont",
    "parse_sfnt",
    "read_table_directory",
    "wrap_glyph_id",
]
