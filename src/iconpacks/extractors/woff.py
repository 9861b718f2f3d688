# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""WOFF 1.0 container decoding."""

from __future__ import annotations

import zlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final

from ..errors import BinaryFormatError
from .binary import ByteReader
from .truetype import SFNT_VERSION_CFF, SFNT_VERSION_TRUETYPE, TrueTypeFont

WOFF_SIGNATURE: Final[int] = 0x774F4646  # "wOFF"
WOFF_HEADER_SIZE: Final[int] = 44
SUPPORTED_FLAVORS: Final[frozenset[int]] = frozenset({SFNT_VERSION_TRUETYPE, SFNT_VERSION_CFF})


@dataclass(frozen=True, slots=True)
class WoffTableEntry:
    """Entry of the WOFF table directory."""

    tag: str
    offset: int
    comp_length: int
    orig_length: int
    orig_checksum: int

    @property
    def is_compressed(self) -> bool:
        """Return ``True`` when the table payload is zlib-compressed."""

        return self.comp_length != self.orig_length


@dataclass(frozen=True, slots=True)
class WoffFont:
    """Decoded WOFF container.

    Attributes:
        flavor: sfnt version of the wrapped font (TrueType or CFF).
        major_version: Font major version declared by the container.
        minor_version: Font minor version declared by the container.
        total_sfnt_size: Size of the uncompressed font declared by the header.
        tables: Uncompressed table payloads keyed by tag.
        metadata: Decompressed extended metadata block, empty when absent.
        private_data: Private data block, empty when absent.
    """

    flavor: int
    major_version: int
    minor_version: int
    total_sfnt_size: int
    tables: Mapping[str, bytes] = field(default_factory=lambda: MappingProxyType({}))
    metadata: bytes = b""
    private_data: bytes = b""

    @property
    def is_cff(self) -> bool:
        """Return ``True`` for CFF-flavoured fonts."""

        return self.flavor == SFNT_VERSION_CFF

    def to_truetype(self, *, path: Path | str | None = None) -> TrueTypeFont:
        """Decode the wrapped tables as a TrueType font."""

        return TrueTypeFont.from_tables(self.tables, path=path)


def parse_woff(data: bytes, *, path: Path | str | None = None) -> WoffFont:
    """Decode a WOFF container and inflate its tables.

    Args:
        data: Complete WOFF file.
        path: Optional file path reported in errors.

    Returns:
        WoffFont: Container with uncompressed tables.

    Raises:
        BinaryFormatError: If the header is invalid or a table fails to inflate to its
            declared length.
    """

    reader = ByteReader(data, path=path)
    signature = reader.u32()
    if signature != WOFF_SIGNATURE:
        raise BinaryFormatError(f"invalid WOFF signature 0x{signature:08X}", path=path)
    flavor = reader.u32()
    if flavor not in SUPPORTED_FLAVORS:
        raise BinaryFormatError(f"unsupported WOFF flavor 0x{flavor:08X}", path=path)
    length = reader.u32()
    if length != len(data):
        raise BinaryFormatError(f"WOFF header declares {length} bytes, file has {len(data)}", path=path)
    num_tables = reader.u16()
    reserved = reader.u16()
    if reserved != 0:
        raise BinaryFormatError("WOFF reserved header field must be zero", path=path)
    total_sfnt_size = reader.u32()
    major_version = reader.u16()
    minor_version = reader.u16()
    meta_offset = reader.u32()
    meta_length = reader.u32()
    meta_orig_length = reader.u32()
    priv_offset = reader.u32()
    priv_length = reader.u32()

    reader.seek(WOFF_HEADER_SIZE)
    entries = [
        WoffTableEntry(
            tag=reader.tag(),
            offset=reader.u32(),
            comp_length=reader.u32(),
            orig_length=reader.u32(),
            orig_checksum=reader.u32(),
        )
        for _ in range(num_tables)
    ]

    tables: dict[str, bytes] = {}
    for entry in entries:
        reader.seek(entry.offset)
        payload = reader.read(entry.comp_length)
        if entry.comp_length > entry.orig_length:
            raise BinaryFormatError(f"table '{entry.tag}' is larger compressed than uncompressed", path=path)
        if entry.is_compressed:
            payload = _inflate(payload, entry.orig_length, what=f"table '{entry.tag}'", path=path)
        tables[entry.tag] = payload

    metadata = b""
    if meta_length:
        reader.seek(meta_offset)
        metadata = _inflate(reader.read(meta_length), meta_orig_length, what="metadata block", path=path)
    private_data = b""
    if priv_length:
        reader.seek(priv_offset)
        private_data = reader.read(priv_length)

    return WoffFont(
        flavor=flavor,
        major_version=major_version,
        minor_version=minor_version,
        total_sfnt_size=total_sfnt_size,
        tables=MappingProxyType(tables),
        metadata=metadata,
        private_data=private_data,
    )


def _inflate(payload: bytes, expected_length: int, *, what: str, path: Path | str | None) -> bytes:
    try:
        inflated = zlib.decompress(payload)
    except zlib.error as exc:
        raise BinaryFormatError(f"unable to inflate {what}: {exc}", path=path) from exc
    if len(inflated) != expected_length:
        raise BinaryFormatError(
            f"{what} inflated to {len(inflated)} bytes, expected {expected_length}",
            path=path,
        )
    return inflated


__all__ = [
    "WOFF_HEADER_SIZE",
    "WOFF_SIGNATURE",
    "WoffFont",
    "WoffTableEntry",
    "parse_woff",
]
