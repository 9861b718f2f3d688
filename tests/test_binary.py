# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the big-endian byte reader."""

from __future__ import annotations

import struct

import pytest

from iconpacks.errors import BinaryFormatError
from iconpacks.extractors.binary import ByteReader


def test_typed_reads_are_big_endian() -> None:
    data = struct.pack(">BHhIi4s", 7, 0x1234, -2, 0xDEADBEEF, -5, b"cmap")
    reader = ByteReader(data)

    assert reader.u8() == 7
    assert reader.u16() == 0x1234
    assert reader.i16() == -2
    assert reader.u32() == 0xDEADBEEF
    assert reader.i32() == -5
    assert reader.tag() == "cmap"
    assert reader.tell() == len(data)


def test_arrays_and_seek() -> None:
    reader = ByteReader(struct.pack(">3H2h", 1, 2, 3, -1, 4))

    assert reader.u16_array(3) == (1, 2, 3)
    assert reader.i16_array(2) == (-1, 4)
    reader.seek(2)
    assert reader.u16() == 2
    reader.skip(2)
    assert reader.tell() == 6


def test_out_of_bounds_access_raises_with_path() -> None:
    reader = ByteReader(b"\x00\x01", path="icons.ttf")

    with pytest.raises(BinaryFormatError, match="icons.ttf: unexpected end of data"):
        reader.u32()
    with pytest.raises(BinaryFormatError, match="outside of 2 bytes"):
        reader.seek(3)
    with pytest.raises(BinaryFormatError):
        reader.skip(-1)
    assert reader.tell() == 0
    assert len(reader) == 2
