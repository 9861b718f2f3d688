# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Big-endian cursor over an in-memory byte buffer used by the font parsers."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Final

from ..errors import BinaryFormatError

_U16: Final[struct.Struct] = struct.Struct(">H")
_I16: Final[struct.Struct] = struct.Struct(">h")
_U32: Final[struct.Struct] = struct.Struct(">I")
_I32: Final[struct.Struct] = struct.Struct(">i")


class ByteReader:
    """Sequential reader exposing typed big-endian reads and explicit seeks.

    Every read past the end of the buffer raises :class:`BinaryFormatError`, so the
    parsers never observe short reads.
    """

    __slots__ = ("_data", "_position", "path")

    def __init__(self, data: bytes, *, path: Path | str | None = None) -> None:
        """Wrap ``data`` positioned at offset zero.

        Args:
            data: Complete file or table payload.
            path: Optional source path reported in errors.
        """

        self._data = data
        self._position = 0
        self.path = path

    def __len__(self) -> int:
        return len(self._data)

    def tell(self) -> int:
        """Return the current offset."""

        return self._position

    def seek(self, offset: int) -> None:
        """Move the cursor to the absolute ``offset``.

        Raises:
            BinaryFormatError: If ``offset`` lies outside the buffer.
        """

        if offset < 0 or offset > len(self._data):
            raise BinaryFormatError(f"seek to offset {offset} outside of {len(self._data)} bytes", path=self.path)
        self._position = offset

    def skip(self, count: int) -> None:
        """Advance the cursor by ``count`` bytes."""

        self.seek(self._position + count)

    def read(self, count: int) -> bytes:
        """Return the next ``count`` bytes.

        Raises:
            BinaryFormatError: If fewer than ``count`` bytes remain.
        """

        end = self._position + count
        if count < 0 or end > len(self._data):
            raise BinaryFormatError(
                f"unexpected end of data reading {count} bytes at offset {self._position}",
                path=self.path,
            )
        chunk = self._data[self._position : end]
        self._position = end
        return chunk

    def u8(self) -> int:
        """Read an unsigned byte."""

        return self.read(1)[0]

    def u16(self) -> int:
        """Read an unsigned 16-bit integer."""

        return int(_U16.unpack(self.read(2))[0])

    def i16(self) -> int:
        """Read a signed 16-bit integer."""

        return int(_I16.unpack(self.read(2))[0])

    def u32(self) -> int:
        """Read an unsigned 32-bit integer."""

        return int(_U32.unpack(self.read(4))[0])

    def i32(self) -> int:
        """Read a signed 32-bit integer."""

        return int(_I32.unpack(self.read(4))[0])

    def tag(self) -> str:
        """Read a four-character table tag."""

        return self.read(4).decode("latin-1")

    def u16_array(self, count: int) -> tuple[int, ...]:
        """Read ``count`` consecutive unsigned 16-bit integers."""

        return struct.unpack(f">{count}H", self.read(2 * count))

    def i16_array(self, count: int) -> tuple[int, ...]:
        """Read ``count`` consecutive signed 16-bit integers."""

        return struct.unpack(f">{count}h", self.read(2 * count))


__all__ = ["ByteReader"]
