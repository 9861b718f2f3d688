# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Checksum utilities for pack definition documents."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from pathlib import Path


def compute_definitions_checksum(root_path: Path, paths: Sequence[Path]) -> str:
    """Calculate a checksum over the provided definition documents.

    Missing documents contribute their name only, so deleting a file changes the result.

    Args:
        root_path: Application root anchoring the relative names.
        paths: Definition documents contributing to the checksum.

    Returns:
        str: Hex-encoded SHA-256 checksum.
    """
    hasher = hashlib.sha256()
    for path in sorted(paths):
        try:
            name = path.relative_to(root_path).as_posix()
        except ValueError:
            name = path.as_posix()
        hasher.update(name.encode("utf-8"))
        hasher.update(b"\0")
        if path.is_file():
            hasher.update(path.read_bytes())
        hasher.update(b"\0")
    return hasher.hexdigest()


__all__ = ["compute_definitions_checksum"]
