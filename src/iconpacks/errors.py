# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while discovering icon packs."""

from __future__ import annotations

from pathlib import Path


class IconPackError(RuntimeError):
    """Base class for fatal icon pack discovery failures."""


class IconPackConfigError(IconPackError):
    """Raised when a pack definition is missing or carries invalid configuration."""


class CatalogValidationError(IconPackConfigError):
    """Raised when a pack definition fails structural schema validation."""


class IconDefinitionError(IconPackError, ValueError):
    """Raised when an icon entry is constructed from incomplete identity data."""


class BinaryFormatError(IconPackError):
    """Raised when a font file violates the binary layout expected by the parser."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        """Create the error, prefixing ``message`` with ``path`` when known.

        Args:
            message: Description of the layout violation.
            path: Optional font file the violation was found in.
        """

        self.path = path
        super().__init__(f"{path}: {message}" if path is not None else message)


__all__ = (
    "BinaryFormatError",
    "CatalogValidationError",
    "IconDefinitionError",
    "IconPackConfigError",
    "IconPackError",
)
