# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Built-in icon extractors."""

from __future__ import annotations

from .base import ExtractorServices, FinderExtractor, IconExtractor
from .font import FontExtractor
from .path import PathExtractor
from .svg import SvgExtractor, SvgSpriteExtractor

BUILTIN_EXTRACTORS: tuple[type[IconExtractor], ...] = (
    PathExtractor,
    SvgExtractor,
    SvgSpriteExtractor,
    FontExtractor,
)

__all__ = [
    "BUILTIN_EXTRACTORS",
    "ExtractorServices",
    "FinderExtractor",
    "FontExtractor",
    "IconExtractor",
    "PathExtractor",
    "SvgExtractor",
    "SvgSpriteExtractor",
]
