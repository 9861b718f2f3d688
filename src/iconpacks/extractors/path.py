# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Extractor exposing every matched file as an icon without reading it."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..model_icon import IconEntry
from ..model_pack import PackDefinition
from ..resolver import FileRef
from .base import FinderExtractor


class PathExtractor(FinderExtractor):
    """Reference local or remote image files by path."""

    extractor_id = "path"
    label = "Local or remote files"
    description = "Handle icons referenced by their file path or URL."

    def entries_from_files(self, pack: PackDefinition, files: Mapping[str, FileRef]) -> Iterable[IconEntry]:
        for icon_id, ref in files.items():
            yield self.create_icon(pack, icon_id, source=ref.source, group=ref.group)


__all__ = ["PathExtractor"]
