# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem scanning utilities locating pack definition documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .model_pack import PackProvider
from .types import DEFINITION_SUFFIX

_SKIPPED_DIRECTORIES: Final[frozenset[str]] = frozenset({".git", ".hg", ".svn", "node_modules", "__pycache__"})


@dataclass(slots=True)
class DefinitionScanner:
    """Scan an application root for ``<provider>.icons.yml`` documents."""

    root_path: Path

    def definition_documents(self) -> tuple[Path, ...]:
        """Return sorted definition document paths.

        Returns:
            tuple[Path, ...]: Definition files found below ``root_path``.
        """
        paths: list[Path] = []
        for path in self.root_path.rglob(f"*{DEFINITION_SUFFIX}"):
            relative_parts = path.relative_to(self.root_path).parts[:-1]
            if any(part in _SKIPPED_DIRECTORIES or part.startswith(".") for part in relative_parts):
                continue
            if path.is_file():
                paths.append(path)
        return tuple(sorted(paths))

    def providers(self) -> tuple[PackProvider, ...]:
        """Return one provider per definition document.

        Returns:
            tuple[PackProvider, ...]: Providers named after their definition file.
        """
        providers: list[PackProvider] = []
        for path in self.definition_documents():
            relative = path.parent.relative_to(self.root_path).as_posix()
            providers.append(
                PackProvider(
                    name=path.name[: -len(DEFINITION_SUFFIX)],
                    relative_path="" if relative == "." else relative,
                ),
            )
        return tuple(providers)


__all__ = ["DefinitionScanner"]
