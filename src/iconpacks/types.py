# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for icon pack discovery."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

GROUP_PLACEHOLDER: Final[str] = "{group}"
ICON_ID_PLACEHOLDER: Final[str] = "{icon_id}"

# Only image files may be exposed through a source expression.
ALLOWED_EXTENSIONS: Final[tuple[str, ...]] = ("svg", "png", "gif")

REMOTE_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})

DEFINITION_SUFFIX: Final[str] = ".icons.yml"
DEFAULT_CACHE_KEY: Final[str] = "iconpacks.catalog"
FULL_ID_SEPARATOR: Final[str] = ":"
DUPLICATE_ID_SEPARATOR: Final[str] = "__"

__all__ = [
    "ALLOWED_EXTENSIONS",
    "DEFAULT_CACHE_KEY",
    "DEFINITION_SUFFIX",
    "DUPLICATE_ID_SEPARATOR",
    "FULL_ID_SEPARATOR",
    "GROUP_PLACEHOLDER",
    "ICON_ID_PLACEHOLDER",
    "JSONPrimitive",
    "JSONValue",
    "REMOTE_SCHEMES",
]
