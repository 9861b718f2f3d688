# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading pack definition documents and schemas."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import cast

import yaml

from .errors import IconPackConfigError
from .types import JSONValue


def load_schema(path: Path) -> Mapping[str, JSONValue]:
    """Load a JSON schema from disk and ensure it is a JSON object.

    Args:
        path: Filesystem path to the schema file.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON schema mapping.

    Raises:
        FileNotFoundError: If the schema file does not exist.
        IconPackConfigError: If the schema cannot be parsed or is not a JSON object.
    """
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as stream:
        try:
            payload = cast(JSONValue, json.load(stream))
        except json.JSONDecodeError as exc:
            raise IconPackConfigError(f"{path}: failed to parse JSON schema: {exc.msg}") from exc
    return _ensure_json_object(payload, context=str(path))


def load_document(path: Path) -> Mapping[str, JSONValue]:
    """Load a YAML pack definition document.

    An empty document yields an empty mapping.

    Args:
        path: Filesystem path to the ``*.icons.yml`` document.

    Returns:
        Mapping[str, JSONValue]: Pack entries keyed by pack id.

    Raises:
        FileNotFoundError: If the document is missing.
        IconPackConfigError: If the document is not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as stream:
        try:
            payload = yaml.safe_load(stream)
        except UnicodeDecodeError as exc:
            raise IconPackConfigError(f"{path}: not valid UTF-8: {exc}") from exc
        except yaml.YAMLError as exc:
            raise IconPackConfigError(f"{path}: failed to parse YAML: {exc}") from exc
    if payload is None:
        return {}
    return _ensure_json_object(cast(JSONValue, payload), context=str(path))


__all__ = ["load_document", "load_schema"]


def _ensure_json_object(value: JSONValue, *, context: str) -> Mapping[str, JSONValue]:
    """Ensure ``value`` is a JSON object, raising on type mismatch.

    Args:
        value: Parsed payload to validate.
        context: Human-readable context string used in error messages.

    Returns:
        Mapping[str, JSONValue]: Validated object.

    Raises:
        IconPackConfigError: If ``value`` is not a mapping.
    """

    mapping = _ensure_json_value(value, context=context)
    if not isinstance(mapping, Mapping):
        raise IconPackConfigError(f"{context}: expected a mapping at the top level")
    return mapping


def _ensure_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Ensure ``value`` is composed of JSON-compatible structures.

    YAML keys that are not strings (``1:``, ``true:``) are converted to strings, since
    pack ids and setting names are always compared as text.

    Args:
        value: Parsed payload to validate recursively.
        context: Human-readable context string used in error messages.

    Returns:
        JSONValue: Validated JSON value.

    Raises:
        IconPackConfigError: If ``value`` contains unsupported constructs such as dates.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _ensure_json_value(item, context=f"{context}.{key}") for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_ensure_json_value(item, context=f"{context}[]") for item in value]
    raise IconPackConfigError(f"{context}: value is not valid JSON")
