# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for validating pack definition payloads and normalising icon identifiers."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Final

from .errors import IconPackConfigError
from .types import JSONValue

_LABEL_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"[-_.]")
_UNSAFE_ID_CHARS: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9_-]+")


def optional_string(value: JSONValue | None, *, key: str, context: str) -> str | None:
    """Return ``value`` as an optional string with validation.

    Args:
        value: Raw value extracted from the pack definition.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        str | None: ``value`` when present, otherwise ``None``.

    Raises:
        IconPackConfigError: If ``value`` is present but not a string.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise IconPackConfigError(f"{context}: expected '{key}' to be a string if present")
    return value


def optional_bool(
    value: JSONValue | None,
    *,
    key: str,
    context: str,
    default: bool | None = None,
) -> bool:
    """Return ``value`` coerced to ``bool`` with an optional default.

    Args:
        value: Raw value extracted from the pack definition.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.
        default: Value returned when ``value`` is ``None``.

    Returns:
        bool: Boolean value derived from ``value`` or ``default``.

    Raises:
        IconPackConfigError: If ``value`` is not a bool, or is missing without a default.
    """
    if value is None:
        if default is None:
            raise IconPackConfigError(f"{context}: expected '{key}' to be a boolean")
        return default
    if isinstance(value, bool):
        return value
    raise IconPackConfigError(f"{context}: expected '{key}' to be a boolean")


def optional_int(value: JSONValue | None, *, key: str, context: str) -> int | None:
    """Return ``value`` as an optional non-negative integer.

    Numeric strings are accepted because YAML authors frequently quote them.

    Args:
        value: Raw value extracted from the pack definition.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        int | None: Integer value or ``None`` when absent.

    Raises:
        IconPackConfigError: If ``value`` is present but not a non-negative integer.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise IconPackConfigError(f"{context}: expected '{key}' to be an integer")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str) and value.strip().isdigit():
        result = int(value.strip())
    else:
        raise IconPackConfigError(f"{context}: expected '{key}' to be an integer")
    if result < 0:
        raise IconPackConfigError(f"{context}: expected '{key}' to be zero or greater")
    return result


def string_array(value: JSONValue | None, *, key: str, context: str) -> tuple[str, ...]:
    """Return ``value`` as a tuple of strings with validation.

    Args:
        value: Raw value extracted from the pack definition.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        tuple[str, ...]: Tuple containing all string entries from ``value``.

    Raises:
        IconPackConfigError: If ``value`` is not a sequence of strings.
    """
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise IconPackConfigError(f"{context}: expected '{key}' to be an array of strings")
    result: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise IconPackConfigError(f"{context}: expected '{key}[{index}]' to be a string")
        result.append(item)
    return tuple(result)


def expect_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping or raise a configuration error.

    Args:
        value: Raw value extracted from the pack definition.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        Mapping[str, JSONValue]: Mapping derived from ``value``.

    Raises:
        IconPackConfigError: If ``value`` is not a mapping.
    """
    if not isinstance(value, Mapping):
        raise IconPackConfigError(f"{context}: expected '{key}' to be an object")
    return value


def freeze_json_mapping(value: Mapping[str, JSONValue], *, context: str) -> Mapping[str, JSONValue]:
    """Return an immutable mapping with recursively frozen values.

    Args:
        value: Mapping to freeze.
        context: Human-friendly prefix describing the validation context.

    Returns:
        Mapping[str, JSONValue]: Mapping proxy with recursively frozen entries.

    Raises:
        IconPackConfigError: If any key is not a string.
    """
    frozen: dict[str, JSONValue] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise IconPackConfigError(f"{context}: expected keys to be strings")
        frozen[key] = freeze_json_value(item, context=f"{context}.{key}")
    return MappingProxyType(frozen)


def freeze_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Return a recursively frozen view of ``value``.

    Args:
        value: JSON-compatible value to normalise.
        context: Human-friendly prefix describing the validation context.

    Returns:
        JSONValue: Frozen value (mappings become mapping proxies, sequences tuples).

    Raises:
        IconPackConfigError: If ``value`` is not JSON compatible.
    """
    if isinstance(value, Mapping):
        return freeze_json_mapping(value, context=context)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return tuple(freeze_json_value(item, context=context) for item in value)
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    raise IconPackConfigError(f"{context}: unsupported value type {type(value).__name__}")


def thaw_json_value(value: JSONValue) -> JSONValue:
    """Return a plain JSON-compatible representation of ``value``.

    Args:
        value: Frozen value that may contain mapping proxies or tuples.

    Returns:
        JSONValue: Value composed of built-in ``dict`` and ``list`` containers.
    """

    if isinstance(value, Mapping):
        return {str(key): thaw_json_value(item) for key, item in value.items()}
    if isinstance(value, (tuple, list)):
        return [thaw_json_value(item) for item in value]
    return value


def humanize_label(icon_id: str) -> str:
    """Return a display label for ``icon_id``.

    Separators (``-``, ``_``, ``.``) become spaces and the first character is upper-cased.

    Args:
        icon_id: Icon identifier to humanise.

    Returns:
        str: Human readable label.
    """

    label = _LABEL_SEPARATORS.sub(" ", icon_id)
    return label[:1].upper() + label[1:]


def normalize_icon_id(name: str) -> str:
    """Return ``name`` lower-cased with unsafe character runs replaced by ``_``.

    Args:
        name: Raw file or symbol name.

    Returns:
        str: Identifier restricted to ``[a-z0-9_-]``.
    """

    return _UNSAFE_ID_CHARS.sub("_", name.lower())


__all__ = [
    "expect_mapping",
    "freeze_json_mapping",
    "freeze_json_value",
    "humanize_label",
    "normalize_icon_id",
    "optional_bool",
    "optional_int",
    "optional_string",
    "string_array",
    "thaw_json_value",
]
