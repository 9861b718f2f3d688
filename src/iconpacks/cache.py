# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cache port used by the catalog and a process-local implementation."""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar, runtime_checkable

_T = TypeVar("_T")


@runtime_checkable
class CachePort(Protocol[_T]):
    """Storage collaborator holding built catalogs.

    The catalog only ever stores complete values under one key and never updates a
    stored value in place. Locking between processes is the backend's concern.
    """

    def get(self, key: str) -> _T | None:
        """Return the value stored under ``key`` or ``None`` on a miss."""

    def set(self, key: str, value: _T) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    def invalidate(self, key: str) -> None:
        """Forget the value stored under ``key``."""


class InMemoryCache(Generic[_T]):
    """Dictionary backed :class:`CachePort` living as long as the process."""

    def __init__(self) -> None:
        self._values: dict[str, _T] = {}

    def get(self, key: str) -> _T | None:
        return self._values.get(key)

    def set(self, key: str, value: _T) -> None:
        self._values[key] = value

    def invalidate(self, key: str) -> None:
        self._values.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._values


__all__ = ["CachePort", "InMemoryCache"]
