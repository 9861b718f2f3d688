# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Pattern resolver expanding source expressions into concrete file references.

A source expression is either an absolute ``http(s)`` URL or a path such as
``icons/{group}/prefix-{icon_id}.svg``. Paths starting with ``/`` resolve against the
application root, other paths against the directory of the pack definition.

``{group}`` must occupy a whole directory segment and becomes a single-segment
wildcard; its matched value is the directory name at the same position. ``{icon_id}``
may only appear in the filename and is extracted through the literal text around it.
Directories are never walked recursively: each matching directory is listed at depth
zero, deeper layouts need explicit wildcard segments.
"""

from __future__ import annotations

import logging
import re
import urllib.request
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Final
from urllib.parse import urlsplit

from .types import (
    ALLOWED_EXTENSIONS,
    DUPLICATE_ID_SEPARATOR,
    GROUP_PLACEHOLDER,
    ICON_ID_PLACEHOLDER,
    REMOTE_SCHEMES,
)
from .utils import normalize_icon_id

LOGGER = logging.getLogger(__name__)

_GLOB_CHARS: Final[tuple[str, ...]] = ("*", "?", "[")
_FETCH_TIMEOUT_SECONDS: Final[float] = 10.0

RemoteFetcher = Callable[[str], bytes]


class InvalidSourceError(ValueError):
    """Raised when a source expression cannot be turned into a filesystem query."""


@dataclass(frozen=True, slots=True)
class FileRef:
    """Concrete file (or URL) matched by a source expression.

    Attributes:
        icon_id: Identifier derived from the filename.
        source: Root-relative web path for local files, the URL for remote sources.
        absolute_path: Location on disk, ``None`` for remote sources.
        group: Directory name captured by ``{group}``, if any.
    """

    icon_id: str
    source: str
    absolute_path: Path | None = None
    group: str | None = None

    @property
    def is_remote(self) -> bool:
        """Return ``True`` when the reference points at a URL."""

        return self.absolute_path is None


@dataclass(frozen=True, slots=True)
class SourcePattern:
    """Parsed form of a local source expression."""

    expression: str
    root_relative: bool
    directory_parts: tuple[str, ...]
    stem: str
    extensions: tuple[str, ...]

    @classmethod
    def parse(cls, expression: str) -> SourcePattern:
        """Parse ``expression`` into its directory, filename stem and extension parts.

        Args:
            expression: Local source expression.

        Returns:
            SourcePattern: Parsed pattern.

        Raises:
            InvalidSourceError: If placeholders are misplaced or no allowed extension remains.
        """

        root_relative = expression.startswith("/")
        segments = [segment for segment in expression.strip("/").split("/") if segment not in ("", ".")]
        if not segments:
            raise InvalidSourceError("empty source expression")
        *directory_parts, filename = segments
        for part in directory_parts:
            if ICON_ID_PLACEHOLDER in part:
                raise InvalidSourceError(f"'{ICON_ID_PLACEHOLDER}' is only allowed in the filename")
            if GROUP_PLACEHOLDER in part and part != GROUP_PLACEHOLDER:
                raise InvalidSourceError(f"'{GROUP_PLACEHOLDER}' must be a whole path segment")
            if "**" in part:
                raise InvalidSourceError("recursive '**' wildcards are not supported")
        if directory_parts.count(GROUP_PLACEHOLDER) > 1:
            raise InvalidSourceError(f"'{GROUP_PLACEHOLDER}' may only appear once")
        if GROUP_PLACEHOLDER in filename:
            raise InvalidSourceError(f"'{GROUP_PLACEHOLDER}' is not allowed in the filename")
        if filename.count(ICON_ID_PLACEHOLDER) > 1:
            raise InvalidSourceError(f"'{ICON_ID_PLACEHOLDER}' may only appear once")

        stem, extension = _split_extension(filename)
        return cls(
            expression=expression,
            root_relative=root_relative,
            directory_parts=tuple(directory_parts),
            stem=stem,
            extensions=_allowed_extensions(extension),
        )

    @property
    def has_group(self) -> bool:
        """Return ``True`` when the expression captures a group."""

        return GROUP_PLACEHOLDER in self.directory_parts

    @property
    def group_position(self) -> int | None:
        """Return the directory index of ``{group}``, counted from the scan base."""

        if not self.has_group:
            return None
        return self.directory_parts.index(GROUP_PLACEHOLDER)

    @property
    def has_icon_id(self) -> bool:
        """Return ``True`` when the filename carries ``{icon_id}``."""

        return ICON_ID_PLACEHOLDER in self.stem

    @property
    def directory_glob(self) -> str:
        """Return the directory part as a glob, ``{group}`` replaced by ``*``."""

        return "/".join("*" if part == GROUP_PLACEHOLDER else part for part in self.directory_parts)

    def filename_regex(self) -> re.Pattern[str]:
        """Return the regex matched against candidate filenames."""

        stem = _glob_to_regex(self.stem.replace(ICON_ID_PLACEHOLDER, "*"))
        extensions = "|".join(re.escape(extension) for extension in self.extensions)
        return re.compile(rf"{stem}\.(?i:{extensions})")

    def icon_id_regex(self) -> re.Pattern[str] | None:
        """Return the anchored regex capturing ``icon_id`` from a filename stem."""

        if not self.has_icon_id:
            return None
        prefix, _, suffix = self.stem.partition(ICON_ID_PLACEHOLDER)
        return re.compile(rf"{_glob_to_regex(prefix)}(?P<icon_id>.+){_glob_to_regex(suffix)}")


class PatternResolver:
    """Resolve source expressions into :class:`FileRef` objects keyed by icon id."""

    def __init__(self, *, fetcher: RemoteFetcher | None = None, logger: logging.Logger | None = None) -> None:
        """Initialise the resolver.

        Args:
            fetcher: Callable downloading remote sources, defaults to ``urllib``.
            logger: Logger receiving parse warnings, defaults to the module logger.
        """

        self._fetcher = fetcher or _fetch_url
        self._logger = logger or LOGGER

    def resolve(
        self,
        sources: Sequence[str],
        pack_relative_path: str,
        root_path: Path,
        *,
        normalize_ids: bool = False,
        context: str = "",
    ) -> dict[str, FileRef]:
        """Resolve every expression of ``sources`` and merge the results.

        When two expressions yield the same icon id the first occurrence wins.

        Args:
            sources: Source expressions in declaration order.
            pack_relative_path: Pack directory relative to ``root_path``.
            root_path: Application root.
            normalize_ids: Lower-case and sanitise derived ids.
            context: Label prefixed to log messages, usually the pack id.

        Returns:
            dict[str, FileRef]: File references keyed by icon id, in discovery order.
        """

        result: dict[str, FileRef] = {}
        for source in sources:
            for icon_id, ref in self.resolve_source(
                source,
                pack_relative_path,
                root_path,
                normalize_ids=normalize_ids,
                context=context,
            ).items():
                if icon_id in result:
                    self._logger.debug("%s: icon '%s' from '%s' ignored, already provided", context, icon_id, source)
                    continue
                result[icon_id] = ref
        return result

    def resolve_source(
        self,
        source: str,
        pack_relative_path: str,
        root_path: Path,
        *,
        normalize_ids: bool = False,
        context: str = "",
    ) -> dict[str, FileRef]:
        """Resolve a single source expression.

        Invalid expressions, unknown URL schemes and unreadable directories produce an
        empty result and a warning, never an exception.

        Args:
            source: Source expression or URL.
            pack_relative_path: Pack directory relative to ``root_path``.
            root_path: Application root.
            normalize_ids: Lower-case and sanitise derived ids.
            context: Label prefixed to log messages.

        Returns:
            dict[str, FileRef]: File references keyed by icon id.
        """

        parts = urlsplit(source)
        if parts.scheme and parts.netloc:
            if parts.scheme.lower() not in REMOTE_SCHEMES:
                self._logger.warning("%s: unsupported scheme '%s' in source '%s'", context, parts.scheme, source)
                return {}
            return self._resolve_url(source, normalize_ids=normalize_ids, context=context)

        try:
            pattern = SourcePattern.parse(source)
        except InvalidSourceError as exc:
            self._logger.warning("%s: invalid source '%s': %s", context, source, exc)
            return {}
        base = root_path if pattern.root_relative else root_path / pack_relative_path.strip("/")
        return self._resolve_pattern(pattern, base, root_path, normalize_ids=normalize_ids, context=context)

    def read_contents(self, ref: FileRef) -> bytes | None:
        """Return the raw bytes behind ``ref`` or ``None`` when unreadable.

        Args:
            ref: Reference produced by :meth:`resolve`.

        Returns:
            bytes | None: File or URL payload.
        """

        if ref.absolute_path is None:
            try:
                return self._fetcher(ref.source)
            except OSError as exc:
                self._logger.warning("unable to fetch '%s': %s", ref.source, exc)
                return None
        try:
            return ref.absolute_path.read_bytes()
        except OSError as exc:
            self._logger.warning("unable to read '%s': %s", ref.absolute_path, exc)
            return None

    def _resolve_url(self, source: str, *, normalize_ids: bool, context: str) -> dict[str, FileRef]:
        name = PurePosixPath(urlsplit(source).path).name
        icon_id = _split_extension(name)[0]
        if normalize_ids:
            icon_id = normalize_icon_id(icon_id)
        if not icon_id:
            self._logger.warning("%s: no filename in source url '%s'", context, source)
            return {}
        return {icon_id: FileRef(icon_id=icon_id, source=source)}

    def _resolve_pattern(
        self,
        pattern: SourcePattern,
        base: Path,
        root_path: Path,
        *,
        normalize_ids: bool,
        context: str,
    ) -> dict[str, FileRef]:
        filename_regex = pattern.filename_regex()
        icon_id_regex = pattern.icon_id_regex()
        group_position = pattern.group_position

        result: dict[str, FileRef] = {}
        seen: dict[str, int] = {}
        for path in self._matching_files(pattern, base, filename_regex, context=context):
            stem = _split_extension(path.name)[0]
            icon_id = stem
            if icon_id_regex is not None:
                match = icon_id_regex.fullmatch(stem)
                if match is not None:
                    icon_id = match.group("icon_id")
            if normalize_ids:
                icon_id = normalize_icon_id(icon_id)

            if icon_id in result:
                base_id = icon_id
                while icon_id in result:
                    seen[base_id] = seen.get(base_id, 0) + 1
                    icon_id = f"{base_id}{DUPLICATE_ID_SEPARATOR}{seen[base_id]}"

            group = None
            if group_position is not None:
                directory_parts = path.parent.relative_to(base).parts
                group = directory_parts[group_position] if group_position < len(directory_parts) else None

            result[icon_id] = FileRef(
                icon_id=icon_id,
                source=_web_path(path, root_path),
                absolute_path=path,
                group=group,
            )
        return result

    def _matching_files(
        self,
        pattern: SourcePattern,
        base: Path,
        filename_regex: re.Pattern[str],
        *,
        context: str,
    ) -> list[Path]:
        files: list[Path] = []
        for directory in self._directories(pattern, base, context=context):
            try:
                entries = list(directory.iterdir())
            except OSError as exc:
                self._logger.warning("%s: unable to list '%s': %s", context, directory, exc)
                continue
            files.extend(entry for entry in entries if filename_regex.fullmatch(entry.name) and entry.is_file())
        return sorted(files, key=lambda path: _sort_key(path, pattern.extensions))

    def _directories(self, pattern: SourcePattern, base: Path, *, context: str) -> Iterable[Path]:
        directory_glob = pattern.directory_glob
        if not directory_glob:
            candidates = [base]
        elif not any(char in directory_glob for char in _GLOB_CHARS):
            candidates = [base / directory_glob]
        else:
            try:
                candidates = sorted(base.glob(directory_glob))
            except (OSError, ValueError) as exc:
                self._logger.warning("%s: invalid pattern '%s': %s", context, pattern.expression, exc)
                return []
        directories = [candidate for candidate in candidates if candidate.is_dir()]
        if not directories:
            self._logger.warning("%s: no directory matches source '%s' under '%s'", context, pattern.expression, base)
        return directories


def _split_extension(filename: str) -> tuple[str, str | None]:
    """Split ``filename`` into stem and extension, ``None`` when there is no extension."""

    stem, dot, extension = filename.rpartition(".")
    if not dot or not stem:
        return filename, None
    return stem, extension


def _allowed_extensions(extension: str | None) -> tuple[str, ...]:
    """Return the allow-listed extensions selected by ``extension``.

    Args:
        extension: Raw extension from the expression, possibly a glob or brace list.

    Returns:
        tuple[str, ...]: Allowed extensions in allow-list order.

    Raises:
        InvalidSourceError: If no allow-listed extension is selected.
    """

    if extension is None:
        return ALLOWED_EXTENSIONS
    if extension.startswith("{") and extension.endswith("}"):
        alternatives = [item.strip().lower() for item in extension[1:-1].split(",") if item.strip()]
    else:
        alternatives = [extension.lower()]
    selected = tuple(
        allowed for allowed in ALLOWED_EXTENSIONS if any(fnmatchcase(allowed, item) for item in alternatives)
    )
    if not selected:
        raise InvalidSourceError(
            f"extension '{extension}' is not allowed, expected one of: {', '.join(ALLOWED_EXTENSIONS)}",
        )
    return selected


def _glob_to_regex(text: str) -> str:
    """Translate ``*`` and ``?`` wildcards of a filename fragment into a regex."""

    parts: list[str] = []
    for char in text:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


def _sort_key(path: Path, extensions: Sequence[str]) -> tuple[str, str, int]:
    """Order files by directory, stem, then extension allow-list position."""

    stem, extension = _split_extension(path.name)
    extension = extension.lower() if extension else extension
    rank = extensions.index(extension) if extension in extensions else len(extensions)
    return str(path.parent), stem, rank


def _web_path(path: Path, root_path: Path) -> str:
    """Return ``path`` as a ``/``-prefixed POSIX path relative to ``root_path``."""

    try:
        return "/" + path.relative_to(root_path).as_posix()
    except ValueError:
        return path.as_posix()


def _fetch_url(url: str) -> bytes:
    """Download ``url`` and return the response body."""

    request = urllib.request.Request(url, headers={"User-Agent": "iconpacks/0.1"})
    with urllib.request.urlopen(request, timeout=_FETCH_TIMEOUT_SECONDS) as response:
        payload: bytes = response.read()
    return payload


__all__ = [
    "FileRef",
    "InvalidSourceError",
    "PatternResolver",
    "RemoteFetcher",
    "SourcePattern",
]
