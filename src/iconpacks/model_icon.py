# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Icon entry value object produced by extractors and stored in the catalog."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import IconDefinitionError
from .types import FULL_ID_SEPARATOR
from .utils import humanize_label


def build_full_id(pack_id: str, icon_id: str) -> str:
    """Return the catalog key for ``icon_id`` inside ``pack_id``."""

    return f"{pack_id}{FULL_ID_SEPARATOR}{icon_id}"


def split_full_id(full_id: str) -> tuple[str, str]:
    """Split ``full_id`` on its first separator into ``(pack_id, icon_id)``.

    Args:
        full_id: Catalog key such as ``"my_pack:home"``.

    Returns:
        tuple[str, str]: Pack identifier and icon identifier.

    Raises:
        ValueError: If ``full_id`` lacks a separator or either side is empty.
    """

    pack_id, separator, icon_id = full_id.partition(FULL_ID_SEPARATOR)
    if not separator or not pack_id or not icon_id:
        raise ValueError(f"'{full_id}' is not a valid icon id, expected 'pack_id{FULL_ID_SEPARATOR}icon_id'")
    return pack_id, icon_id


@dataclass(frozen=True, slots=True)
class IconEntry:
    """Immutable description of one icon available in the catalog.

    Attributes:
        pack_id: Identifier of the owning pack.
        icon_id: Identifier of the icon inside its pack.
        source: Resolved path or URL used to fetch the asset, when file based.
        group: Optional group extracted through the ``{group}`` placeholder.
        content: Optional inline payload such as SVG markup or a codepoint.
        label: Display label, derived from ``icon_id`` when not provided.
        pack_label: Label of the owning pack.
        template: Render template forwarded from the pack definition.
        library: Asset library forwarded from the pack definition.
        extractor_id: Identifier of the extractor that produced the entry.
    """

    pack_id: str
    icon_id: str
    source: str | None = None
    group: str | None = None
    content: str | None = None
    label: str = ""
    pack_label: str = ""
    template: str | None = None
    library: str | None = None
    extractor_id: str | None = None

    def __post_init__(self) -> None:
        """Reject empty identities and derive the default label."""

        if not self.icon_id:
            raise IconDefinitionError(f"Empty icon_id provided for icon pack '{self.pack_id}'.")
        if not self.pack_id:
            raise IconDefinitionError(f"Empty pack_id provided for icon '{self.icon_id}'.")
        if not self.label:
            object.__setattr__(self, "label", humanize_label(self.icon_id))

    @property
    def full_id(self) -> str:
        """Return the ``pack_id:icon_id`` catalog key."""

        return build_full_id(self.pack_id, self.icon_id)

    def to_dict(self) -> dict[str, str | None]:
        """Return a JSON-serialisable representation of the entry.

        Returns:
            dict[str, str | None]: Mapping of attribute names to values, including ``full_id``.
        """

        return {
            "full_id": self.full_id,
            "pack_id": self.pack_id,
            "icon_id": self.icon_id,
            "label": self.label,
            "pack_label": self.pack_label,
            "source": self.source,
            "group": self.group,
            "content": self.content,
            "template": self.template,
            "library": self.library,
            "extractor_id": self.extractor_id,
        }


__all__ = ["IconEntry", "build_full_id", "split_full_id"]
