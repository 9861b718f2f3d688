# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for icon entries, pack definitions and the shared helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from iconpacks.errors import IconDefinitionError, IconPackConfigError
from iconpacks.model_icon import IconEntry, build_full_id, split_full_id
from iconpacks.model_pack import PackProvider, PackSetting
from iconpacks.utils import humanize_label, normalize_icon_id, optional_int
from tests.helpers.packs import PackFactory


def test_icon_entry_derives_label_and_full_id() -> None:
    entry = IconEntry(pack_id="demo", icon_id="arrow-left_alt")

    assert entry.label == "Arrow left alt"
    assert entry.full_id == "demo:arrow-left_alt"
    assert entry.to_dict()["full_id"] == "demo:arrow-left_alt"


def test_icon_entry_keeps_explicit_label() -> None:
    entry = IconEntry(pack_id="demo", icon_id="home", label="House")

    assert entry.label == "House"


@pytest.mark.parametrize(("pack_id", "icon_id"), [("", "home"), ("demo", "")])
def test_icon_entry_rejects_empty_identity(pack_id: str, icon_id: str) -> None:
    with pytest.raises(IconDefinitionError):
        IconEntry(pack_id=pack_id, icon_id=icon_id)


def test_full_id_helpers() -> None:
    assert build_full_id("demo", "home") == "demo:home"
    assert split_full_id("demo:mdi:home") == ("demo", "mdi:home")
    for invalid in ("demo", ":home", "demo:"):
        with pytest.raises(ValueError):
            split_full_id(invalid)


def test_humanize_and_normalize() -> None:
    assert humanize_label("user.circle") == "User circle"
    assert normalize_icon_id("Arrow Left!") == "arrow_left_"
    assert normalize_icon_id("fa-solid_home") == "fa-solid_home"


def test_optional_int_accepts_numeric_strings() -> None:
    assert optional_int("3", key="offset", context="demo") == 3
    with pytest.raises(IconPackConfigError, match="zero or greater"):
        optional_int(-1, key="offset", context="demo")
    with pytest.raises(IconPackConfigError, match="integer"):
        optional_int(True, key="offset", context="demo")


def test_provider_definition_path(tmp_path: Path) -> None:
    provider = PackProvider(name="my_theme", relative_path="themes/my_theme")

    assert provider.definition_path(tmp_path) == tmp_path / "themes" / "my_theme" / "my_theme.icons.yml"


def test_pack_definition_from_mapping(tmp_path: Path, make_pack: PackFactory) -> None:
    pack = make_pack(
        extractor="svg",
        description="Demo icons",
        config={"sources": ["icons/*.svg"], "offset": 2, "normalize_ids": True},
        library="demo/icons",
    )

    assert pack.id == "demo"
    assert pack.label == "Demo"
    assert pack.extractor_id == "svg"
    assert pack.provider == "demo"
    assert pack.sources == ("icons/*.svg",)
    assert pack.has_sources is True
    assert pack.offset == 2
    assert pack.normalize_ids is True
    assert pack.enabled is True
    assert pack.absolute_path == tmp_path / "modules" / "demo"
    assert pack.library == "demo/icons"


def test_pack_definition_defaults(tmp_path: Path, make_pack: PackFactory) -> None:
    pack = make_pack(relative_path="", label=None)

    assert pack.label == "demo"
    assert pack.extractor_id is None
    assert pack.has_sources is False
    assert pack.offset == 0
    assert pack.normalize_ids is False
    assert pack.absolute_path == tmp_path


def test_pack_definition_rejects_wrong_types(make_pack: PackFactory) -> None:
    with pytest.raises(IconPackConfigError, match="'config.sources' to be an array"):
        make_pack(config={"sources": "icons/*.svg"})
    with pytest.raises(IconPackConfigError, match="'enabled' to be a boolean"):
        make_pack(enabled="yes")


def test_form_defaults_only_include_declared_values(make_pack: PackFactory) -> None:
    pack = make_pack(
        settings={
            "size": {"title": "Size", "type": "integer", "default": 24},
            "tags": {"type": "array", "default": ["a", "b"]},
            "color": {"type": "string", "default": None},
            "style": {"type": "string"},
        },
    )

    assert pack.form_defaults() == {"size": 24, "tags": ["a", "b"]}
    size = pack.settings[0]
    assert isinstance(size, PackSetting)
    assert size.title == "Size"
    assert size.setting_type == "integer"
    assert pack.settings[3].title == "style"
    assert pack.settings[3].has_default is False
