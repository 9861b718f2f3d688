# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ``iconpacks`` command line interface."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from iconpacks.cli import app
from tests.helpers.packs import DEMO_RELATIVE_PATH, write_definition, write_svg

runner = CliRunner()


def _packs() -> dict[str, Any]:
    return {
        "demo_svg": {
            "label": "Demo SVG",
            "description": "Inline icons",
            "extractor": "svg",
            "template": "{{ content }}",
            "config": {"sources": ["icons/*.svg"]},
            "settings": {"size": {"type": "integer", "default": 24}},
        },
        "demo_font": {
            "label": "Demo Font",
            "extractor": "font",
            "template": "<i>{{ icon_id }}</i>",
            "config": {"sources": ["icons.codepoints"]},
        },
    }


def _write_site(root: Path, packs: dict[str, Any] | None = None) -> None:
    pack_dir = root / DEMO_RELATIVE_PATH
    write_svg(pack_dir / "icons" / "home.svg", '<path d="M1 1"/>')
    write_svg(pack_dir / "icons" / "user.svg", '<circle r="3"/>')
    (pack_dir / "icons.codepoints").write_text("bell f101\n", encoding="utf-8")
    write_definition(root, "demo", packs or _packs(), relative_path=DEMO_RELATIVE_PATH)


def _invoke(root: Path, *args: str) -> Any:
    return runner.invoke(app, ["--root", str(root), "--no-emoji", "--no-color", *args])


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo the handler installed by the application callback."""

    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_check_reports_counts(tmp_path: Path) -> None:
    _write_site(tmp_path)

    result = _invoke(tmp_path, "check")

    assert result.exit_code == 0
    assert "2 pack(s), 3 icon(s)" in result.stdout


def test_packs_lists_non_empty_packs(tmp_path: Path) -> None:
    packs = _packs()
    packs["empty_pack"] = {**packs["demo_font"], "label": "Nothing", "config": {"sources": ["none.codepoints"]}}
    _write_site(tmp_path, packs)

    result = _invoke(tmp_path, "packs")

    assert result.exit_code == 0
    assert "demo_svg" in result.stdout
    assert "demo_font" in result.stdout
    assert "Nothing" not in result.stdout


def test_icons_with_pack_and_search(tmp_path: Path) -> None:
    _write_site(tmp_path)

    every = _invoke(tmp_path, "icons")
    fonts = _invoke(tmp_path, "icons", "--pack", "demo_font")
    searched = _invoke(tmp_path, "icons", "--search", "user")

    assert every.exit_code == 0
    assert "3 icon(s)" in every.stdout
    assert "demo_font:bell" in fonts.stdout
    assert "demo_svg:home" not in fonts.stdout
    assert "1 icon(s)" in searched.stdout
    assert "demo_svg:user" in searched.stdout


def test_show_as_json(tmp_path: Path) -> None:
    _write_site(tmp_path)

    result = _invoke(tmp_path, "show", "demo_svg:home", "--json")

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["full_id"] == "demo_svg:home"
    assert payload["content"] == '<path d="M1 1"/>'
    assert payload["extractor_id"] == "svg"


def test_show_plain_text(tmp_path: Path) -> None:
    _write_site(tmp_path)

    result = _invoke(tmp_path, "show", "demo_font:bell")

    assert result.exit_code == 0
    assert "--- demo_font:bell ---" in result.stdout
    assert "content: f101" in result.stdout
    assert "group:" not in result.stdout


def test_show_unknown_icon(tmp_path: Path) -> None:
    _write_site(tmp_path)

    result = _invoke(tmp_path, "show", "demo_svg:nope")

    assert result.exit_code == 1
    assert "Icon 'demo_svg:nope' not found" in result.stdout


def test_defaults(tmp_path: Path) -> None:
    _write_site(tmp_path)

    result = _invoke(tmp_path, "defaults", "demo_svg")
    missing = _invoke(tmp_path, "defaults", "unknown")

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"size": 24}
    assert missing.exit_code == 1
    assert "Icon pack 'unknown' not found" in missing.stdout


def test_check_lenient_lists_errors(tmp_path: Path) -> None:
    packs = _packs()
    del packs["demo_font"]["template"]
    _write_site(tmp_path, packs)

    result = _invoke(tmp_path, "--no-strict", "check")

    assert result.exit_code == 1
    assert "Missing `template`" in result.stdout


def test_check_strict_fails_fast(tmp_path: Path) -> None:
    packs = _packs()
    packs["demo_svg"]["extractor"] = "nope"
    _write_site(tmp_path, packs)

    result = _invoke(tmp_path, "check")

    assert result.exit_code == 1
    assert "Unknown extractor 'nope'" in result.stdout


def test_invalid_configuration_file(tmp_path: Path) -> None:
    _write_site(tmp_path)
    (tmp_path / "iconpacks.toml").write_text("colour = 'red'\n", encoding="utf-8")

    result = _invoke(tmp_path, "check")

    assert result.exit_code == 1
    assert "Invalid iconpacks configuration" in result.stdout
