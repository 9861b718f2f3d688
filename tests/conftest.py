# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from iconpacks.extractors import ExtractorServices
from iconpacks.model_pack import PackDefinition, PackProvider
from iconpacks.registry import ExtractorRegistry, default_registry
from iconpacks.resolver import PatternResolver
from tests.helpers.packs import DEMO_RELATIVE_PATH, PackFactory


@pytest.fixture
def pack_dir(tmp_path: Path) -> Path:
    """Return the directory of the ``demo`` provider, created below ``tmp_path``."""

    directory = tmp_path / DEMO_RELATIVE_PATH
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def make_pack(tmp_path: Path) -> PackFactory:
    """Return a factory building pack definitions rooted at ``tmp_path``."""

    def factory(
        pack_id: str = "demo",
        *,
        relative_path: str = DEMO_RELATIVE_PATH,
        provider: str = "demo",
        **data: Any,
    ) -> PackDefinition:
        mapping: dict[str, Any] = {"label": "Demo", "template": "<i>{{ icon_id }}</i>", **data}
        return PackDefinition.from_mapping(
            pack_id,
            mapping,
            provider=PackProvider(name=provider, relative_path=relative_path),
            root_path=tmp_path,
        )

    return factory


@pytest.fixture
def services() -> ExtractorServices:
    """Return services whose resolver refuses network access."""

    def offline(url: str) -> bytes:
        raise OSError(f"network disabled for {url}")

    return ExtractorServices(resolver=PatternResolver(fetcher=offline))


@pytest.fixture
def registry(services: ExtractorServices) -> ExtractorRegistry:
    """Return the built-in registry without entry-point discovery."""

    return default_registry(services, discover_plugins=False)
