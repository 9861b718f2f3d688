# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Options shared by every ``iconpacks`` sub-command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from ..catalog import IconCatalog
from ..config import CatalogConfig, build_catalog, load_config
from ..errors import IconPackError
from ..logging import fail


@dataclass(frozen=True, slots=True)
class CLIOptions:
    """Global options captured by the application callback."""

    root: Path
    config_path: Path | None
    strict: bool | None
    validate_schema: bool | None
    verbose: bool
    color: bool
    emoji: bool

    def load_config(self) -> CatalogConfig:
        """Return the configuration with the command line overrides applied."""

        return load_config(
            self.root,
            config_path=self.config_path,
            overrides={"strict": self.strict, "validate_schema": self.validate_schema},
        )

    def build_catalog(self) -> IconCatalog:
        """Return a catalog for these options, exiting with status 1 on configuration errors."""

        try:
            return build_catalog(self.load_config())
        except IconPackError as exc:
            self.fail(str(exc))
            raise typer.Exit(code=1) from exc

    def fail(self, message: str) -> None:
        """Report ``message`` as an error."""

        fail(message, use_emoji=self.emoji, use_color=self.color)


def options_from(ctx: typer.Context) -> CLIOptions:
    """Return the options stored on ``ctx`` by the application callback."""

    options = ctx.obj
    if not isinstance(options, CLIOptions):
        raise RuntimeError("iconpacks options are not initialised")
    return options


__all__ = ["CLIOptions", "options_from"]
