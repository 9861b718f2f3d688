# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""iconpacks CLI package exports."""

from __future__ import annotations

from typing import Final

from ._cli_models import CLIOptions
from .app import app, main

__all__: Final[list[str]] = ["CLIOptions", "app", "main"]
