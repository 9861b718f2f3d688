# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application listing and checking the icon catalog."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from ..catalog import CatalogSnapshot, IconCatalog
from ..errors import IconPackError
from ..logging import configure_logging, get_console, info, ok, section
from ._cli_models import CLIOptions, options_from

app = typer.Typer(
    name="iconpacks",
    help="Discover and inspect icon packs.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def callback(
    ctx: typer.Context,
    root: Annotated[
        Path,
        typer.Option("--root", "-r", help="Application root holding the pack definitions.", file_okay=False),
    ] = Path(),
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration file replacing pyproject.toml and iconpacks.toml."),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--no-strict", help="Abort on the first pack configuration error."),
    ] = None,
    validate: Annotated[
        bool | None,
        typer.Option("--validate/--no-validate", help="Validate definitions against the JSON schema."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug details to stderr.")] = False,
    color: Annotated[bool, typer.Option("--color/--no-color", help="Colourise output.")] = True,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix messages with emoji.")] = True,
) -> None:
    """Discover and inspect icon packs."""

    configure_logging(verbose=verbose, use_color=color)
    ctx.obj = CLIOptions(
        root=root,
        config_path=config,
        strict=strict,
        validate_schema=validate,
        verbose=verbose,
        color=color,
        emoji=emoji,
    )


@app.command("packs")
def packs_command(ctx: typer.Context) -> None:
    """List the packs providing at least one icon."""

    options = options_from(ctx)
    snapshot = _snapshot(options.build_catalog(), options)
    table = Table(title="Icon packs")
    table.add_column("Pack")
    table.add_column("Label")
    table.add_column("Icons", justify="right")
    table.add_column("Extractor")
    table.add_column("Description")
    for pack_id, pack in snapshot.packs.items():
        count = snapshot.counts.get(pack_id, 0)
        if not count:
            continue
        table.add_row(pack_id, pack.label, str(count), pack.extractor_id or "", pack.description or "")
    get_console(color=options.color, emoji=options.emoji).print(table)


@app.command("icons")
def icons_command(
    ctx: typer.Context,
    pack: Annotated[list[str] | None, typer.Option("--pack", "-p", help="Restrict to this pack id.")] = None,
    search: Annotated[str | None, typer.Option("--search", "-s", help="Filter on the icon full id.")] = None,
) -> None:
    """List icons, optionally restricted to some packs or filtered by a search."""

    options = options_from(ctx)
    catalog = options.build_catalog()
    _snapshot(catalog, options)
    entries = catalog.search_icons(search or "", pack or None)
    table = Table(show_header=True)
    table.add_column("Icon")
    table.add_column("Label")
    table.add_column("Group")
    table.add_column("Source")
    for entry in entries:
        table.add_row(entry.full_id, entry.label, entry.group or "", entry.source or "")
    get_console(color=options.color, emoji=options.emoji).print(table)
    info(f"{len(entries)} icon(s)", use_emoji=options.emoji, use_color=options.color)


@app.command("show")
def show_command(
    ctx: typer.Context,
    full_id: Annotated[str, typer.Argument(help="Icon identifier, 'pack_id:icon_id'.")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the entry as JSON.")] = False,
) -> None:
    """Show one icon entry."""

    options = options_from(ctx)
    catalog = options.build_catalog()
    _snapshot(catalog, options)
    entry = catalog.get_icon(full_id)
    if entry is None:
        options.fail(f"Icon '{full_id}' not found")
        raise typer.Exit(code=1)
    if as_json:
        typer.echo(json.dumps(entry.to_dict(), indent=2, sort_keys=True))
        return
    section(entry.full_id, use_color=options.color)
    console = get_console(color=options.color, emoji=options.emoji)
    for key, value in entry.to_dict().items():
        if value is not None:
            console.print(f"{key}: {value}", markup=False, highlight=False)


@app.command("defaults")
def defaults_command(
    ctx: typer.Context,
    pack_id: Annotated[str, typer.Argument(help="Pack identifier.")],
) -> None:
    """Print the default value of every setting declared by a pack."""

    options = options_from(ctx)
    catalog = options.build_catalog()
    _snapshot(catalog, options)
    if catalog.get_pack(pack_id) is None:
        options.fail(f"Icon pack '{pack_id}' not found")
        raise typer.Exit(code=1)
    typer.echo(json.dumps(catalog.get_extractor_form_defaults(pack_id), indent=2, sort_keys=True))


@app.command("check")
def check_command(ctx: typer.Context) -> None:
    """Build the catalog and report configuration errors."""

    options = options_from(ctx)
    snapshot = _snapshot(options.build_catalog(), options)
    for message in snapshot.errors:
        options.fail(message)
    if snapshot.errors:
        raise typer.Exit(code=1)
    ok(
        f"{len(snapshot.packs)} pack(s), {len(snapshot.icons)} icon(s)",
        use_emoji=options.emoji,
        use_color=options.color,
    )


def _snapshot(catalog: IconCatalog, options: CLIOptions) -> CatalogSnapshot:
    try:
        return catalog.snapshot()
    except IconPackError as exc:
        options.fail(str(exc))
        raise typer.Exit(code=1) from exc


def main() -> None:
    """Run the ``iconpacks`` command."""

    app()


__all__ = ["app", "main"]
