from __future__ import annotations

import typer

from stm.cli.commands._helpers import resolve_version
from stm.cli.context import build_context
from stm.services.release.notes import render_release_notes


def notes(
    version: str | None = typer.Argument(None, help="Release version (e.g. 1.2.0)"),
) -> None:
    """Print the generated release notes as Markdown."""
    ctx = build_context()
    resolved = resolve_version(version, ctx)
    typer.echo(render_release_notes(resolved, config=ctx.config), nl=False)
