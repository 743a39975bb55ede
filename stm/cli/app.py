from __future__ import annotations

import os
from pathlib import Path

import typer

from stm import __version__
from stm.cli.commands.build_cmd import build
from stm.cli.commands.checksums import checksums
from stm.cli.commands.notes import notes
from stm.cli.commands.publish_cmd import publish
from stm.core.errors import ErrorCode
from stm.core.workspace import ROOT_ENV_VAR, is_workspace_root


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Build, package and publish Smart TCP Manager releases.",
)


app.command()(build)
app.command()(publish)
app.command()(notes)
app.command()(checksums)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root containing Cargo.toml (overrides auto detection)",
    ),
) -> None:
    del version
    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not resolved.is_dir() or not is_workspace_root(resolved):
            typer.echo(f"error: --root '{resolved}' has no Cargo.toml", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[ROOT_ENV_VAR] = str(resolved)


def main() -> None:
    app()
