"""Publish command - tag the version and create the GitHub release."""

from __future__ import annotations

import typer

from stm.cli.commands._helpers import resolve_version
from stm.cli.context import build_context
from stm.core.result import Err
from stm.output.errors import print_release_error, release_error_exit_code
from stm.services.release.publish import ReleasePublisher


def publish(
    version: str | None = typer.Argument(
        None, help="Release version (must match the one passed to `stm build`)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show files and notes without tagging or uploading"
    ),
) -> None:
    """Create tag v<VERSION> and publish the release directory to GitHub."""
    ctx = build_context()
    resolved = resolve_version(version, ctx)

    publisher = ReleasePublisher(
        workspace=ctx.workspace,
        config=ctx.config,
        runner=ctx.runner,
        console=ctx.console,
    )

    if dry_run:
        preview = publisher.preview(resolved)
        if isinstance(preview, Err):
            print_release_error(preview.error, ctx.console)
            raise typer.Exit(code=release_error_exit_code(preview.error))
        return

    result = publisher.publish(resolved)
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    ctx.console.header("Release complete")
    ctx.console.print(f"Version: {resolved}")
    ctx.console.print(f"Link:    {result.value.url}")
