"""Build command - compile, package and checksum every target."""

from __future__ import annotations

import typer

from stm.cli.commands._helpers import resolve_version
from stm.cli.context import build_context
from stm.core.result import Err
from stm.output.errors import build_error_exit_code, print_build_error
from stm.services.pipeline import ReleaseBuildService


def build(
    version: str | None = typer.Argument(
        None, help="Release version (e.g. 1.2.0); defaults to the configured baseline"
    ),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Targets to build in parallel"),
) -> None:
    """Build and package all targets into the release directory.

    Individual target failures are reported but do not fail the command.
    """
    ctx = build_context()
    resolved = resolve_version(version, ctx)

    service = ReleaseBuildService(
        workspace=ctx.workspace,
        config=ctx.config,
        runner=ctx.runner,
        console=ctx.console,
    )
    result = service.run(version=resolved, jobs=jobs)
    if isinstance(result, Err):
        print_build_error(result.error, ctx.console)
        raise typer.Exit(code=build_error_exit_code(result.error))

    report = result.value
    if report.failed:
        ctx.console.warning(
            f"{len(report.failed)} of {len(report.outcomes)} targets did not produce an archive"
        )
    else:
        ctx.console.success(f"release build {resolved} complete: {report.release_dir}")
