"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from stm.core.errors import ErrorCode
from stm.core.result import Err
from stm.core.version import parse_version

if TYPE_CHECKING:
    from stm.cli.context import CLIContext


def resolve_version(raw: str | None, ctx: CLIContext) -> str:
    """Validate the VERSION argument, defaulting to the configured baseline."""
    result = parse_version(raw if raw is not None else ctx.config.project.default_version)
    if isinstance(result, Err):
        ctx.console.error(result.error)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return result.value
