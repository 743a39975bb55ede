from __future__ import annotations

from dataclasses import dataclass

import typer

from stm.core.config import Config, load_config_or_default
from stm.core.errors import ErrorCode
from stm.core.result import Err
from stm.core.workspace import Workspace, detect_workspace
from stm.output.console import ConsoleProtocol, RichConsole
from stm.platform.process import CommandRunner, SystemRunner


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    config: Config
    console: ConsoleProtocol
    runner: CommandRunner


def build_context() -> CLIContext:
    workspace_result = detect_workspace()
    if isinstance(workspace_result, Err):
        typer.echo(f"error: {workspace_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    workspace = workspace_result.value

    config_result = load_config_or_default(workspace.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        workspace=workspace,
        config=config_result.value,
        console=RichConsole(),
        runner=SystemRunner(),
    )
