"""Release builds via cargo."""

from __future__ import annotations

from stm.core.result import Err, Ok, Result
from stm.core.targets import TargetSpec
from stm.core.workspace import Workspace
from stm.output.console import ConsoleProtocol, Style
from stm.platform.process import CommandRunner
from stm.services.build_errors import BuildError, CompileFailed


class CargoBuilder:
    """Compile the whole cargo workspace for one target in release mode."""

    def __init__(
        self,
        *,
        workspace: Workspace,
        runner: CommandRunner,
        console: ConsoleProtocol,
    ) -> None:
        self._workspace = workspace
        self._runner = runner
        self._console = console

    def command(self, target: TargetSpec) -> list[str]:
        return ["cargo", "build", "--release", "--target", target.triple]

    def build(self, target: TargetSpec) -> Result[None, BuildError]:
        cmd = self.command(target)
        self._console.print(" ".join(cmd), Style.DIM)
        # No timeout: cold cross builds can take a long time.
        result = self._runner.run_streaming(cmd, self._workspace.root)
        if isinstance(result, Err):
            return Err(CompileFailed(target=target.triple, returncode=result.error.returncode))
        return Ok(None)
