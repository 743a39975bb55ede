"""Cross-compilation toolchain checks.

A target is buildable when rustup has its standard library installed and,
for targets that need one, the cross linker is on PATH. Missing rustup
targets are installed on the fly; a missing linker skips the target.
"""

from __future__ import annotations

from stm.core.result import Err, Ok, Result
from stm.core.targets import TargetSpec
from stm.core.workspace import Workspace
from stm.output.console import ConsoleProtocol, Style
from stm.platform.process import CommandRunner, ProcessError
from stm.services.build_errors import BuildError, TargetInstallFailed, ToolchainMissing

_RUSTUP_LIST_TIMEOUT_SECONDS = 60.0
_RUSTUP_ADD_TIMEOUT_SECONDS = 10 * 60.0


def _install_failed(target: TargetSpec, error: ProcessError) -> TargetInstallFailed:
    return TargetInstallFailed(
        target=target.triple,
        returncode=error.returncode,
        detail=error.stderr.strip(),
    )


class ToolchainService:
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

    def installed_targets(self) -> Result[set[str], ProcessError]:
        result = self._runner.run(
            ["rustup", "target", "list", "--installed"],
            self._workspace.root,
            timeout=_RUSTUP_LIST_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return result
        return Ok({line.strip() for line in result.value.splitlines() if line.strip()})

    def ensure_target(self, target: TargetSpec) -> Result[None, BuildError]:
        """Make sure target can be built.

        Checks the cross linker first (hard precondition, never retried),
        then installs the rustup target if it is missing.
        """
        if target.linker is not None and self._runner.which(target.linker) is None:
            return Err(
                ToolchainMissing(target=target.triple, tool=target.linker, hint=target.linker_hint)
            )

        installed = self.installed_targets()
        if isinstance(installed, Err):
            return Err(_install_failed(target, installed.error))

        if target.triple in installed.value:
            return Ok(None)

        self._console.print(f"rustup target add {target.triple}", Style.DIM)
        added = self._runner.run(
            ["rustup", "target", "add", target.triple],
            self._workspace.root,
            timeout=_RUSTUP_ADD_TIMEOUT_SECONDS,
        )
        if isinstance(added, Err):
            return Err(_install_failed(target, added.error))
        return Ok(None)
