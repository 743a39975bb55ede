"""Release build orchestration.

Runs toolchain check → cargo build → package for every target in the
matrix, then writes the checksum manifest once over everything produced.
A failing target is recorded in the report and never stops the others.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from stm.core.config import Config
from stm.core.result import Err, Ok, Result
from stm.core.targets import TARGETS, TargetSpec
from stm.core.workspace import Workspace
from stm.output.console import ConsoleProtocol, Style
from stm.output.errors import print_build_error
from stm.platform.process import CommandRunner
from stm.services.build import CargoBuilder
from stm.services.build_errors import BuildError, SetupFailed
from stm.services.checksums import ChecksumManifest, generate_checksums
from stm.services.package import Packager
from stm.services.toolchains import ToolchainService

TargetStatus = Literal["packaged", "skipped", "build_failed", "package_failed"]

_STATUS_LABELS: dict[TargetStatus, str] = {
    "packaged": "packaged",
    "skipped": "skipped (toolchain)",
    "build_failed": "build failed",
    "package_failed": "packaging failed",
}


@dataclass(frozen=True, slots=True)
class TargetOutcome:
    target: TargetSpec
    status: TargetStatus
    archive: Path | None = None
    error: BuildError | None = None

    @property
    def ok(self) -> bool:
        return self.status == "packaged"


def _empty_outcomes() -> list[TargetOutcome]:
    return []


@dataclass
class BuildReport:
    version: str
    release_dir: Path
    outcomes: list[TargetOutcome] = field(default_factory=_empty_outcomes)
    manifest: ChecksumManifest | None = None

    @property
    def archives(self) -> list[Path]:
        return [o.archive for o in self.outcomes if o.archive is not None]

    @property
    def failed(self) -> list[TargetOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def outcome_for(self, triple: str) -> TargetOutcome | None:
        for outcome in self.outcomes:
            if outcome.target.triple == triple:
                return outcome
        return None


class ReleaseBuildService:
    """Build + package every target, then checksum the results."""

    def __init__(
        self,
        *,
        workspace: Workspace,
        config: Config,
        runner: CommandRunner,
        console: ConsoleProtocol,
        targets: Sequence[TargetSpec] = TARGETS,
    ) -> None:
        self._workspace = workspace
        self._config = config
        self._runner = runner
        self._console = console
        self._targets = tuple(targets)

        self._toolchains = ToolchainService(workspace=workspace, runner=runner, console=console)
        self._builder = CargoBuilder(workspace=workspace, runner=runner, console=console)
        self._packager = Packager(
            workspace=workspace,
            config=config,
            out_dir=self.release_dir,
            console=console,
        )

    @property
    def release_dir(self) -> Path:
        return self._workspace.root / self._config.project.release_dir

    def run(self, *, version: str, jobs: int = 1) -> Result[BuildReport, BuildError]:
        """Run the whole build stage.

        Returns Err only when the output directory cannot be prepared or the
        checksum manifest cannot be written. Per-target failures are in the
        report.
        """
        self._console.header(f"{self._config.project.display_name} release build {version}")

        prepared = self._reset_release_dir()
        if isinstance(prepared, Err):
            return prepared

        self._console.print("Targets:", Style.BOLD)
        for target in self._targets:
            self._console.print(f"  - {target.triple} ({target.label})")

        report = BuildReport(version=version, release_dir=self.release_dir)
        if jobs > 1 and len(self._targets) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                # map() preserves target order; leaving the block joins all workers.
                report.outcomes.extend(
                    pool.map(lambda t: self.run_target(t, version=version), self._targets)
                )
        else:
            for target in self._targets:
                report.outcomes.append(self.run_target(target, version=version))

        self._console.header("Checksums")
        try:
            report.manifest = generate_checksums(
                self.release_dir, manifest_name=self._config.project.checksum_file
            )
        except OSError as e:
            manifest_path = self.release_dir / self._config.project.checksum_file
            return Err(SetupFailed(path=manifest_path, reason=str(e)))
        self._console.success(f"checksums saved: {report.manifest.path}")

        self.print_summary(report)
        return Ok(report)

    def run_target(self, target: TargetSpec, *, version: str) -> TargetOutcome:
        self._console.header(f"Target {target.triple}")

        ready = self._toolchains.ensure_target(target)
        if isinstance(ready, Err):
            print_build_error(ready.error, self._console)
            return TargetOutcome(target=target, status="skipped", error=ready.error)

        built = self._builder.build(target)
        if isinstance(built, Err):
            print_build_error(built.error, self._console)
            return TargetOutcome(target=target, status="build_failed", error=built.error)
        self._console.success(f"built {target.triple}")

        packaged = self._packager.package(target, version=version)
        if isinstance(packaged, Err):
            print_build_error(packaged.error, self._console)
            return TargetOutcome(target=target, status="package_failed", error=packaged.error)

        self._console.success(f"packaged {packaged.value}")
        return TargetOutcome(target=target, status="packaged", archive=packaged.value)

    def print_summary(self, report: BuildReport) -> None:
        self._console.header("Summary")
        self._console.print(f"Version: {report.version}")
        self._console.print(f"Output:  {report.release_dir}")
        for outcome in report.outcomes:
            label = _STATUS_LABELS[outcome.status]
            if outcome.ok and outcome.archive is not None:
                self._console.success(f"{outcome.target.triple}: {outcome.archive.name}")
            else:
                self._console.warning(f"{outcome.target.triple}: {label}")

        if report.manifest is not None:
            self._console.newline()
            self._console.print(report.manifest.path.name, Style.BOLD)
            if not report.manifest.entries:
                self._console.print("  (no archives)", Style.DIM)
            for entry in report.manifest.entries:
                self._console.print(f"  {entry.to_line()}", Style.DIM)

        self._console.newline()
        for path in sorted(report.release_dir.iterdir()):
            size = path.stat().st_size if path.is_file() else 0
            self._console.print(f"  {size:>12}  {path.name}", Style.DIM)

    def _reset_release_dir(self) -> Result[None, BuildError]:
        release_dir = self.release_dir
        root = self._workspace.root.resolve()
        resolved = release_dir.resolve()
        if resolved == root or not resolved.is_relative_to(root):
            return Err(
                SetupFailed(path=release_dir, reason="not a subdirectory of the project root")
            )
        try:
            if release_dir.exists():
                shutil.rmtree(release_dir)
            release_dir.mkdir(parents=True)
        except OSError as e:
            return Err(SetupFailed(path=release_dir, reason=str(e)))
        return Ok(None)
