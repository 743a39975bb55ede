from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from stm.core.config import Config, ProjectConfig
from stm.core.result import Err, Ok
from stm.core.targets import TARGETS
from stm.core.workspace import Workspace
from stm.output.console import MockConsole
from stm.platform.process import MockRunner
from stm.services.build_errors import ArchiveFailed, SetupFailed
from stm.services.pipeline import BuildReport, ReleaseBuildService


def _run(
    workspace: Workspace,
    runner: MockRunner,
    console: MockConsole,
    *,
    version: str = "1.2.0",
    jobs: int = 1,
) -> BuildReport:
    service = ReleaseBuildService(
        workspace=workspace, config=Config(), runner=runner, console=console
    )
    result = service.run(version=version, jobs=jobs)
    assert isinstance(result, Ok)
    return result.value


def test_all_targets_packaged(
    workspace: Workspace, toolchain_runner: MockRunner, console: MockConsole
) -> None:
    report = _run(workspace, toolchain_runner, console)

    assert [o.status for o in report.outcomes] == ["packaged"] * 3
    assert [p.name for p in report.archives] == [
        "smart-tcp-manager-1.2.0-x86_64-apple-darwin.tar.gz",
        "smart-tcp-manager-1.2.0-aarch64-apple-darwin.tar.gz",
        "smart-tcp-manager-1.2.0-x86_64-pc-windows-gnu.zip",
    ]
    assert report.manifest is not None
    assert len(report.manifest.entries) == 3
    assert not report.failed


def test_missing_windows_linker_skips_only_windows(
    workspace: Workspace, toolchain_runner: MockRunner, console: MockConsole
) -> None:
    toolchain_runner.tools.clear()
    report = _run(workspace, toolchain_runner, console)

    release_dir = workspace.root / "release"
    assert sorted(p.name for p in release_dir.iterdir()) == [
        "checksums-sha256.txt",
        "smart-tcp-manager-1.2.0-aarch64-apple-darwin.tar.gz",
        "smart-tcp-manager-1.2.0-x86_64-apple-darwin.tar.gz",
    ]
    manifest_lines = (release_dir / "checksums-sha256.txt").read_text().splitlines()
    assert len(manifest_lines) == 2

    windows = report.outcome_for("x86_64-pc-windows-gnu")
    assert windows is not None and windows.status == "skipped"
    assert console.find("hint: Install mingw-w64")
    windows_build = ["cargo", "build", "--release", "--target", "x86_64-pc-windows-gnu"]
    assert not toolchain_runner.called(windows_build)


def test_compile_failure_does_not_stop_other_targets(
    workspace: Workspace, toolchain_runner: MockRunner, console: MockConsole
) -> None:
    toolchain_runner.fail(
        ["cargo", "build", "--release", "--target", "aarch64-apple-darwin"], returncode=101
    )
    report = _run(workspace, toolchain_runner, console)

    assert [o.status for o in report.outcomes] == ["packaged", "build_failed", "packaged"]
    assert len(report.archives) == 2
    assert console.find("error: build failed: aarch64-apple-darwin (exit 101)")
    assert console.find("warning: aarch64-apple-darwin: build failed")


def test_missing_build_output_marks_package_failed(
    workspace: Workspace, console: MockConsole
) -> None:
    runner = MockRunner()
    runner.on(
        ["rustup", "target", "list", "--installed"],
        stdout="".join(f"{t.triple}\n" for t in TARGETS),
    )
    runner.add_tool("x86_64-w64-mingw32-gcc")
    report = _run(workspace, runner, console)

    assert [o.status for o in report.outcomes] == ["package_failed"] * 3
    assert report.archives == []
    assert report.manifest is not None and report.manifest.entries == ()
    assert console.find("(no archives)")


def test_parallel_jobs_keep_target_order(
    workspace: Workspace, toolchain_runner: MockRunner, console: MockConsole
) -> None:
    report = _run(workspace, toolchain_runner, console, jobs=3)
    assert [o.target.triple for o in report.outcomes] == [t.triple for t in TARGETS]
    assert len(report.archives) == 3


def test_stale_release_directory_is_cleared(
    workspace: Workspace, toolchain_runner: MockRunner, console: MockConsole
) -> None:
    stale = workspace.root / "release" / "smart-tcp-manager-1.1.0-x86_64-apple-darwin.tar.gz"
    stale.parent.mkdir()
    stale.write_bytes(b"old")

    report = _run(workspace, toolchain_runner, console)
    assert not stale.exists()
    assert report.manifest is not None
    assert all("1.1.0" not in name for name in report.manifest.filenames)


def test_unwritable_release_directory_is_setup_failure(
    workspace: Workspace,
    toolchain_runner: MockRunner,
    console: MockConsole,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _denied(self: Path, *args: object, **kwargs: object) -> None:
        raise PermissionError("permission denied")

    monkeypatch.setattr(Path, "mkdir", _denied)
    service = ReleaseBuildService(
        workspace=workspace, config=Config(), runner=toolchain_runner, console=console
    )
    result = service.run(version="1.2.0")

    assert isinstance(result, Err)
    assert isinstance(result.error, SetupFailed)
    assert toolchain_runner.calls == []


def test_archive_failure_is_isolated_to_its_target(
    workspace: Workspace,
    toolchain_runner: MockRunner,
    console: MockConsole,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _disk_full(self: zipfile.ZipFile, *args: object, **kwargs: object) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(zipfile.ZipFile, "write", _disk_full)
    report = _run(workspace, toolchain_runner, console)

    assert [o.status for o in report.outcomes] == ["packaged", "packaged", "package_failed"]
    windows = report.outcome_for("x86_64-pc-windows-gnu")
    assert windows is not None and isinstance(windows.error, ArchiveFailed)
    assert sorted(p.name for p in (workspace.root / "release").iterdir()) == [
        "checksums-sha256.txt",
        "smart-tcp-manager-1.2.0-aarch64-apple-darwin.tar.gz",
        "smart-tcp-manager-1.2.0-x86_64-apple-darwin.tar.gz",
    ]
    assert report.manifest is not None and len(report.manifest.entries) == 2


@pytest.mark.parametrize("release_dir", [".", "..", "release/../.."])
def test_release_dir_outside_project_is_never_removed(
    workspace: Workspace, toolchain_runner: MockRunner, console: MockConsole, release_dir: str
) -> None:
    config = Config(project=ProjectConfig(release_dir=release_dir))
    service = ReleaseBuildService(
        workspace=workspace, config=config, runner=toolchain_runner, console=console
    )

    result = service.run(version="1.2.0")

    assert isinstance(result, Err)
    assert isinstance(result.error, SetupFailed)
    assert (workspace.root / "Cargo.toml").is_file()
    assert (workspace.root / "README.md").is_file()
    assert toolchain_runner.calls == []
