from __future__ import annotations

from pathlib import Path

import pytest
import typer

from stm.cli.context import CLIContext
from stm.core.config import Config
from stm.core.errors import ErrorCode
from stm.core.workspace import Workspace
from stm.output.console import MockConsole
from stm.platform.process import MockRunner


def _ctx(workspace: Workspace, runner: MockRunner) -> CLIContext:
    return CLIContext(workspace=workspace, config=Config(), console=MockConsole(), runner=runner)


def test_build_all_targets(
    workspace: Workspace, toolchain_runner: MockRunner, monkeypatch: pytest.MonkeyPatch
) -> None:
    import stm.cli.commands.build_cmd as build_cmd

    ctx = _ctx(workspace, toolchain_runner)
    monkeypatch.setattr(build_cmd, "build_context", lambda: ctx)

    build_cmd.build(version="1.2.0", jobs=1)

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("release build 1.2.0 complete")
    assert (workspace.root / "release" / "checksums-sha256.txt").is_file()


def test_build_defaults_to_configured_version(
    workspace: Workspace, toolchain_runner: MockRunner, monkeypatch: pytest.MonkeyPatch
) -> None:
    import stm.cli.commands.build_cmd as build_cmd

    monkeypatch.setattr(build_cmd, "build_context", lambda: _ctx(workspace, toolchain_runner))

    build_cmd.build(version=None, jobs=1)

    archive = workspace.root / "release" / "smart-tcp-manager-1.0.0-x86_64-apple-darwin.tar.gz"
    assert archive.is_file()


def test_build_partial_failure_exits_zero(
    workspace: Workspace, toolchain_runner: MockRunner, monkeypatch: pytest.MonkeyPatch
) -> None:
    import stm.cli.commands.build_cmd as build_cmd

    toolchain_runner.tools.clear()
    ctx = _ctx(workspace, toolchain_runner)
    monkeypatch.setattr(build_cmd, "build_context", lambda: ctx)

    build_cmd.build(version="1.2.0", jobs=1)

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("1 of 3 targets did not produce an archive")


def test_build_rejects_invalid_version(
    workspace: Workspace, toolchain_runner: MockRunner, monkeypatch: pytest.MonkeyPatch
) -> None:
    import stm.cli.commands.build_cmd as build_cmd

    monkeypatch.setattr(build_cmd, "build_context", lambda: _ctx(workspace, toolchain_runner))

    with pytest.raises(typer.Exit) as exc:
        build_cmd.build(version="v1.2.0", jobs=1)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert toolchain_runner.calls == []
    assert not (workspace.root / "release").exists()


def test_build_setup_failure_is_io_error(
    workspace: Workspace, toolchain_runner: MockRunner, monkeypatch: pytest.MonkeyPatch
) -> None:
    import stm.cli.commands.build_cmd as build_cmd

    monkeypatch.setattr(build_cmd, "build_context", lambda: _ctx(workspace, toolchain_runner))

    def _denied(self: Path, *args: object, **kwargs: object) -> None:
        raise PermissionError("permission denied")

    monkeypatch.setattr(Path, "mkdir", _denied)

    with pytest.raises(typer.Exit) as exc:
        build_cmd.build(version="1.2.0", jobs=1)

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)
