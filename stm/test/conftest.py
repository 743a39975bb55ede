from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from stm.core.config import Config
from stm.core.targets import TARGETS, TargetSpec, target_by_triple
from stm.core.workspace import Workspace
from stm.output.console import MockConsole
from stm.platform.process import MockRunner

EmitBinaries = Callable[..., None]


def _write_binaries(
    root: Path,
    target: TargetSpec,
    *,
    gui: bool = True,
    service: bool = True,
) -> None:
    binaries = Config().binaries
    release_dir = root / "target" / target.triple / "release"
    release_dir.mkdir(parents=True, exist_ok=True)
    if gui:
        path = release_dir / target.exe_name(binaries.gui)
        path.write_bytes(f"gui-{target.triple}".encode())
        path.chmod(0o755)
    if service:
        path = release_dir / target.exe_name(binaries.service)
        path.write_bytes(f"service-{target.triple}".encode())
        path.chmod(0o755)


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    root = tmp_path / "smart-tcp-manager"
    root.mkdir()
    (root / "Cargo.toml").write_text(
        '[workspace]\nmembers = ["netopt-core", "netopt-gui", "netopt-service"]\n',
        encoding="utf-8",
    )
    (root / "README.md").write_text("# Smart TCP Manager\n", encoding="utf-8")
    (root / "LICENSE").write_text("MIT License\n", encoding="utf-8")
    return Workspace(root=root)


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def emit_binaries() -> EmitBinaries:
    """Write fake cargo outputs: emit_binaries(root, target, gui=True, service=True)."""
    return _write_binaries


@pytest.fixture
def toolchain_runner() -> MockRunner:
    """Runner where every rustup target is installed and mingw is on PATH.

    `cargo build` succeeds and writes both binaries for the requested target.
    """
    runner = MockRunner()
    runner.on(
        ["rustup", "target", "list", "--installed"],
        stdout="".join(f"{t.triple}\n" for t in TARGETS),
    )
    runner.add_tool("x86_64-w64-mingw32-gcc")

    def _cargo_build(cmd: list[str], cwd: Path) -> None:
        target = target_by_triple(cmd[cmd.index("--target") + 1])
        assert target is not None
        _write_binaries(cwd, target)

    runner.on(["cargo", "build"], then=_cargo_build)
    return runner
