"""Tests for stm.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from stm.core.result import Err, Ok
from stm.platform.process import (
    CommandRunner,
    MockRunner,
    ProcessError,
    SystemRunner,
    run,
    run_streaming,
)

PY = sys.executable


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("git", "push"), returncode=1, stdout="", stderr="")
        assert str(error) == "git push failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("cargo", "build", "--release", "--target", "x86_64-apple-darwin"),
            returncode=101,
            stdout="",
            stderr="error",
        )
        assert str(error) == "cargo build --release ... failed (exit 101)"


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run(
            [PY, "-c", "import sys; sys.stderr.write('error msg'); sys.exit(42)"],
            cwd=tmp_path,
        )
        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert "error msg" in result.error.stderr

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "import time; time.sleep(10)"], cwd=tmp_path, timeout=0.1)
        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr.lower()


class TestRunStreaming:
    def test_success(self, tmp_path: Path) -> None:
        assert run_streaming([PY, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure_keeps_exit_code(self, tmp_path: Path) -> None:
        result = run_streaming([PY, "-c", "import sys; sys.exit(3)"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run_streaming(["nonexistent_command_12345"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1


class TestSystemRunner:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(SystemRunner(), CommandRunner)

    def test_which_missing(self) -> None:
        assert SystemRunner().which("nonexistent_command_12345") is None

    def test_run_delegates(self, tmp_path: Path) -> None:
        result = SystemRunner().run([PY, "-c", "print('ok')"], tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "ok"


class TestMockRunner:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(MockRunner(), CommandRunner)

    def test_unmatched_command_succeeds(self, tmp_path: Path) -> None:
        runner = MockRunner()
        assert runner.run(["git", "status"], tmp_path) == Ok("")
        assert runner.calls == [("git", "status")]

    def test_longest_prefix_wins(self, tmp_path: Path) -> None:
        runner = MockRunner()
        runner.on(["gh"], stdout="generic")
        runner.on(["gh", "auth", "status"], stdout="logged in")
        assert runner.run(["gh", "auth", "status"], tmp_path) == Ok("logged in")
        assert runner.run(["gh", "api", "user"], tmp_path) == Ok("generic")

    def test_latest_registration_wins_on_tie(self, tmp_path: Path) -> None:
        runner = MockRunner()
        runner.on(["git", "push"])
        runner.fail(["git", "push"], stderr="rejected")
        result = runner.run(["git", "push", "origin", "v1.0.0"], tmp_path)
        assert isinstance(result, Err)
        assert result.error.command == ("git", "push", "origin", "v1.0.0")
        assert result.error.stderr == "rejected"

    def test_hook_runs_with_cwd(self, tmp_path: Path) -> None:
        seen: list[Path] = []
        runner = MockRunner()
        runner.on(["cargo", "build"], then=lambda cmd, cwd: seen.append(cwd))
        assert runner.run_streaming(["cargo", "build", "--release"], tmp_path) == Ok(None)
        assert seen == [tmp_path]

    def test_which_and_called(self, tmp_path: Path) -> None:
        runner = MockRunner()
        runner.add_tool("gh")
        assert runner.which("gh") == Path("/usr/bin/gh")
        assert runner.which("cargo") is None
        runner.run(["gh", "auth", "status"], tmp_path)
        runner.run(["git", "tag"], tmp_path)
        assert runner.called(["gh"]) == [("gh", "auth", "status")]


@pytest.mark.parametrize("returncode", [1, 101])
def test_mock_runner_fail_propagates_returncode(tmp_path: Path, returncode: int) -> None:
    runner = MockRunner()
    runner.fail(["cargo"], returncode=returncode)
    result = runner.run_streaming(["cargo", "build"], tmp_path)
    assert isinstance(result, Err)
    assert result.error.returncode == returncode
