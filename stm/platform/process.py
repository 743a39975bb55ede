"""Subprocess execution with Result-based error handling.

Every external tool the release pipeline drives (rustup, cargo, git, gh,
the mingw linker probe) goes through a CommandRunner. Production code uses
SystemRunner; tests inject MockRunner so no real toolchain is needed.

Usage:
    runner = SystemRunner()
    result = runner.run(["rustup", "target", "list", "--installed"], cwd=root)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from stm.core.result import Err, Ok, Result

__all__ = [
    "CommandRunner",
    "MockRunner",
    "ProcessError",
    "SystemRunner",
    "run",
    "run_streaming",
]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never ran).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[None, ProcessError]:
    """Execute a command with output streaming to the terminal.

    Used for long compiler runs where progress should stay visible.
    Nothing is captured, so ProcessError carries only the exit code.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, timeout=timeout, check=False)
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for running external tools.

    This abstraction allows injecting a fake runner in tests, avoiding real
    compilers, git remotes and GitHub calls.
    """

    def run(
        self, cmd: list[str], cwd: Path, *, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        """Run a command and capture its stdout."""
        ...

    def run_streaming(
        self, cmd: list[str], cwd: Path, *, timeout: float | None = None
    ) -> Result[None, ProcessError]:
        """Run a command with output going straight to the terminal."""
        ...

    def which(self, name: str) -> Path | None:
        """Locate an executable on PATH."""
        ...


class SystemRunner:
    """CommandRunner backed by subprocess and shutil.which."""

    def run(
        self, cmd: list[str], cwd: Path, *, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        return run(cmd, cwd, timeout=timeout)

    def run_streaming(
        self, cmd: list[str], cwd: Path, *, timeout: float | None = None
    ) -> Result[None, ProcessError]:
        return run_streaming(cmd, cwd, timeout=timeout)

    def which(self, name: str) -> Path | None:
        found = shutil.which(name)
        return Path(found) if found else None


Hook = Callable[[list[str], Path], None]


@dataclass(frozen=True, slots=True)
class _Response:
    prefix: tuple[str, ...]
    result: Result[str, ProcessError]
    hook: Hook | None


def _empty_responses() -> list[_Response]:
    return []


def _empty_calls() -> list[tuple[str, ...]]:
    return []


def _empty_tools() -> dict[str, Path]:
    return {}


@dataclass
class MockRunner:
    """CommandRunner that records calls and replays canned results.

    Responses are matched by command prefix; the longest matching prefix
    wins and, for equal prefixes, the most recently registered one.
    Unmatched commands succeed with empty stdout.

    Example:
        runner = MockRunner()
        runner.on(["cargo", "build"], then=create_binaries)
        runner.fail(["git", "push"], stderr="rejected")
        runner.add_tool("gh")
    """

    responses: list[_Response] = field(default_factory=_empty_responses)
    calls: list[tuple[str, ...]] = field(default_factory=_empty_calls)
    tools: dict[str, Path] = field(default_factory=_empty_tools)

    def on(self, prefix: list[str], *, stdout: str = "", then: Hook | None = None) -> None:
        """Make commands starting with prefix succeed, optionally running a hook."""
        self.responses.append(_Response(tuple(prefix), Ok(stdout), then))

    def fail(
        self,
        prefix: list[str],
        *,
        returncode: int = 1,
        stderr: str = "",
        then: Hook | None = None,
    ) -> None:
        """Make commands starting with prefix fail."""
        error = ProcessError(command=tuple(prefix), returncode=returncode, stdout="", stderr=stderr)
        self.responses.append(_Response(tuple(prefix), Err(error), then))

    def add_tool(self, name: str, path: Path | None = None) -> None:
        self.tools[name] = path or Path("/usr/bin") / name

    def run(
        self, cmd: list[str], cwd: Path, *, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        self.calls.append(tuple(cmd))
        response = self._match(cmd)
        if response is None:
            return Ok("")
        if response.hook is not None:
            response.hook(cmd, cwd)
        result = response.result
        if isinstance(result, Err):
            e = result.error
            return Err(
                ProcessError(
                    command=tuple(cmd), returncode=e.returncode, stdout=e.stdout, stderr=e.stderr
                )
            )
        return result

    def run_streaming(
        self, cmd: list[str], cwd: Path, *, timeout: float | None = None
    ) -> Result[None, ProcessError]:
        result = self.run(cmd, cwd, timeout=timeout)
        if isinstance(result, Err):
            return result
        return Ok(None)

    def which(self, name: str) -> Path | None:
        return self.tools.get(name)

    # Test helper methods

    def called(self, prefix: list[str]) -> list[tuple[str, ...]]:
        """All recorded calls starting with prefix."""
        p = tuple(prefix)
        return [c for c in self.calls if c[: len(p)] == p]

    def _match(self, cmd: list[str]) -> _Response | None:
        best: _Response | None = None
        for response in self.responses:
            n = len(response.prefix)
            if tuple(cmd[:n]) != response.prefix:
                continue
            if best is None or n >= len(best.prefix):
                best = response
        return best
