"""Git repository abstraction.

Only the operations the release flow needs: checking for a tag locally and
on a remote, creating an annotated tag and pushing it. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/project"), runner=SystemRunner())
    if not repo.tag_exists("v1.2.0"):
        match repo.create_annotated_tag("v1.2.0", message="Release 1.2.0"):
            case Ok(_):
                repo.push_tag("origin", "v1.2.0")
            case Err(e):
                print(f"tag failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from stm.core.result import Err, Ok, Result
from stm.platform.process import CommandRunner, ProcessError

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message (git's stderr when available)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )


class Repository:
    """Git operations on the project checkout.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path, *, runner: CommandRunner) -> None:
        self.path = path
        self._runner = runner

    def tag_exists(self, tag: str) -> bool:
        """True if refs/tags/<tag> resolves locally."""
        result = self._run(["rev-parse", "--verify", "--quiet", f"refs/tags/{tag}"])
        return isinstance(result, Ok)

    def remote_tag_exists(self, remote: str, tag: str) -> Result[bool, GitError]:
        """True if remote advertises refs/tags/<tag>."""
        result = self._run(["ls-remote", "--tags", remote, f"refs/tags/{tag}"])
        if isinstance(result, Err):
            return Err(_git_error("ls-remote", result.error, "git ls-remote failed"))
        return Ok(bool(result.value.strip()))

    def create_annotated_tag(self, tag: str, *, message: str) -> Result[None, GitError]:
        result = self._run(["tag", "-a", tag, "-m", message])
        if isinstance(result, Err):
            return Err(_git_error("tag", result.error, "git tag failed"))
        return Ok(None)

    def push_tag(self, remote: str, tag: str) -> Result[None, GitError]:
        result = self._run(["push", remote, tag])
        if isinstance(result, Err):
            return Err(_git_error("push", result.error, "git push failed"))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "ls-remote"}
            else _GIT_TIMEOUT_SECONDS
        )
        return self._runner.run(["git", *args], self.path, timeout=timeout)
