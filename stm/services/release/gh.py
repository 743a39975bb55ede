from __future__ import annotations

from pathlib import Path

from stm.core.result import Err, Ok, Result
from stm.platform.process import CommandRunner
from stm.services.release.errors import ReleaseError
from stm.services.release.timeouts import GH_TIMEOUT_SECONDS, GH_UPLOAD_TIMEOUT_SECONDS


def release_url(repo: str, tag: str) -> str:
    return f"https://github.com/{repo}/releases/tag/{tag}"


def ensure_gh_available(*, runner: CommandRunner) -> Result[None, ReleaseError]:
    if runner.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/ (macOS: brew install gh)",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, runner: CommandRunner, workspace_root: Path) -> Result[None, ReleaseError]:
    result = runner.run(["gh", "auth", "status"], workspace_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_auth_required",
                message="gh auth required",
                hint="Run: gh auth login",
            )
        )
    return Ok(None)


def create_release(
    *,
    runner: CommandRunner,
    workspace_root: Path,
    repo: str,
    tag: str,
    title: str,
    notes_file: Path,
    files: tuple[Path, ...],
) -> Result[str, ReleaseError]:
    """Create the GitHub release and upload every file in one gh call.

    Returns the release URL.
    """
    cmd = [
        "gh",
        "release",
        "create",
        tag,
        "--repo",
        repo,
        "--title",
        title,
        "--notes-file",
        str(notes_file),
        *(str(f) for f in files),
    ]
    result = runner.run(cmd, workspace_root, timeout=GH_UPLOAD_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="publish_failed",
                message=f"gh release create {tag} failed (exit {result.error.returncode})",
                hint=result.error.stderr.strip() or None,
            )
        )

    # gh prints the release URL on success; fall back to the canonical one.
    url = result.value.strip().splitlines()[-1] if result.value.strip() else ""
    return Ok(url if url.startswith("https://") else release_url(repo, tag))
