from __future__ import annotations

from stm.core.result import Err, Ok, Result
from stm.core.version import tag_for
from stm.git.repository import GitError, Repository
from stm.output.console import ConsoleProtocol
from stm.services.release.errors import ReleaseError
from stm.services.release.model import TagOutcome


def _push(repo: Repository, *, remote: str, tag: str) -> Result[None, ReleaseError]:
    pushed = repo.push_tag(remote, tag)
    if isinstance(pushed, Err):
        return Err(_tag_failed(f"failed to push tag {tag} to {remote}", pushed.error))
    return Ok(None)


def _tag_failed(message: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="tag_failed", message=message, hint=error.message)


def ensure_release_tag(
    *,
    repo: Repository,
    version: str,
    remote: str,
    console: ConsoleProtocol,
) -> Result[TagOutcome, ReleaseError]:
    """Create and push v<version> unless it already exists.

    Re-running with the same version is a no-op, not an error. A tag left
    local by an earlier failed push is pushed on the next run.
    """
    tag = tag_for(version)
    if repo.tag_exists(tag):
        on_remote = repo.remote_tag_exists(remote, tag)
        if isinstance(on_remote, Err):
            return Err(_tag_failed(f"cannot check tag {tag} on {remote}", on_remote.error))
        if on_remote.value:
            console.warning(f"tag {tag} already exists, skipping creation")
            return Ok(TagOutcome(tag=tag, created=False))

        pushed = _push(repo, remote=remote, tag=tag)
        if isinstance(pushed, Err):
            return pushed
        console.success(f"existing tag {tag} pushed to {remote}")
        return Ok(TagOutcome(tag=tag, created=False))

    created = repo.create_annotated_tag(tag, message=f"Release {version}")
    if isinstance(created, Err):
        return Err(_tag_failed(f"failed to create tag {tag}", created.error))

    pushed = _push(repo, remote=remote, tag=tag)
    if isinstance(pushed, Err):
        return pushed

    console.success(f"tag {tag} created and pushed to {remote}")
    return Ok(TagOutcome(tag=tag, created=True))
