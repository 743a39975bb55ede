"""Git operations used by the release flow."""

from .repository import GitError, Repository

__all__ = ["GitError", "Repository"]
