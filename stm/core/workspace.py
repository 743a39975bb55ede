"""Project root detection and paths.

The project root is the cargo workspace that produces netopt-gui and
netopt-service. It is identified by a `Cargo.toml` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
    "find_workspace_upward",
    "is_workspace_root",
    "ROOT_ENV_VAR",
]

ROOT_ENV_VAR = "STM_PROJECT_ROOT"


@dataclass(frozen=True)
class WorkspaceError:
    """Error when the project root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Workspace:
    """A detected cargo project.

    The root contains:
    - Cargo.toml (required)
    - release.toml (optional release configuration)
    - target/<triple>/release/ cargo outputs
    - README.md, LICENSE shipped in every archive
    """

    root: Path

    @property
    def config_path(self) -> Path:
        """Path to release.toml."""
        return self.root / "release.toml"

    @property
    def cargo_manifest(self) -> Path:
        return self.root / "Cargo.toml"

    @property
    def cargo_target_dir(self) -> Path:
        """Path to cargo's target/ directory."""
        return self.root / "target"

    def target_release_dir(self, triple: str) -> Path:
        """Directory holding release binaries for one target triple."""
        return self.cargo_target_dir / triple / "release"

    def __str__(self) -> str:
        return str(self.root)


def is_workspace_root(path: Path) -> bool:
    return (path / "Cargo.toml").is_file()


def find_workspace_upward(start: Path) -> Path | None:
    """Search upward from start for the first directory with a Cargo.toml."""
    for parent in (start, *start.parents):
        if is_workspace_root(parent):
            return parent
    return None


def detect_workspace(
    *,
    start_dir: Path | None = None,
    env_var: str = ROOT_ENV_VAR,
) -> Result[Workspace, WorkspaceError]:
    """Detect the project root directory.

    Detection order:
    1. $STM_PROJECT_ROOT (if set it must be valid)
    2. Search upward from start_dir (or cwd)
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_workspace_root(env_path):
            return Ok(Workspace(root=env_path))
        return Err(
            WorkspaceError(
                message=f"${env_var} is set to '{env_value}' but it has no Cargo.toml",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_workspace_upward(search_start)
    if found:
        return Ok(Workspace(root=found))

    return Err(
        WorkspaceError(
            message="Could not find project root (Cargo.toml not found)",
            searched_from=search_start,
        )
    )
