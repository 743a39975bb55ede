from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SetupFailed:
    """The output directory could not be reset."""

    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ToolchainMissing:
    """A hard-required cross tool (e.g. the mingw linker) is not on PATH."""

    target: str
    tool: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class TargetInstallFailed:
    """rustup could not list or add the target."""

    target: str
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class CompileFailed:
    target: str
    returncode: int


@dataclass(frozen=True, slots=True)
class OutputMissing:
    target: str
    path: Path


@dataclass(frozen=True, slots=True)
class ArchiveFailed:
    target: str
    path: Path
    reason: str


BuildError = (
    SetupFailed
    | ToolchainMissing
    | TargetInstallFailed
    | CompileFailed
    | OutputMissing
    | ArchiveFailed
)
