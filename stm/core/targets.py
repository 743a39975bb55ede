"""Static build matrix.

Every platform attribute the pipeline needs (archive format, executable
suffix, cross linker) lives in this table, keyed by target triple.
Order defines build order and report order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "ArchiveFormat",
    "TargetSpec",
    "TARGETS",
    "archive_name",
    "package_name",
    "target_by_triple",
]


class ArchiveFormat(Enum):
    """Archive container used for a target's release bundle."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"

    def __str__(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return f".{self.value}"


@dataclass(frozen=True, slots=True)
class TargetSpec:
    """A rust target triple and how its release bundle is shaped.

    Attributes:
        triple: rustc target triple (e.g. "x86_64-apple-darwin")
        label: Human-readable platform name used in release notes
        exe_suffix: Suffix appended to executable names
        archive_format: Container for the release bundle
        linker: Cross linker that must be on PATH, if any
        linker_hint: How to install the cross linker
    """

    triple: str
    label: str
    exe_suffix: str = ""
    archive_format: ArchiveFormat = ArchiveFormat.TAR_GZ
    linker: str | None = None
    linker_hint: str | None = None

    def exe_name(self, name: str) -> str:
        """Executable name for this target: exe_name("netopt-gui") -> "netopt-gui.exe"."""
        return f"{name}{self.exe_suffix}"

    def __str__(self) -> str:
        return self.triple


TARGETS: tuple[TargetSpec, ...] = (
    TargetSpec(triple="x86_64-apple-darwin", label="macOS Intel"),
    TargetSpec(triple="aarch64-apple-darwin", label="macOS Apple Silicon"),
    TargetSpec(
        triple="x86_64-pc-windows-gnu",
        label="Windows 64-bit",
        exe_suffix=".exe",
        archive_format=ArchiveFormat.ZIP,
        linker="x86_64-w64-mingw32-gcc",
        linker_hint="Install mingw-w64: brew install mingw-w64",
    ),
)


def target_by_triple(triple: str) -> TargetSpec | None:
    for target in TARGETS:
        if target.triple == triple:
            return target
    return None


def package_name(project: str, version: str, target: TargetSpec) -> str:
    """Staging directory name (and archive root): <project>-<version>-<triple>."""
    return f"{project}-{version}-{target.triple}"


def archive_name(project: str, version: str, target: TargetSpec) -> str:
    """Archive file name: <project>-<version>-<triple>.<tar.gz|zip>."""
    return f"{package_name(project, version, target)}{target.archive_format.extension}"
