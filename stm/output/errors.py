"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stm.core.errors import ErrorCode
from stm.output.console import Style
from stm.services.build_errors import (
    ArchiveFailed,
    BuildError,
    CompileFailed,
    OutputMissing,
    SetupFailed,
    TargetInstallFailed,
    ToolchainMissing,
)
from stm.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from stm.output.console import ConsoleProtocol

__all__ = [
    "build_error_exit_code",
    "print_build_error",
    "print_release_error",
    "release_error_exit_code",
]


def print_build_error(error: BuildError, console: ConsoleProtocol) -> None:
    """Print build error to console with appropriate formatting.

    Per-target problems that only skip a target are warnings; the rest are
    errors.
    """
    match error:
        case SetupFailed(path=path, reason=reason):
            console.error(f"cannot prepare {path}: {reason}")
        case ToolchainMissing(target=target, tool=tool, hint=hint):
            console.warning(f"skipping {target}: {tool} not found")
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case TargetInstallFailed(target=target, returncode=rc, detail=detail):
            console.error(f"rustup could not install {target} (exit {rc})")
            if detail:
                console.print(detail, Style.DIM)
        case CompileFailed(target=target, returncode=rc):
            console.error(f"build failed: {target} (exit {rc})")
        case OutputMissing(target=target, path=path):
            console.warning(f"{target}: build output not found: {path}")
        case ArchiveFailed(target=target, path=path, reason=reason):
            console.error(f"{target}: failed to write {path.name}: {reason}")


def build_error_exit_code(error: BuildError) -> int:
    match error:
        case SetupFailed() | OutputMissing() | ArchiveFailed():
            return int(ErrorCode.IO_ERROR)
        case ToolchainMissing() | TargetInstallFailed():
            return int(ErrorCode.ENV_ERROR)
        case CompileFailed():
            return int(ErrorCode.BUILD_ERROR)
    return int(ErrorCode.BUILD_ERROR)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "gh_missing" | "gh_auth_required":
            return int(ErrorCode.ENV_ERROR)
        case "tag_failed" | "publish_failed":
            return int(ErrorCode.NETWORK_ERROR)
        case "release_dir_missing" | "no_artifacts":
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.BUILD_ERROR)
