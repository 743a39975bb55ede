"""Error codes for CLI exit status.

These map to process exit codes and should remain stable: release
automation (CI jobs, wrapper scripts) branches on them.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success (including builds where some targets failed)
    - 1: User error (invalid version string)
    - 2: Environment error (no project root, gh missing or logged out)
    - 3: Build error
    - 4: Network error (tag push or release upload failed)
    - 5: I/O error (output directory unusable, nothing to publish)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
