"""Process execution boundary for external tools."""

from .process import CommandRunner, MockRunner, ProcessError, SystemRunner

__all__ = [
    "CommandRunner",
    "MockRunner",
    "ProcessError",
    "SystemRunner",
]
