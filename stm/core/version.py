from __future__ import annotations

import re

from .result import Err, Ok, Result

__all__ = ["parse_version", "tag_for"]

# major.minor.patch with an optional pre-release suffix (1.2.0, 1.2.0-beta.1)
_VERSION_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(-[0-9A-Za-z]+(\.[0-9A-Za-z]+)*)?$"
)


def parse_version(raw: str) -> Result[str, str]:
    """Validate a release version string.

    Returns Ok(version) or Err(reason). A leading "v" is rejected since the
    tag prefix is added by tag_for().
    """
    version = raw.strip()
    if version.startswith("v") and _VERSION_RE.match(version[1:]):
        return Err(f"version must not include the tag prefix: use {version[1:]}")
    if not _VERSION_RE.match(version):
        return Err(f"invalid version: {raw!r} (expected MAJOR.MINOR.PATCH)")
    return Ok(version)


def tag_for(version: str) -> str:
    return f"v{version}"
