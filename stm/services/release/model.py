from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class TagOutcome:
    tag: str
    created: bool


@dataclass(frozen=True, slots=True)
class ReleaseMetadata:
    """Everything gh needs to create the release, assembled right before upload."""

    version: str
    tag: str
    title: str
    archives: tuple[Path, ...]
    manifest: Path | None
    notes: str

    @property
    def files(self) -> tuple[Path, ...]:
        """Upload list: archives first, then the checksum manifest."""
        if self.manifest is None:
            return self.archives
        return (*self.archives, self.manifest)


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    tag: str
    url: str
    files: tuple[Path, ...]
    tag_created: bool
