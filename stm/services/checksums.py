"""SHA-256 manifest over the release archives.

The manifest uses the `shasum -a 256` line format so downloaders can run
`shasum -a 256 -c checksums-sha256.txt` directly:

    <hex digest>  <archive file name>
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from pathlib import Path

from stm.core.targets import ArchiveFormat

ARCHIVE_PATTERNS: tuple[str, ...] = tuple(f"*{fmt.extension}" for fmt in ArchiveFormat)


@dataclass(frozen=True, slots=True)
class ChecksumEntry:
    filename: str
    sha256: str

    def to_line(self) -> str:
        return f"{self.sha256}  {self.filename}"


@dataclass(frozen=True, slots=True)
class ChecksumManifest:
    path: Path
    entries: tuple[ChecksumEntry, ...]

    @property
    def filenames(self) -> list[str]:
        return [e.filename for e in self.entries]


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def list_archives(release_dir: Path) -> list[Path]:
    """Archives in release_dir, grouped by format (tar.gz then zip), sorted by name."""
    out: list[Path] = []
    for pattern in ARCHIVE_PATTERNS:
        out.extend(p for p in sorted(release_dir.glob(pattern)) if p.is_file())
    return out


def write_text_atomic(path: Path, content: str) -> None:
    tmp = Path(f"{path}.tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)


def generate_checksums(release_dir: Path, *, manifest_name: str) -> ChecksumManifest:
    """Hash every archive currently in release_dir and write the manifest.

    An empty directory yields an empty manifest; refusing to publish nothing
    is the publisher's call, not ours.

    Raises:
        OSError: If an archive cannot be read or the manifest cannot be written.
    """
    entries = tuple(
        ChecksumEntry(filename=p.name, sha256=sha256_file(p)) for p in list_archives(release_dir)
    )
    path = release_dir / manifest_name
    content = "".join(f"{e.to_line()}\n" for e in entries)
    write_text_atomic(path, content)
    return ChecksumManifest(path=path, entries=entries)


def parse_checksums(path: Path) -> ChecksumManifest:
    """Read a manifest written by generate_checksums (or shasum)."""
    entries: list[ChecksumEntry] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        digest, _, name = line.partition("  ")
        entries.append(ChecksumEntry(filename=name.strip(), sha256=digest.strip()))
    return ChecksumManifest(path=path, entries=tuple(entries))
