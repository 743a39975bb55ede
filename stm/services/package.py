"""Per-target release archives.

Each successful target gets exactly one archive in the output directory:

    <project>-<version>-<triple>.tar.gz   (macOS)
    <project>-<version>-<triple>.zip      (Windows)

The archive contains a single top-level directory of the same name holding
the GUI binary, the service binary (when built) and the shared README and
LICENSE files. The staging directory used to assemble it is always removed.
"""

from __future__ import annotations

import shutil
import tarfile
import zipfile
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from stm.core.config import Config
from stm.core.result import Err, Ok, Result
from stm.core.targets import ArchiveFormat, TargetSpec, archive_name, package_name
from stm.core.workspace import Workspace
from stm.output.console import ConsoleProtocol, Style
from stm.services.build_errors import ArchiveFailed, BuildError, OutputMissing


def _collect_dir(base_dir: Path, *, arc_prefix: str) -> list[tuple[Path, str]]:
    out: list[tuple[Path, str]] = []
    for p in sorted(base_dir.rglob("*")):
        if p.is_dir():
            continue
        rel = p.relative_to(base_dir).as_posix()
        out.append((p, f"{arc_prefix}/{rel}"))
    return out


def _zip_dir(zip_path: Path, *, stage: Path, arc_prefix: str) -> None:
    # cargo outputs restored from a CI cache can carry mtime=0, which ZIP
    # cannot represent (timestamps before 1980).
    with ZipFile(zip_path, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
        for src, arc in _collect_dir(stage, arc_prefix=arc_prefix):
            zf.write(src, arcname=arc)


def _tar_dir(tar_path: Path, *, stage: Path, arc_prefix: str) -> None:
    with tarfile.open(tar_path, "w:gz") as tf:
        tf.add(stage, arcname=arc_prefix)


def _copy_optional(src: Path, dest_dir: Path) -> bool:
    if not src.is_file():
        return False
    try:
        shutil.copy2(src, dest_dir / src.name)
    except OSError:
        return False
    return True


class Packager:
    def __init__(
        self,
        *,
        workspace: Workspace,
        config: Config,
        out_dir: Path,
        console: ConsoleProtocol,
    ) -> None:
        self._workspace = workspace
        self._config = config
        self._out_dir = out_dir
        self._console = console

    def gui_binary(self, target: TargetSpec) -> Path:
        release_dir = self._workspace.target_release_dir(target.triple)
        return release_dir / target.exe_name(self._config.binaries.gui)

    def service_binary(self, target: TargetSpec) -> Path:
        release_dir = self._workspace.target_release_dir(target.triple)
        return release_dir / target.exe_name(self._config.binaries.service)

    def archive_path(self, target: TargetSpec, *, version: str) -> Path:
        return self._out_dir / archive_name(self._config.project.name, version, target)

    def package(self, target: TargetSpec, *, version: str) -> Result[Path, BuildError]:
        """Stage and compress one target's build outputs.

        Returns:
            Ok(archive path), or Err(OutputMissing) when the GUI binary was not
            produced, or Err(ArchiveFailed) when staging/compression failed.
        """
        gui = self.gui_binary(target)
        if not gui.is_file():
            return Err(OutputMissing(target=target.triple, path=gui))

        name = package_name(self._config.project.name, version, target)
        stage = self._out_dir / name
        archive = self.archive_path(target, version=version)

        try:
            if stage.exists():
                shutil.rmtree(stage)
            stage.mkdir(parents=True)

            shutil.copy2(gui, stage / gui.name)
            if not _copy_optional(self.service_binary(target), stage):
                self._console.print(
                    f"{target.triple}: {self._config.binaries.service} not found, skipped",
                    Style.DIM,
                )
            for shared in self._config.binaries.shared_files:
                _copy_optional(self._workspace.root / shared, stage)

            if target.archive_format == ArchiveFormat.ZIP:
                _zip_dir(archive, stage=stage, arc_prefix=name)
            else:
                _tar_dir(archive, stage=stage, arc_prefix=name)
        except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
            archive.unlink(missing_ok=True)
            return Err(ArchiveFailed(target=target.triple, path=archive, reason=str(e)))
        finally:
            shutil.rmtree(stage, ignore_errors=True)

        return Ok(archive)
