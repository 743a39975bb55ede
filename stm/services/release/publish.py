"""GitHub release publication.

Order of operations:

1. the output directory of `stm build` must exist
2. collect archives + checksum manifest (nothing to upload -> abort before
   touching git or GitHub)
3. gh installed and authenticated
4. tag v<version> (idempotent)
5. render notes and create the release with every file attached
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from stm.core.config import Config
from stm.core.result import Err, Ok, Result
from stm.core.version import tag_for
from stm.core.workspace import Workspace
from stm.git.repository import Repository
from stm.output.console import ConsoleProtocol, Style
from stm.platform.process import CommandRunner
from stm.services.checksums import list_archives
from stm.services.release.errors import ReleaseError
from stm.services.release.gh import create_release, ensure_gh_auth, ensure_gh_available
from stm.services.release.model import PublishedRelease, ReleaseMetadata
from stm.services.release.notes import render_release_notes
from stm.services.release.tags import ensure_release_tag


class ReleasePublisher:
    def __init__(
        self,
        *,
        workspace: Workspace,
        config: Config,
        runner: CommandRunner,
        console: ConsoleProtocol,
    ) -> None:
        self._workspace = workspace
        self._config = config
        self._runner = runner
        self._console = console

    @property
    def release_dir(self) -> Path:
        return self._workspace.root / self._config.project.release_dir

    def title(self, version: str) -> str:
        return f"{self._config.project.display_name} {version}"

    def collect(self, version: str) -> Result[ReleaseMetadata, ReleaseError]:
        """Gather the upload list from the output directory."""
        release_dir = self.release_dir
        if not release_dir.is_dir():
            return Err(
                ReleaseError(
                    kind="release_dir_missing",
                    message=f"release directory not found: {release_dir}",
                    hint=f"Run: stm build {version}",
                )
            )

        archives = tuple(list_archives(release_dir))
        manifest_path = release_dir / self._config.project.checksum_file
        manifest = manifest_path if manifest_path.is_file() else None

        if not archives:
            return Err(
                ReleaseError(
                    kind="no_artifacts",
                    message=f"no release archives found in {release_dir}",
                    hint=f"Run: stm build {version}",
                )
            )

        return Ok(
            ReleaseMetadata(
                version=version,
                tag=tag_for(version),
                title=self.title(version),
                archives=archives,
                manifest=manifest,
                notes=render_release_notes(version, config=self._config),
            )
        )

    def _announce(self, meta: ReleaseMetadata) -> None:
        self._console.header(f"Release {meta.title} ({meta.tag})")
        self._console.print("Files:", Style.BOLD)
        for f in meta.files:
            self._console.print(f"  - {f.name}")

    def preview(self, version: str) -> Result[ReleaseMetadata, ReleaseError]:
        """Collect and print what publish() would upload, without git or gh."""
        collected = self.collect(version)
        if isinstance(collected, Err):
            return collected
        meta = collected.value

        self._announce(meta)
        repo = self._config.project.repo
        self._console.print(f"dry run: gh release create {meta.tag} --repo {repo}", Style.DIM)
        self._console.newline()
        self._console.print(meta.notes)
        return Ok(meta)

    def publish(self, version: str) -> Result[PublishedRelease, ReleaseError]:
        """Tag version and create its GitHub release."""
        collected = self.collect(version)
        if isinstance(collected, Err):
            return collected
        meta = collected.value
        self._announce(meta)

        ready = ensure_gh_available(runner=self._runner)
        if isinstance(ready, Err):
            return ready
        authed = ensure_gh_auth(runner=self._runner, workspace_root=self._workspace.root)
        if isinstance(authed, Err):
            return authed

        self._console.header(f"Tag {meta.tag}")
        repo = Repository(self._workspace.root, runner=self._runner)
        tagged = ensure_release_tag(
            repo=repo,
            version=version,
            remote=self._config.project.remote,
            console=self._console,
        )
        if isinstance(tagged, Err):
            return tagged

        self._console.header("Upload")
        with tempfile.TemporaryDirectory(prefix="stm-notes-") as tmp:
            notes_file = Path(tmp) / f"{meta.tag}.md"
            notes_file.write_text(meta.notes, encoding="utf-8")
            created = create_release(
                runner=self._runner,
                workspace_root=self._workspace.root,
                repo=self._config.project.repo,
                tag=meta.tag,
                title=meta.title,
                notes_file=notes_file,
                files=meta.files,
            )
        if isinstance(created, Err):
            return created

        self._console.success(f"GitHub release created: {created.value}")
        return Ok(
            PublishedRelease(
                tag=meta.tag,
                url=created.value,
                files=meta.files,
                tag_created=tagged.value.created,
            )
        )
