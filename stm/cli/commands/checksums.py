from __future__ import annotations

import typer

from stm.cli.context import build_context
from stm.core.errors import ErrorCode
from stm.output.console import Style
from stm.services.checksums import generate_checksums


def checksums() -> None:
    """Regenerate the checksum manifest for the existing release directory."""
    ctx = build_context()
    release_dir = ctx.workspace.root / ctx.config.project.release_dir
    if not release_dir.is_dir():
        ctx.console.error(f"release directory not found: {release_dir}")
        ctx.console.print("hint: Run: stm build <version>", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    try:
        manifest = generate_checksums(release_dir, manifest_name=ctx.config.project.checksum_file)
    except OSError as e:
        ctx.console.error(f"failed to write checksums: {e}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    for entry in manifest.entries:
        ctx.console.print(entry.to_line())
    ctx.console.success(str(manifest.path))
