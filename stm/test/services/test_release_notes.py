from __future__ import annotations

from pathlib import Path

from stm.core.config import Config, ProjectConfig
from stm.services.release.notes import render_release_notes, write_release_notes


def test_notes_are_deterministic() -> None:
    assert render_release_notes("1.2.0") == render_release_notes("1.2.0")


def test_notes_sections_in_order() -> None:
    notes = render_release_notes("1.2.0")
    headings = [line for line in notes.splitlines() if line.startswith("#")]
    assert headings[0] == "# Smart TCP Manager 1.2.0"
    assert [h.split(" / ")[-1] for h in headings if h.startswith("## ")] == [
        "功能",
        "下载",
        "快速开始",
        "注意事项",
        "校验和",
    ]


def test_download_table_matches_archive_names() -> None:
    notes = render_release_notes("1.2.0")
    assert "| macOS Intel | `smart-tcp-manager-1.2.0-x86_64-apple-darwin.tar.gz` |" in notes
    assert (
        "| macOS Apple Silicon | `smart-tcp-manager-1.2.0-aarch64-apple-darwin.tar.gz` |" in notes
    )
    assert "| Windows 64-bit | `smart-tcp-manager-1.2.0-x86_64-pc-windows-gnu.zip` |" in notes


def test_quick_start_and_checksum_reference() -> None:
    notes = render_release_notes("2.0.0-rc.1")
    assert "tar -xzf smart-tcp-manager-2.0.0-rc.1-*.tar.gz" in notes
    assert "sudo ./netopt-service" in notes
    assert "netopt-gui.exe" in notes
    assert "`checksums-sha256.txt`" in notes
    assert notes.endswith("\n") and not notes.endswith("\n\n")


def test_notes_follow_project_config() -> None:
    config = Config(project=ProjectConfig(name="stm", display_name="STM"))
    notes = render_release_notes("1.0.0", config=config)
    assert notes.startswith("# STM 1.0.0\n")
    assert "`stm-1.0.0-x86_64-apple-darwin.tar.gz`" in notes


def test_write_release_notes(tmp_path: Path) -> None:
    path = write_release_notes(tmp_path / "out" / "notes.md", "1.2.0")
    assert path.read_text(encoding="utf-8") == render_release_notes("1.2.0")
