"""Bilingual (English / Chinese) GitHub release notes.

The notes are a pure function of the version and the static project
configuration: the download table is derived from the target matrix and
the archive naming convention, so it always matches what `stm build`
produces.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from stm.core.config import Config
from stm.core.targets import TARGETS, ArchiveFormat, TargetSpec, archive_name, package_name

FEATURES: tuple[tuple[str, str], ...] = (
    (
        "i18n Support / 国际化",
        "Chinese/English interface switching 中英文界面切换",
    ),
    (
        "Config Persistence / 配置持久化",
        "Auto-save policies and settings 自动保存策略和设置",
    ),
    (
        "Windows Connection Control / Windows连接控制",
        "Close TCP via SetTcpEntry API",
    ),
    (
        "Process Monitoring / 进程监控",
        "TCP connection distribution per process 每进程连接状态分布",
    ),
    (
        "Health Scoring / 健康评分",
        "Detect problematic processes 检测问题进程",
    ),
    (
        "Policy Engine / 策略引擎",
        "App-specific optimization policies 应用级优化策略",
    ),
)

NOTICES: tuple[str, ...] = (
    "Admin privileges required for TCP parameter changes / 修改TCP参数需要管理员权限",
    "Windows: Run as Administrator to close connections / Windows下需管理员身份运行",
    "Some settings require system restart / 部分设置需重启系统生效",
)


def _quick_start(version: str, config: Config) -> list[str]:
    project = config.project.name
    gui = config.binaries.gui
    service = config.binaries.service
    return [
        "```bash",
        "# macOS: Extract and run / 解压并运行",
        f"tar -xzf {project}-{version}-*.tar.gz",
        f"cd {project}-{version}-*/",
        f"./{gui}",
        "",
        "# Admin required for system settings / 修改系统设置需要管理员权限",
        f"sudo ./{service}",
        "```",
    ]


def render_release_notes(
    version: str,
    *,
    config: Config | None = None,
    targets: Sequence[TargetSpec] = TARGETS,
) -> str:
    """Render the Markdown release body for version."""
    cfg = config or Config()
    project = cfg.project.name

    lines: list[str] = []
    lines.append(f"# {cfg.project.display_name} {version}")
    lines.append("")

    lines.append("## 🎉 Features / 功能")
    lines.append("")
    for title, detail in FEATURES:
        lines.append(f"- **{title}**: {detail}")
    lines.append("")

    lines.append("## 📦 Downloads / 下载")
    lines.append("")
    lines.append("| Platform / 平台 | File / 文件 |")
    lines.append("|-----------------|-------------|")
    for target in targets:
        lines.append(f"| {target.label} | `{archive_name(project, version, target)}` |")
    lines.append("")

    lines.append("## 🚀 Quick Start / 快速开始")
    lines.append("")
    lines.extend(_quick_start(version, cfg))
    zip_targets = [t for t in targets if t.archive_format == ArchiveFormat.ZIP]
    for target in zip_targets:
        folder = package_name(project, version, target)
        lines.append("")
        lines.append(
            f"{target.label}: unzip `{archive_name(project, version, target)}` and run "
            f"`{folder}\\{target.exe_name(cfg.binaries.gui)}` as Administrator "
            "/ 解压后以管理员身份运行"
        )
    lines.append("")

    lines.append("## ⚠️ Notes / 注意事项")
    lines.append("")
    for notice in NOTICES:
        lines.append(f"- {notice}")
    lines.append("")

    lines.append("## 📋 Checksums / 校验和")
    lines.append("")
    lines.append(
        f"See `{cfg.project.checksum_file}` to verify file integrity "
        "/ 查看校验和文件验证完整性"
    )

    return "\n".join(lines).rstrip() + "\n"


def write_release_notes(path: Path, version: str, *, config: Config | None = None) -> Path:
    """Write rendered notes to path (used for `gh release create --notes-file`)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_release_notes(version, config=config), encoding="utf-8")
    return path
