"""Typed configuration loading and access.

The release pipeline reads an optional `release.toml` at the project root:

    [project]
    name = "smart-tcp-manager"
    display_name = "Smart TCP Manager"
    repo = "LegnaOS/smart-tcp-manager"
    release_dir = "release"
    default_version = "1.0.0"
    remote = "origin"
    checksum_file = "checksums-sha256.txt"

    [binaries]
    gui = "netopt-gui"
    service = "netopt-service"
    shared_files = ["README.md", "LICENSE"]

Every key is optional; missing keys fall back to the defaults below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePath, PureWindowsPath

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "BinariesConfig",
    "Config",
    "ConfigError",
    "ProjectConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_VERSION",
]

DEFAULT_VERSION = "1.0.0"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Release identity and output layout."""

    name: str = "smart-tcp-manager"
    display_name: str = "Smart TCP Manager"
    repo: str = "LegnaOS/smart-tcp-manager"
    release_dir: str = "release"
    default_version: str = DEFAULT_VERSION
    remote: str = "origin"
    checksum_file: str = "checksums-sha256.txt"


@dataclass(frozen=True, slots=True)
class BinariesConfig:
    """Executables produced by cargo and static files shipped alongside them."""

    gui: str = "netopt-gui"
    service: str = "netopt-service"
    shared_files: tuple[str, ...] = ("README.md", "LICENSE")


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    binaries: BinariesConfig = field(default_factory=BinariesConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        project: StrDict = get_table(data, "project") or {}
        binaries: StrDict = get_table(data, "binaries") or {}

        p = ProjectConfig()
        b = BinariesConfig()
        shared = get_str_list(binaries, "shared_files")
        release_dir = get_str(project, "release_dir")
        if release_dir is not None:
            _check_release_dir(release_dir)

        return cls(
            project=ProjectConfig(
                name=get_str(project, "name") or p.name,
                display_name=get_str(project, "display_name") or p.display_name,
                repo=get_str(project, "repo") or p.repo,
                release_dir=release_dir or p.release_dir,
                default_version=get_str(project, "default_version") or p.default_version,
                remote=get_str(project, "remote") or p.remote,
                checksum_file=get_str(project, "checksum_file") or p.checksum_file,
            ),
            binaries=BinariesConfig(
                gui=get_str(binaries, "gui") or b.gui,
                service=get_str(binaries, "service") or b.service,
                shared_files=tuple(shared) if shared is not None else b.shared_files,
            ),
        )


def _check_release_dir(value: str) -> None:
    """release_dir is wiped on every build: it must stay below the project root."""
    parts = PurePath(value).parts
    if PurePath(value).is_absolute() or PureWindowsPath(value).is_absolute():
        raise ValueError(f"release_dir must be relative to the project root: {value!r}")
    if not parts or ".." in parts:
        raise ValueError(f"release_dir must be a subdirectory of the project root: {value!r}")


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Cannot read {path}: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to release.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A present-but-broken file is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
