"""Typed configuration loading and access.

Dataclasses for the ``pubflow.toml`` structure. Every key is optional;
missing keys fall back to the defaults below so an empty (or absent) file
still yields a usable Config.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "ProjectConfig",
    "CreatorConfig",
    "HostingConfig",
    "StorageConfig",
    "BuildConfig",
    "CONFIG_FILE_NAME",
    "DEFAULT_BASE_NAME",
    "DEFAULT_BUILDS_DIR",
    "DEFAULT_DOMAIN",
    "DEFAULT_LIST_LIMIT",
    "DEFAULT_STORAGE_BUCKET",
    "DEFAULT_FUNCTIONS_URL",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "pubflow.toml"

# Used when the project has no usable name at all.
DEFAULT_BASE_NAME = "unity-webgl-project"
DEFAULT_BUILDS_DIR = "U3D_Builds"
DEFAULT_DOMAIN = "unreality3d.com"
DEFAULT_LIST_LIMIT = 50
DEFAULT_STORAGE_BUCKET = "unreality3d.firebasestorage.app"
DEFAULT_FUNCTIONS_URL = "https://us-central1-unreality3d.cloudfunctions.net"

# Placeholder written by project templates before hosting is configured.
_UNCONFIGURED_BUCKET = "setup-required"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Local project settings.

    ``name`` is the base name used for target resolution; None means the
    project directory name.
    """

    name: str | None = None
    builds_dir: str = DEFAULT_BUILDS_DIR


@dataclass(frozen=True, slots=True)
class CreatorConfig:
    handle: str | None = None


@dataclass(frozen=True, slots=True)
class HostingConfig:
    domain: str = DEFAULT_DOMAIN
    list_limit: int = DEFAULT_LIST_LIMIT


@dataclass(frozen=True, slots=True)
class StorageConfig:
    bucket: str = DEFAULT_STORAGE_BUCKET
    functions_url: str = DEFAULT_FUNCTIONS_URL

    @property
    def effective_bucket(self) -> str:
        bucket = self.bucket.strip()
        if not bucket or bucket == _UNCONFIGURED_BUCKET:
            return DEFAULT_STORAGE_BUCKET
        return bucket


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """How the local build is produced.

    ``command`` is an argv list; ``{project}`` and ``{output}`` are
    substituted. ``prebuilt`` points at an existing build directory and
    takes precedence when both are set.
    """

    command: tuple[str, ...] = ()
    prebuilt: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    creator: CreatorConfig = field(default_factory=CreatorConfig)
    hosting: HostingConfig = field(default_factory=HostingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    build: BuildConfig = field(default_factory=BuildConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        project: StrDict = get_table(data, "project") or {}
        creator: StrDict = get_table(data, "creator") or {}
        hosting: StrDict = get_table(data, "hosting") or {}
        storage: StrDict = get_table(data, "storage") or {}
        build: StrDict = get_table(data, "build") or {}

        list_limit = get_int(hosting, "list_limit")
        if list_limit is not None and list_limit <= 0:
            raise ValueError(f"hosting.list_limit must be positive, got {list_limit}")

        command = get_str_list(build, "command")
        if "command" in build and command is None:
            raise ValueError("build.command must be a list of strings")

        return cls(
            project=ProjectConfig(
                name=get_str(project, "name"),
                builds_dir=get_str(project, "builds_dir") or DEFAULT_BUILDS_DIR,
            ),
            creator=CreatorConfig(handle=get_str(creator, "handle")),
            hosting=HostingConfig(
                domain=get_str(hosting, "domain") or DEFAULT_DOMAIN,
                list_limit=list_limit or DEFAULT_LIST_LIMIT,
            ),
            storage=StorageConfig(
                bucket=get_str(storage, "bucket") or DEFAULT_STORAGE_BUCKET,
                functions_url=(get_str(storage, "functions_url") or DEFAULT_FUNCTIONS_URL).rstrip(
                    "/"
                ),
            ),
            build=BuildConfig(
                command=command or (),
                prebuilt=get_str(build, "prebuilt"),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
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
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

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
    """Like load_config, but a missing file yields the default Config."""
    if not path.exists():
        return Ok(Config())
    return load_config(path)
