"""Immutable run configuration and TOML loading.

`Configuration` is what one pipeline run reads. The fluent `BinWrapper`
builder produces it; `load_config` produces it from a file such as:

    [binary]
    name = "gifsicle"
    dest = "vendor"
    version = ">=1.71"

    [[source]]
    url = "https://example.com/gifsicle-linux.tar.gz"
    os = "linux"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from binwrap.core.result import Err, Ok, Result
from binwrap.core.structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_str_list,
    get_table,
    get_table_list,
)
from binwrap.semver import parse_range
from binwrap.sources import SourceDescriptor, parse_source

__all__ = [
    "Configuration",
    "ConfigError",
    "load_config",
    "DEFAULT_STRIP",
    "DEFAULT_CHECK_ARGS",
    "DEFAULT_VERSION_ARGS",
]

DEFAULT_STRIP = 1
DEFAULT_CHECK_ARGS: tuple[str, ...] = ("--version",)
DEFAULT_VERSION_ARGS: tuple[str, ...] = ("--version",)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a config file cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message


@dataclass(frozen=True, slots=True)
class Configuration:
    """Everything one pipeline run needs.

    Attributes:
        sources: Candidate downloads in insertion order
        dest: Canonical absolute destination directory
        binary: File name of the binary inside dest
        version_range: Range the binary's version must satisfy, if any
        strip: Leading path components dropped from archive entries
        skip_check: Skip running the binary after acquisition
        check_args: Arguments used to probe that the binary runs
        version_args: Arguments used to make the binary print its version
    """

    sources: tuple[SourceDescriptor, ...] = ()
    dest: Path = Path(".")
    binary: str = ""
    version_range: str | None = None
    strip: int = DEFAULT_STRIP
    skip_check: bool = False
    check_args: tuple[str, ...] = DEFAULT_CHECK_ARGS
    version_args: tuple[str, ...] = DEFAULT_VERSION_ARGS

    def __post_init__(self) -> None:
        if self.strip < 0:
            raise ValueError(f"strip must be a non-negative integer: {self.strip!r}")


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data = as_str_dict(tomllib.loads(content.decode("utf-8")))
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
    except OSError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def _parse_sources(data: StrDict, path: Path) -> Result[tuple[SourceDescriptor, ...], ConfigError]:
    if "source" not in data:
        return Ok(())
    tables = get_table_list(data, "source")
    if tables is None:
        return Err(ConfigError("'source' must be an array of tables ([[source]])", path=path))

    sources: list[SourceDescriptor] = []
    for index, table in enumerate(tables):
        url = get_str(table, "url")
        if url is None:
            return Err(ConfigError(f"source #{index + 1} is missing 'url'", path=path))
        parsed = parse_source(url, get_str(table, "os"), get_str(table, "arch"))
        if isinstance(parsed, Err):
            return Err(ConfigError(str(parsed.error), path=path))
        sources.append(parsed.value)
    return Ok(tuple(sources))


def _args(table: StrDict, key: str, default: tuple[str, ...]) -> tuple[str, ...] | None:
    if key not in table:
        return default
    values = get_str_list(table, key)
    return tuple(values) if values is not None else None


def load_config(path: Path) -> Result[Configuration, ConfigError]:
    """Load a run configuration from a TOML file.

    Relative ``dest`` values are resolved against the file's directory;
    without ``dest`` the file's directory itself is used.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(Configuration) on success, Err(ConfigError) on failure
    """
    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed
    data = parsed.value

    binary = get_table(data, "binary")
    if binary is None:
        return Err(ConfigError("Missing [binary] table", path=path))

    name = get_str(binary, "name")
    if name is None:
        return Err(ConfigError("Missing binary.name", path=path))

    base = path.parent
    dest_text = get_str(binary, "dest")
    dest = (base / Path(dest_text).expanduser()) if dest_text else base

    version_range = get_str(binary, "version")
    if version_range is not None:
        checked = parse_range(version_range)
        if isinstance(checked, Err):
            return Err(ConfigError(str(checked.error), path=path))

    strip = get_int(binary, "strip") if "strip" in binary else DEFAULT_STRIP
    if strip is None or strip < 0:
        return Err(ConfigError("binary.strip must be a non-negative integer", path=path))

    skip_check = get_bool(binary, "skip_check") if "skip_check" in binary else False
    if skip_check is None:
        return Err(ConfigError("binary.skip_check must be a boolean", path=path))

    check_args = _args(binary, "check_args", DEFAULT_CHECK_ARGS)
    version_args = _args(binary, "version_args", DEFAULT_VERSION_ARGS)
    if check_args is None or version_args is None:
        return Err(
            ConfigError("binary.check_args and binary.version_args must be string lists", path=path)
        )

    sources = _parse_sources(data, path)
    if isinstance(sources, Err):
        return sources

    return Ok(
        Configuration(
            sources=sources.value,
            dest=dest.resolve(),
            binary=name,
            version_range=version_range,
            strip=strip,
            skip_check=skip_check,
            check_args=check_args,
            version_args=version_args,
        )
    )
