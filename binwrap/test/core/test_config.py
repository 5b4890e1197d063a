"""Tests for binwrap.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from binwrap.core.config import (
    DEFAULT_CHECK_ARGS,
    DEFAULT_STRIP,
    ConfigError,
    Configuration,
    load_config,
)
from binwrap.core.result import Err, Ok
from binwrap.sources import SourceDescriptor


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "binwrap.toml"
    path.write_text(content, encoding="utf-8")
    return path


class TestConfiguration:
    """Tests for Configuration defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults match the builder's defaults."""
        config = Configuration()
        assert config.sources == ()
        assert config.strip == DEFAULT_STRIP == 1
        assert config.skip_check is False
        assert config.check_args == DEFAULT_CHECK_ARGS == ("--version",)
        assert config.version_range is None

    def test_negative_strip_rejected(self) -> None:
        """Negative strip raises ValueError."""
        with pytest.raises(ValueError, match="non-negative"):
            Configuration(strip=-1)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_full_file(self, tmp_path: Path) -> None:
        """Every supported key is read."""
        path = _write(
            tmp_path,
            """
[binary]
name = "gifsicle"
dest = "vendor"
version = ">=1.71"
strip = 0
skip_check = true
check_args = ["--help"]

[[source]]
url = "https://example.com/gifsicle-linux.tar.gz"
os = "linux"
arch = "x64"

[[source]]
url = "https://example.com/gifsicle-any.tar.gz"
""",
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        config = result.value
        assert config.binary == "gifsicle"
        assert config.dest == (tmp_path / "vendor").resolve()
        assert config.version_range == ">=1.71"
        assert config.strip == 0
        assert config.skip_check is True
        assert config.check_args == ("--help",)
        assert config.version_args == ("--version",)
        assert config.sources == (
            SourceDescriptor("https://example.com/gifsicle-linux.tar.gz", "linux", "x64"),
            SourceDescriptor("https://example.com/gifsicle-any.tar.gz"),
        )

    def test_dest_defaults_to_file_directory(self, tmp_path: Path) -> None:
        """dest defaults to the config file's directory."""
        path = _write(tmp_path, '[binary]\nname = "tool"\n')

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.dest == tmp_path.resolve()
        assert result.value.sources == ()

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a ConfigError."""
        result = load_config(tmp_path / "missing.toml")
        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Malformed TOML is a ConfigError."""
        path = _write(tmp_path, "[binary\nname=")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_missing_binary_table(self, tmp_path: Path) -> None:
        """The [binary] table is required."""
        result = load_config(_write(tmp_path, 'title = "x"\n'))
        assert isinstance(result, Err)
        assert "[binary]" in result.error.message

    def test_missing_name(self, tmp_path: Path) -> None:
        """binary.name is required."""
        result = load_config(_write(tmp_path, '[binary]\ndest = "vendor"\n'))
        assert isinstance(result, Err)
        assert "binary.name" in result.error.message

    def test_invalid_range(self, tmp_path: Path) -> None:
        """An invalid version range is rejected."""
        result = load_config(_write(tmp_path, '[binary]\nname = "t"\nversion = "not-a-range"\n'))
        assert isinstance(result, Err)
        assert "not-a-range" in result.error.message

    def test_invalid_source_url(self, tmp_path: Path) -> None:
        """An invalid source URL is rejected."""
        path = _write(
            tmp_path,
            '[binary]\nname = "t"\n\n[[source]]\nurl = "ftp://example.com/t.tgz"\n',
        )
        result = load_config(path)
        assert isinstance(result, Err)
        assert "ftp" in result.error.message

    def test_source_without_url(self, tmp_path: Path) -> None:
        """A source needs a url."""
        path = _write(tmp_path, '[binary]\nname = "t"\n\n[[source]]\nos = "linux"\n')
        result = load_config(path)
        assert isinstance(result, Err)
        assert "missing 'url'" in result.error.message

    @pytest.mark.parametrize("value", ["-1", "true", '"2"'])
    def test_bad_strip(self, tmp_path: Path, value: str) -> None:
        """strip must be a non-negative integer."""
        result = load_config(_write(tmp_path, f'[binary]\nname = "t"\nstrip = {value}\n'))
        assert isinstance(result, Err)
        assert "strip" in result.error.message

    def test_bad_skip_check(self, tmp_path: Path) -> None:
        """skip_check must be a boolean."""
        result = load_config(_write(tmp_path, '[binary]\nname = "t"\nskip_check = "yes"\n'))
        assert isinstance(result, Err)
        assert "skip_check" in result.error.message

    def test_bad_args(self, tmp_path: Path) -> None:
        """check_args must be strings."""
        result = load_config(_write(tmp_path, '[binary]\nname = "t"\ncheck_args = [1, 2]\n'))
        assert isinstance(result, Err)
        assert "string lists" in result.error.message
