"""Tests for binwrap.core.errors module."""

from pathlib import Path

import pytest

from binwrap.core.errors import (
    BinaryNotWorking,
    ChmodFailed,
    DownloadFailed,
    ErrorCode,
    ExistenceCheckFailed,
    InvalidConfiguration,
    InvalidUrl,
    InvalidVersionRange,
    NoMatchingBinary,
    PathTraversal,
    VersionMismatch,
)
from binwrap.fetch.http import HttpError


class TestErrorCode:
    """Tests for ErrorCode."""

    def test_values_are_stable(self) -> None:
        """Exit codes are part of the CLI contract."""
        assert ErrorCode.OK == 0
        assert ErrorCode.USER_ERROR == 1
        assert ErrorCode.ENV_ERROR == 2
        assert ErrorCode.VERIFY_ERROR == 3
        assert ErrorCode.NETWORK_ERROR == 4
        assert ErrorCode.IO_ERROR == 5

    def test_str(self) -> None:
        """ErrorCode renders as lowercase words."""
        assert str(ErrorCode.NETWORK_ERROR) == "network error"


class TestMessages:
    """Each error renders a readable message."""

    def test_invalid_url(self) -> None:
        """InvalidUrl names the URL and reason."""
        err = InvalidUrl(url="ftp://x", reason="unsupported scheme 'ftp'")
        assert "ftp://x" in str(err)
        assert "unsupported scheme" in str(err)

    def test_invalid_version_range(self) -> None:
        """InvalidVersionRange names the range."""
        err = InvalidVersionRange(range="not-a-range", reason="invalid comparator")
        assert str(err) == "Invalid version range 'not-a-range': invalid comparator"

    def test_path_traversal(self) -> None:
        """PathTraversal names the offending path."""
        err = PathTraversal(root=Path("/opt/vendor"), candidate=Path("/etc/passwd"))
        assert "escapes" in str(err)

    def test_no_matching_binary(self) -> None:
        """NoMatchingBinary names the platform."""
        err = NoMatchingBinary(os_name="linux", arch="arm", path=Path("/opt/vendor/gifsicle"))
        message = str(err)
        assert message.startswith("No binary found matching your system")
        assert "It's probably not supported" in message
        assert "linux-arm" in message

    def test_download_failed_includes_cause(self) -> None:
        """DownloadFailed shows the underlying error."""
        cause = HttpError(url="https://example.com/a.tgz", status=404, message="Not Found")
        err = DownloadFailed(url="https://example.com/a.tgz", cause=cause)
        assert "HTTP 404" in str(err)

    def test_chmod_failed(self) -> None:
        """ChmodFailed names the file."""
        err = ChmodFailed(path=Path("/x/tool"), message="Operation not permitted")
        assert "executable" in str(err)

    def test_binary_not_working(self) -> None:
        """BinaryNotWorking includes the detail."""
        err = BinaryNotWorking(path=Path("/x/tool"), detail="exit 1")
        assert "doesn't seem to work correctly" in str(err)

    def test_version_mismatch(self) -> None:
        """VersionMismatch shows version and range."""
        err = VersionMismatch(path=Path("/x/tool"), version="1.0.0", range=">=2")
        assert "1.0.0" in str(err)
        assert ">=2" in str(err)

    def test_version_mismatch_without_version(self) -> None:
        """A missing version is reported as undetected."""
        err = VersionMismatch(path=Path("/x/tool"), version=None, range=">=2")
        assert "Could not find a version" in str(err)

    def test_existence_check_failed(self) -> None:
        """ExistenceCheckFailed includes the OS message."""
        err = ExistenceCheckFailed(path=Path("/x/tool"), message="Permission denied")
        assert "Permission denied" in str(err)


class TestInvalidConfiguration:
    """Tests for InvalidConfiguration."""

    def test_is_value_error_carrying_error(self) -> None:
        """InvalidConfiguration is a ValueError holding the typed error."""
        error = InvalidUrl(url="nope", reason="URL has no host")
        with pytest.raises(ValueError) as exc_info:
            raise InvalidConfiguration(error)
        assert isinstance(exc_info.value, InvalidConfiguration)
        assert exc_info.value.error is error
        assert str(exc_info.value) == str(error)

    def test_errors_are_frozen(self) -> None:
        """Error dataclasses are immutable."""
        err = InvalidUrl(url="a", reason="b")
        with pytest.raises(AttributeError):
            err.url = "c"  # type: ignore[misc]
