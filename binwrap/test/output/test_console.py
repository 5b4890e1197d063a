"""Tests for binwrap.output.console module."""

from __future__ import annotations

import pytest

from binwrap.output.console import ConsoleProtocol, MockConsole, QuietConsole, RichConsole, Style


class TestMockConsole:
    """Tests for MockConsole."""

    def test_records_styles(self) -> None:
        """Messages are recorded with their style."""
        console = MockConsole()
        console.print("plain")
        console.print("faint", Style.DIM)
        console.success("done")
        console.warning("careful")
        console.info("fyi")

        assert console.messages == ["plain", "faint", "OK done", "warning: careful", "info: fyi"]
        assert [o.style for o in console.outputs] == [
            Style.DEFAULT,
            Style.DIM,
            Style.SUCCESS,
            Style.WARNING,
            Style.INFO,
        ]
        assert not console.has_error()

    def test_error(self) -> None:
        """error() records an ERROR message."""
        console = MockConsole()
        console.error("boom")
        assert console.has_error()
        assert console.text == "error: boom"

    def test_find(self) -> None:
        """find() searches recorded text."""
        console = MockConsole()
        console.print("downloading gifsicle")
        console.print("ready")
        assert [o.message for o in console.find("gifsicle")] == ["downloading gifsicle"]


class TestQuietConsole:
    """Tests for QuietConsole."""

    def test_discards(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Nothing reaches stdout or stderr."""
        console: ConsoleProtocol = QuietConsole()
        console.print("x")
        console.error("y")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestRichConsole:
    """Tests for RichConsole."""

    def test_writes_to_stderr_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Output goes to stderr."""
        console = RichConsole()
        console.error("no binary [bold]found[/bold]")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error:" in captured.err
        # Markup in messages is printed literally
        assert "[bold]found[/bold]" in captured.err

    def test_stdout_mode(self, capsys: pytest.CaptureFixture[str]) -> None:
        """stderr=False writes to stdout."""
        RichConsole(stderr=False).print("hello", Style.SUCCESS)
        assert "hello" in capsys.readouterr().out

    def test_style_str(self) -> None:
        """Style renders as its name."""
        assert str(Style.WARNING) == "warning"
