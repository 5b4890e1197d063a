from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer

from binwrap import __version__
from binwrap.core.config import Configuration, load_config
from binwrap.core.errors import ErrorCode, InvalidConfiguration
from binwrap.core.result import Err
from binwrap.output.console import RichConsole, Style
from binwrap.output.errors import bin_error_exit_code, print_bin_error
from binwrap.platform.detection import detect
from binwrap.wrapper import BinWrapper


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Inspect and run binwrap configurations.",
)


def _load(config_path: Path, console: RichConsole) -> Configuration:
    result = load_config(config_path)
    if isinstance(result, Err):
        console.error(str(result.error))
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return result.value


@app.command()
def run(
    config_path: Path = typer.Argument(..., metavar="CONFIG", help="binwrap TOML file."),
    skip_check: bool = typer.Option(False, "--skip-check", help="Do not run the binary."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide progress output."),
) -> None:
    """Download the binary if missing, verify it, print its path."""
    from binwrap.output.progress import RichProgressObserver

    console = RichConsole()
    config = _load(config_path, console)
    if skip_check:
        config = replace(config, skip_check=True)

    with RichProgressObserver(console.rich, disable=quiet) as observer:
        wrapper = BinWrapper.from_config(
            config,
            observer=observer,
            console=None if quiet else console,
        )
        result = wrapper.run()

    if isinstance(result, Err):
        print_bin_error(result.error, console)
        raise typer.Exit(code=bin_error_exit_code(result.error))
    typer.echo(str(result.value))


@app.command()
def path(
    config_path: Path = typer.Argument(..., metavar="CONFIG", help="binwrap TOML file."),
) -> None:
    """Print where the binary is expected to live."""
    console = RichConsole()
    config = _load(config_path, console)
    try:
        resolved = BinWrapper.from_config(config).path()
    except InvalidConfiguration as e:
        print_bin_error(e.error, console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    typer.echo(str(resolved))


@app.command()
def sources(
    config_path: Path = typer.Argument(..., metavar="CONFIG", help="binwrap TOML file."),
) -> None:
    """List configured sources, marking those usable on this platform."""
    console = RichConsole(stderr=False)
    config = _load(config_path, console)
    info = detect()

    console.print(f"platform: {info}", Style.DIM)
    if not config.sources:
        console.warning("no sources configured")
        return
    for source in config.sources:
        tags = "-".join(tag for tag in (source.os, source.arch) if tag) or "any"
        if source.applies_to(info.os_name, info.arch_name):
            console.success(f"{source.url} ({tags})")
        else:
            console.print(f"-  {source.url} ({tags})", Style.DIM)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
