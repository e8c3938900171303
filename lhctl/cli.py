"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging
from importlib import metadata

import typer

from lhctl.core.errors import LhctlError
from lhctl.core.model import Command
from lhctl.core.service import LighthouseService

app = typer.Typer(help="Power control for Lighthouse base stations over BLE")

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def _version_callback(value: bool) -> None:
    if value:
        try:
            version = metadata.version("lhctl")
        except metadata.PackageNotFoundError:
            version = "unknown"
        typer.echo(f"lhctl {version}")
        raise typer.Exit()


def _configure_logging(verbose: int, config_level: str | None) -> None:
    if verbose:
        level = _VERBOSITY_LEVELS[min(verbose, len(_VERBOSITY_LEVELS) - 1)]
    elif config_level:
        level = logging.getLevelName(config_level)
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def main(
    command: Command = typer.Argument(..., help="Power state to set, or 'scan' to only show it"),
    names: list[str] | None = typer.Argument(
        None,
        help=(
            "Base station names to control or show. If nothing is specified, "
            "scan endlessly and act on every discovered base station."
        ),
        show_default=False,
    ),
    adapter: str | None = typer.Option(None, "--adapter", "-a", help="Bluetooth adapter, e.g. hci0"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Log more (repeat for debug)"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Show or set the power state of nearby base stations."""
    try:
        service = LighthouseService()
        _configure_logging(verbose, service.config.log_level)
        asyncio.run(
            service.scan(
                command,
                names or (),
                adapter_name=adapter,
                echo=typer.echo,
            )
        )
    except LhctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    except KeyboardInterrupt:
        raise typer.Exit(code=130) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
