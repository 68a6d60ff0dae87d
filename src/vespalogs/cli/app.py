"""Typer CLI for reading Vespa application logs."""

from __future__ import annotations

import dataclasses
import logging
import sys
from typing import Annotated, Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from vespalogs import __version__
from vespalogs.config import VespaLogsConfig
from vespalogs.errors import VespaLogsError
from vespalogs.logging_setup import setup_logging
from vespalogs.models.version import Version

app = typer.Typer(
    name="vespalogs",
    help="Read application logs from a Vespa deployment.",
    no_args_is_help=True,
)
console = Console(stderr=True)


def _config(
    target: str | None = None,
    application: str | None = None,
    zone: str | None = None,
) -> VespaLogsConfig:
    config = VespaLogsConfig.load()
    overrides = {
        k: v
        for k, v in {"target": target, "application": application, "zone": zone}.items()
        if v is not None
    }
    if overrides:
        config = dataclasses.replace(
            config, target=dataclasses.replace(config.target, **overrides)
        )
    return config


def _http_client(config: VespaLogsConfig) -> httpx.Client:
    return httpx.Client(timeout=config.query.timeout)


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True, highlight=False)
    return typer.Exit(1)


@app.command()
def log(
    relative: Annotated[
        Optional[str],
        typer.Argument(help="Relative period ending now, e.g. 1h or 30m"),
    ] = None,
    from_: Annotated[
        Optional[str],
        typer.Option("--from", help="Start time, e.g. 2021-09-27T10:00:00Z"),
    ] = None,
    to: Annotated[
        Optional[str],
        typer.Option("--to", help="End time, e.g. 2021-09-27T11:00:00Z"),
    ] = None,
    target: Annotated[
        Optional[str], typer.Option("--target", "-t", help="local or cloud")
    ] = None,
    application: Annotated[
        Optional[str],
        typer.Option("--application", "-a", help="<tenant>.<application>.<instance>"),
    ] = None,
    zone: Annotated[
        Optional[str], typer.Option("--zone", "-z", help="<environment>.<region>")
    ] = None,
    dequote_newlines: Annotated[
        bool,
        typer.Option("--dequote-newlines", help="Expand escaped newlines in messages"),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Debug logging on stderr")
    ] = False,
) -> None:
    """Show log entries for an application."""
    from vespalogs.core.fetcher import LogFetcher

    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = _config(target=target, application=application, zone=zone)
        with _http_client(config) as client:
            fetcher = LogFetcher(
                config,
                client,
                client_version=Version.parse(__version__),
                out=sys.stdout,
                console=console,
                dequote_newlines=dequote_newlines,
            )
            fetcher.run(from_arg=from_, to_arg=to, relative=relative)
    except VespaLogsError as e:
        raise _fail(str(e)) from e


@app.command()
def version() -> None:
    """Show the version of this client."""
    typer.echo(f"vespalogs version {__version__}")


def main() -> None:
    """Entry point for the vespalogs CLI."""
    app()


if __name__ == "__main__":
    main()
