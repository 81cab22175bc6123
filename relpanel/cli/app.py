from __future__ import annotations

import typer

from relpanel import __version__
from relpanel.cli.commands.reconcile import reconcile
from relpanel.cli.commands.replay import replay
from relpanel.cli.commands.session import session_app
from relpanel.cli.commands.suggest import suggest

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(reconcile)
app.command()(suggest)
app.command()(replay)

# Sub-apps
app.add_typer(session_app, name="session")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    pass


def main() -> None:
    app()
