from __future__ import annotations

import typer

from semtag import __version__
from semtag.cli.commands.last_version_cmd import last_version_cmd, list_cmd
from semtag.cli.commands.next_version_cmd import bump_cmd, next_version_cmd

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Semantic versioning from git tags and conventional commits.",
)


# Commands
app.command("next-version")(next_version_cmd)
app.command("bump")(bump_cmd)
app.command("last-version")(last_version_cmd)
app.command("list")(list_cmd)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
) -> None:
    pass


def main() -> None:
    app()
