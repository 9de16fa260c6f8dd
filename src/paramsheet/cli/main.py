import typer

from .._version import __version__
from .config import app as config_app
from .extract import describe_command, discover_command, matrix_command, targeted_command, variants_command


__all__ = ["app", "run"]


app = typer.Typer(help="Extract parameter matrices from engineering spreadsheets", add_completion=False)


@app.callback(invoke_without_command=True)
def version_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show paramsheet version and exit", is_eager=True),
) -> None:
    """Handle global options before any sub-command executes."""

    if version:
        typer.echo(f"paramsheet {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.command("matrix", help="Parse the parameter x variant matrix of a sheet.")(matrix_command)
app.command("discover", help="Synthesize parameter groups from the sheet layout alone.")(discover_command)
app.command("targeted", help="Look up a known list of parameters anywhere in the sheet.")(targeted_command)
app.command("describe", help="Read the project description key/value block.")(describe_command)
app.command("variants", help="List the names under the customer platform variants landmark.")(variants_command)
app.add_typer(config_app, name="config")


def run() -> None:
    """Entry point compatible with ``python -m paramsheet.cli.main`` and console scripts."""

    from typer.main import get_command

    cli = get_command(app)
    cli()


if __name__ == "__main__":
    run()
