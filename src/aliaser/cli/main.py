import typer

from aliaser.common import L, bus, text
from .rendering import CliRenderer

from .commands.shorten import shorten_command

app = typer.Typer(
    name="aliaser",
    help=text(L.cli.app.description),
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=text(L.cli.option.verbose.help)
    ),
):
    # The CLI is the composition root. It decides *which* renderer to use.
    cli_renderer = CliRenderer(verbose=verbose)
    bus.set_renderer(cli_renderer)
    ctx.obj = {"verbose": verbose}


# Register commands
app.command(name="shorten", help=text(L.cli.command.shorten.help))(shorten_command)


if __name__ == "__main__":
    app()
