"""CeptPlane CLI - cept command."""

import click

from ceptplane import __version__
from ceptplane.cli.discover import discover_command
from ceptplane.cli.run import run_command
from ceptplane.cli.watch import watch_command
from ceptplane.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="cept")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """CeptPlane - Codeception test discovery and runs from the command line."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(discover_command, name="discover")
cli.add_command(run_command, name="run")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
