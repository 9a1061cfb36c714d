"""cept discover command - print the test tree."""

import json
from pathlib import Path

import click

from ceptplane.cli.utils import get_console, node_to_dict, render_tree, resolve_roots
from ceptplane.testing.ops import CodeceptionController
from ceptplane.testing.sink import ConsoleSink


@click.command()
@click.argument("roots", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def discover_command(roots: tuple[Path, ...], as_json: bool) -> None:
    """Discover Codeception tests and print the tree.

    ROOTS are workspace folders (default: current directory).
    """
    workspace_roots = resolve_roots(roots)
    controller = CodeceptionController(workspace_roots, ConsoleSink(show_output=False))
    projects = controller.start()

    if as_json:
        click.echo(json.dumps([node_to_dict(p) for p in projects], indent=2))
        return

    console = get_console()
    if not projects:
        console.print("No Codeception tests found.", style="yellow", highlight=False)
        return
    for project in projects:
        console.print(render_tree(project))
