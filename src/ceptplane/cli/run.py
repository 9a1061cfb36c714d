"""cept run command - run tests and report per-node results."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console

from ceptplane.cli.utils import get_console, install_cancel_handler, resolve_roots
from ceptplane.config.loader import load_config
from ceptplane.config.models import CeptPlaneConfig
from ceptplane.core.errors import ConfigError
from ceptplane.testing.models import RunResult, RunScope
from ceptplane.testing.ops import CodeceptionController
from ceptplane.testing.sink import ConsoleSink


def _result_to_dict(result: RunResult) -> dict[str, object]:
    return {
        "run_id": result.run_id,
        "failed": result.failed,
        "cancelled": result.cancelled,
        "duration_seconds": round(result.duration_seconds, 3),
        "roots": [
            {
                "node_id": r.node_id,
                "exit_code": r.exit_code,
                "cancelled": r.cancelled,
                "report_path": r.report_path,
                "records": r.record_count,
                "state": r.state.value,
            }
            for r in result.roots
        ],
        "states": {node_id: state.value for node_id, state in result.states.items()},
        "messages": result.messages,
    }


async def _run(controller: CodeceptionController, node_ids: list[str] | None) -> RunResult:
    scope = RunScope(node_ids=node_ids)
    install_cancel_handler(scope.cancel_event)
    controller.start()
    try:
        return await controller.run(scope)
    finally:
        await controller.close()


@click.command()
@click.argument("roots", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--node",
    "node_ids",
    multiple=True,
    help="Node id to run (repeatable). Default: every project.",
)
@click.option(
    "--format",
    "formats",
    multiple=True,
    type=click.Choice(["junit", "phpunit", "html"]),
    help="Report format to request (repeatable). Overrides config.",
)
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
def run_command(
    roots: tuple[Path, ...],
    node_ids: tuple[str, ...],
    formats: tuple[str, ...],
    as_json: bool,
) -> None:
    """Run Codeception tests.

    ROOTS are workspace folders (default: current directory). Exits with
    status 1 if any run root failed.
    """
    workspace_roots = resolve_roots(roots)

    overrides: dict[str, object] = {}
    if formats:
        overrides["workspace"] = {"report_formats": list(formats)}

    def config_loader(workspace_root: Path) -> CeptPlaneConfig:
        try:
            return load_config(workspace_root, **overrides)
        except ConfigError as e:
            raise click.ClickException(str(e)) from e

    # Nothing but the JSON document in JSON mode
    console = Console(stderr=True, quiet=True) if as_json else get_console()
    sink = ConsoleSink(console, show_output=not as_json)
    controller = CodeceptionController(workspace_roots, sink, config_loader=config_loader)
    result = asyncio.run(_run(controller, list(node_ids) or None))

    if as_json:
        click.echo(json.dumps(_result_to_dict(result), indent=2))
    elif result.cancelled:
        console.print("Run cancelled.", style="yellow", highlight=False)
    if result.failed:
        raise SystemExit(1)
