"""cept watch command - keep the test tree fresh while files change."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click
from rich.markup import escape

from ceptplane.cli.utils import get_console, install_cancel_handler, resolve_roots
from ceptplane.config.loader import load_config
from ceptplane.config.models import CeptPlaneConfig
from ceptplane.daemon.watcher import TestFileWatcher
from ceptplane.testing.models import NodeKind, TestNode
from ceptplane.testing.ops import CodeceptionController
from ceptplane.testing.sink import ConsoleSink


def _print_summary(roots: list[TestNode]) -> None:
    console = get_console()
    if not roots:
        console.print("No Codeception tests found.", style="yellow", highlight=False)
        return
    for project in roots:
        nodes = list(project.walk())
        files = sum(1 for n in nodes if n.kind is NodeKind.FILE)
        methods = sum(1 for n in nodes if n.kind is NodeKind.METHOD)
        console.print(
            f"[bold]{escape(project.label)}[/bold]: {len(project.children)} suites, "
            f"{files} files, {methods} tests",
            highlight=False,
        )


async def _watch(roots: list[Path], debounce: float | None) -> None:
    overrides: dict[str, object] = {}
    if debounce is not None:
        overrides["watcher"] = {"debounce_sec": debounce}

    def config_loader(workspace_root: Path) -> CeptPlaneConfig:
        return load_config(workspace_root, **overrides)

    controller = CodeceptionController(
        roots,
        ConsoleSink(show_output=False),
        config_loader=config_loader,
        on_refresh=_print_summary,
    )

    stop_event = asyncio.Event()
    install_cancel_handler(stop_event)

    controller.start()
    watcher = TestFileWatcher(
        workspace_roots=roots,
        on_change=controller.handle_changes,
        is_relevant=controller.is_relevant_change,
    )
    await watcher.start()
    get_console().print("Watching for test changes. Press Ctrl+C to stop.", style="dim")
    try:
        await stop_event.wait()
    finally:
        await watcher.stop()
        await controller.close()


@click.command()
@click.argument("roots", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--debounce",
    type=float,
    default=None,
    help="Quiet period in seconds before a rebuild. Overrides config.",
)
def watch_command(roots: tuple[Path, ...], debounce: float | None) -> None:
    """Watch workspace folders and rebuild the test tree on change.

    ROOTS are workspace folders (default: current directory).
    """
    workspace_roots = resolve_roots(roots)
    if not load_config(workspace_roots[0]).watcher.enabled:
        raise click.ClickException("File watching is disabled in configuration.")
    asyncio.run(_watch(workspace_roots, debounce))
