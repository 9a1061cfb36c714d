"""CLI utilities."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ceptplane.testing.models import NodeKind, TestNode

_console = Console(stderr=True)


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def resolve_roots(paths: Sequence[Path]) -> list[Path]:
    """Workspace folders from the command line, the current directory if none.

    Raises:
        click.ClickException: If a path is not a directory
    """
    if not paths:
        return [Path.cwd().resolve()]
    roots: list[Path] = []
    for path in paths:
        resolved = path.resolve()
        if not resolved.is_dir():
            raise click.ClickException(f"Not a directory: {path}")
        if resolved not in roots:
            roots.append(resolved)
    return roots


def node_to_dict(node: TestNode) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "kind": node.kind.value,
    }
    if node.location is not None:
        data["path"] = str(node.location.path)
        if node.location.start_line is not None:
            data["line"] = node.location.start_line
    if node.children:
        data["children"] = [node_to_dict(c) for c in node.children.values()]
    return data


_KIND_STYLES = {
    NodeKind.PROJECT: "bold",
    NodeKind.SUITE: "cyan",
    NodeKind.FILE: "",
    NodeKind.METHOD: "dim",
    NodeKind.DATASET: "dim italic",
}


def render_tree(node: TestNode, tree: Tree | None = None) -> Tree:
    """Rich tree of a node and everything below it."""
    style = _KIND_STYLES[node.kind]
    label = escape(node.label)
    if style:
        label = f"[{style}]{label}[/{style}]"
    branch = tree.add(label) if tree is not None else Tree(label)
    for child in node.children.values():
        render_tree(child, branch)
    return branch


def install_cancel_handler(cancel_event: asyncio.Event) -> None:
    """Set ``cancel_event`` on SIGINT/SIGTERM instead of interrupting the loop."""
    loop = asyncio.get_running_loop()

    def handler() -> None:
        cancel_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, handler)
