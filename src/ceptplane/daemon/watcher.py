"""File watcher that keeps the test tree in step with the workspace.

Only two directory levels can change the tree: ``tests/`` (suite
definitions, suite directories) and ``tests/<suite>/`` (test sources).
The watcher therefore builds an explicit directory list and passes it to
awatch with recursive=False, restarting when a directory appears or goes
away at one of those levels.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from ceptplane.config.constants import TESTS_DIR

logger = structlog.get_logger()


def _collect_watch_dirs(workspace_roots: Sequence[Path]) -> list[Path]:
    """Workspace roots, their test roots and the suite directories below them."""
    dirs: list[Path] = []
    for root in workspace_roots:
        if not root.is_dir():
            continue
        dirs.append(root)
        tests_dir = root / TESTS_DIR
        if not tests_dir.is_dir():
            continue
        dirs.append(tests_dir)
        try:
            entries = sorted(tests_dir.iterdir())
        except OSError as e:
            logger.warning("watch_dir_unreadable", path=str(tests_dir), error=str(e))
            continue
        dirs.extend(p for p in entries if p.is_dir() and not p.name.startswith((".", "_")))
    return dirs


def _accept_all(_path: Path) -> bool:
    return True


@dataclass
class TestFileWatcher:
    """Async watcher forwarding relevant test file changes in batches.

    ``on_change`` receives the relevant paths of one awatch batch. awatch
    already coalesces bursts within its step, longer quiet periods are the
    caller's business (see ``CodeceptionController.schedule_refresh``).
    """

    __test__ = False  # not a pytest class

    workspace_roots: list[Path]
    on_change: Callable[[list[Path]], object]
    is_relevant: Callable[[Path], bool] = _accept_all
    step_ms: int = 500

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _watched_dirs: set[Path] = field(default_factory=set, init=False)

    @property
    def running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    @property
    def watched_dirs(self) -> set[Path]:
        return set(self._watched_dirs)

    async def start(self) -> None:
        """Start watching for file changes."""
        if self._watch_task is not None:
            return
        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "file_watcher_started",
            roots=[str(r) for r in self.workspace_roots],
        )

    async def stop(self) -> None:
        """Stop watching for file changes."""
        self._stop_event.set()
        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None
        logger.info("file_watcher_stopped")

    async def _watch_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                watch_dirs = _collect_watch_dirs(self.workspace_roots)
                self._watched_dirs = set(watch_dirs)
                if not watch_dirs:
                    logger.warning("no_watchable_dirs")
                    return

                logger.debug("watch_dirs_collected", count=len(watch_dirs))
                try:
                    async for changes in awatch(
                        *watch_dirs,
                        recursive=False,
                        step=self.step_ms,
                        stop_event=self._stop_event,
                        ignore_permission_denied=True,
                    ):
                        if self._handle_changes(changes):
                            logger.info("watcher_restart_requested", reason="directories_changed")
                            break
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    if self._stop_event.is_set():
                        return
                    logger.error("watcher_error", error=str(e))
                    await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            pass

    def _affects_watch_dirs(self, change: Change, path: Path) -> bool:
        if change == Change.deleted:
            return path in self._watched_dirs
        if change != Change.added or not path.is_dir():
            return False
        # A new test root or a new suite directory
        return any(
            path == root / TESTS_DIR or path.parent == root / TESTS_DIR
            for root in self.workspace_roots
        )

    def _handle_changes(self, changes: set[tuple[Change, str]]) -> bool:
        """Forward the relevant paths. Returns whether the watch list must be rebuilt."""
        needs_restart = False
        relevant: list[Path] = []
        for change, path_str in changes:
            path = Path(path_str)
            if self._affects_watch_dirs(change, path):
                needs_restart = True
            if self.is_relevant(path):
                relevant.append(path)
            else:
                logger.debug("path_ignored", path=path_str, change_type=change.name)

        if relevant:
            relevant.sort()
            logger.info("changes_detected", count=len(relevant))
            self.on_change(relevant)
        return needs_restart
