"""Background refresh: debounced scheduling and file watching."""

from ceptplane.daemon.scheduler import DeferredTask
from ceptplane.daemon.watcher import TestFileWatcher

__all__ = ["DeferredTask", "TestFileWatcher"]
