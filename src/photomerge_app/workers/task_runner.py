"""Run merge and save work on the Qt thread pool."""
from __future__ import annotations

import traceback
from typing import Any, Callable

from loguru import logger
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal


class TaskSignals(QObject):
    """Signals emitted back on the receiver's thread."""

    finished = pyqtSignal(object)
    failed = pyqtSignal(object)


class FunctionTask(QRunnable):
    """Wrap a callable so its result or exception comes back as a signal."""

    def __init__(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = TaskSignals()

    def run(self) -> None:
        try:
            result = self.fn(*self.args, **self.kwargs)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Task {} raised:\n{}", getattr(self.fn, "__name__", self.fn), traceback.format_exc())
            self.signals.failed.emit(exc)
        else:
            self.signals.finished.emit(result)


class TaskRunner:
    """Submit tasks to the global pool, or run them inline for GUI-bound work."""

    def __init__(self, max_threads: int | None = None) -> None:
        self._pool = QThreadPool.globalInstance()
        if max_threads is not None:
            self._pool.setMaxThreadCount(max_threads)

    def submit(self, task: FunctionTask) -> None:
        self._pool.start(task)

    def run_inline(self, task: FunctionTask) -> None:
        task.run()
