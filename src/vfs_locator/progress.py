"""
vfs_locator/progress.py - Progress reporting and cancellation contexts

Every resolver operation that can block takes a progress monitor. Monitors
are safe to cancel from another thread.
"""

import logging
import threading

from vfs_locator.exceptions import OperationCanceledError

logger = logging.getLogger(__name__)


class ProgressMonitor:
    """Silent progress monitor with cooperative cancellation."""

    def __init__(self) -> None:
        self._canceled = threading.Event()
        self.task_name: str | None = None
        self.total_work = 0
        self.work_done = 0

    def begin_task(self, name: str, total_work: int = 0) -> None:
        """Start a named task of ``total_work`` units"""
        self.task_name = name
        self.total_work = total_work
        self.work_done = 0

    def subtask(self, name: str) -> None:
        """Report the current step of the running task"""

    def worked(self, amount: int = 1) -> None:
        """Advance the running task"""
        self.work_done += amount

    def done(self) -> None:
        """Finish the running task"""
        self.task_name = None

    def cancel(self) -> None:
        """Request cancellation; honoured at the next check"""
        self._canceled.set()

    @property
    def is_canceled(self) -> bool:
        return self._canceled.is_set()

    def check_canceled(self) -> None:
        """Raise OperationCanceledError if cancellation was requested"""
        if self.is_canceled:
            raise OperationCanceledError(
                f"Operation canceled: {self.task_name or 'unnamed task'}"
            )


class LoggingProgressMonitor(ProgressMonitor):
    """
    Non-interactive monitor that reports through logging.

    Used for work nobody is watching, such as rebuilds triggered by
    invalidation events.
    """

    def __init__(self, log: logging.Logger | None = None, level: int = logging.DEBUG):
        super().__init__()
        self._log = log or logger
        self._level = level

    def begin_task(self, name: str, total_work: int = 0) -> None:
        super().begin_task(name, total_work)
        self._log.log(self._level, f"{name} (0/{total_work})")

    def subtask(self, name: str) -> None:
        self._log.log(self._level, f"{self.task_name}: {name}")

    def worked(self, amount: int = 1) -> None:
        super().worked(amount)
        self._log.log(
            self._level, f"{self.task_name} ({self.work_done}/{self.total_work})"
        )

    def done(self) -> None:
        self._log.log(self._level, f"{self.task_name} done")
        super().done()
