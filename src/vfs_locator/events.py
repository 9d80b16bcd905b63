"""
vfs_locator/events.py - File system invalidation bus

Publishes "the set of available file systems changed" to subscribed
listeners. The bus is an ordinary object passed to whoever needs it; there
is no process-wide instance.
"""

import concurrent.futures
import logging
import threading
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class FileSystemEventListener(Protocol):
    """Anything that wants to hear about file system set changes"""

    def handle_fs_event(self) -> None: ...


class InvalidationBus:
    """
    Publish/subscribe channel for invalidation notifications.

    Delivery is fire-and-forget: ``notify_changed`` hands every listener to
    a worker pool and returns immediately. Order and delivery thread are
    unspecified. Listener failures are logged and never reach the notifier.
    """

    def __init__(self, synchronous: bool = False, max_workers: int = 2):
        """
        Args:
            synchronous: Deliver inline on the notifying thread
            max_workers: Worker threads used for asynchronous delivery
        """
        self.synchronous = synchronous
        self.max_workers = max_workers
        self._listeners: tuple[FileSystemEventListener, ...] = ()
        self._lock = threading.Lock()
        self._executor: concurrent.futures.ThreadPoolExecutor | None = None
        self._closed = False

    def subscribe(self, listener: FileSystemEventListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners = self._listeners + (listener,)

    def unsubscribe(self, listener: FileSystemEventListener) -> None:
        """Remove a listener; unknown listeners are ignored"""
        with self._lock:
            self._listeners = tuple(
                existing for existing in self._listeners if existing is not listener
            )

    def listeners(self) -> tuple[FileSystemEventListener, ...]:
        return self._listeners

    def notify_changed(self) -> list[concurrent.futures.Future]:
        """
        Tell every listener that the file system set changed.

        Returns:
            One future per listener, already completed in synchronous mode.
            Empty once the bus is closed.
        """
        if self._closed:
            logger.debug("InvalidationBus is closed, dropping notification")
            return []
        listeners = self._listeners
        logger.debug(f"Notifying {len(listeners)} file system listener(s)")

        if self.synchronous:
            futures = []
            for listener in listeners:
                future: concurrent.futures.Future = concurrent.futures.Future()
                self._deliver(listener)
                future.set_result(None)
                futures.append(future)
            return futures

        # close() cannot shut the pool down between these submits
        with self._lock:
            if self._closed:
                logger.debug("InvalidationBus is closed, dropping notification")
                return []
            executor = self._get_executor()
            return [executor.submit(self._deliver, listener) for listener in listeners]

    def close(self) -> None:
        """Stop the worker pool after pending deliveries finish"""
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def _get_executor(self) -> concurrent.futures.ThreadPoolExecutor:
        """Create the worker pool on first use; caller holds the lock"""
        if self._executor is None:
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="vfs-invalidation",
            )
        return self._executor

    @staticmethod
    def _deliver(listener: FileSystemEventListener) -> None:
        try:
            listener.handle_fs_event()
        except Exception:
            logger.exception(f"File system listener {listener!r} failed")
