"""
vfs_locator/fs_manager.py - Per-project virtual file system resolver
"""

import logging
import os
import threading
from pathlib import Path, PurePath
from typing import Any

from vfs_locator.events import InvalidationBus
from vfs_locator.exceptions import (
    MissingTypeError,
    OperationCanceledError,
    ProviderNotFoundError,
    RebuildError,
    ResolutionError,
    ResolverClosedError,
    VFSError,
)
from vfs_locator.location import (
    LocationURI,
    has_scheme,
    is_local_uri,
    parse_location,
    to_local_path,
)
from vfs_locator.progress import LoggingProgressMonitor, ProgressMonitor
from vfs_locator.provider_base import VirtualFileSystem
from vfs_locator.registry import ProviderRegistry
from vfs_locator.snapshot import FileSystemSnapshot

logger = logging.getLogger(__name__)


class FileSystemResolver:
    """
    Resolves local paths and file system URIs for one project.

    Keeps an immutable snapshot of every file system the registered
    providers offer. Readers pick up the current snapshot without locking;
    rebuilds are serialized and publish a complete new snapshot or nothing.
    When given an InvalidationBus the resolver subscribes to it and rebuilds
    on every notification until disposed.
    """

    def __init__(
        self,
        project: Any,
        registry: ProviderRegistry,
        bus: InvalidationBus | None = None,
    ):
        """
        Initialize the resolver

        Args:
            project: Opaque project context handed to providers
            registry: Provider descriptors to enumerate on reload
            bus: Optional invalidation bus to subscribe to
        """
        self._project = project
        self._registry = registry
        self._bus = bus

        self._snapshot: FileSystemSnapshot | None = None
        self._generation = 0
        self._reload_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._closed = False

        # Statistics
        self.stats = {
            "reloads": 0,
            "reload_failures": 0,
        }

        if bus is not None:
            bus.subscribe(self)

    @property
    def project(self) -> Any:
        return self._project

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def snapshot(self) -> FileSystemSnapshot | None:
        """Current snapshot without triggering a build"""
        return self._snapshot

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    # Snapshot management

    def reload(self, progress: ProgressMonitor | None = None) -> FileSystemSnapshot:
        """
        Rebuild the snapshot from every registered provider.

        Only one rebuild runs at a time; concurrent callers wait for the
        running one and then rebuild again.

        Raises:
            RebuildError: if a provider failed to enumerate; the previous
                snapshot stays current
            OperationCanceledError: if ``progress`` was cancelled between
                providers
            ResolverClosedError: if the resolver was disposed
        """
        self._check_open()
        progress = progress or LoggingProgressMonitor()
        with self._reload_lock:
            return self._reload_locked(progress)

    def ensure_snapshot(
        self, progress: ProgressMonitor | None = None
    ) -> FileSystemSnapshot:
        """Return the current snapshot, building it on first use"""
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        self._check_open()
        with self._reload_lock:
            snapshot = self._snapshot
            if snapshot is None:
                snapshot = self._reload_locked(progress or LoggingProgressMonitor())
            return snapshot

    def _reload_locked(self, progress: ProgressMonitor) -> FileSystemSnapshot:
        try:
            snapshot = self._build_snapshot(progress)
        except (RebuildError, OperationCanceledError):
            self.stats["reload_failures"] += 1
            raise

        with self._state_lock:
            if self._closed:
                raise ResolverClosedError(
                    f"Resolver for project '{self._project}' was disposed during reload"
                )
            self._generation = snapshot.generation
            self._snapshot = snapshot

        self.stats["reloads"] += 1
        logger.info(
            f"Loaded {len(snapshot)} file system(s) for project '{self._project}' "
            f"(generation {snapshot.generation})"
        )
        return snapshot

    def _build_snapshot(self, progress: ProgressMonitor) -> FileSystemSnapshot:
        descriptors = self._registry.list_descriptors()
        file_systems: list[VirtualFileSystem] = []

        progress.begin_task("Load file systems", len(descriptors))
        try:
            for descriptor in descriptors:
                progress.check_canceled()
                progress.subtask(descriptor.label or descriptor.id)
                try:
                    provider = descriptor.get_instance()
                    for fs in provider.get_available_file_systems(progress, self._project):
                        if not isinstance(fs, VirtualFileSystem):
                            raise TypeError(
                                f"expected VirtualFileSystem, got {type(fs).__name__}"
                            )
                        if not fs.fs_type or not fs.fs_id:
                            raise ValueError(
                                f"{type(fs).__name__} has an empty type or id"
                            )
                        file_systems.append(fs)
                except OperationCanceledError:
                    raise
                except Exception as e:
                    raise RebuildError(
                        f"Provider '{descriptor.id}' failed to load file systems "
                        f"for project '{self._project}': {e}",
                        provider_id=descriptor.id,
                        fs_type=descriptor.fs_type,
                        cause=e,
                        project=self._project,
                    ) from e
                progress.worked()
        finally:
            progress.done()

        return FileSystemSnapshot(
            file_systems, project=self._project, generation=self._generation + 1
        )

    # Resolution

    def resolve(
        self, location: str | os.PathLike[str], progress: ProgressMonitor | None = None
    ) -> PurePath:
        """
        Resolve a local path or a file system URI.

        Strings without a scheme separator are plain local paths and are
        returned as-is, without consulting any provider.
        """
        self._check_open()
        if isinstance(location, os.PathLike) or not has_scheme(location):
            return Path(location)
        return self.resolve_uri(location, progress)

    def resolve_uri(
        self, uri: str | LocationURI, progress: ProgressMonitor | None = None
    ) -> PurePath:
        """
        Resolve a URI through the file system it addresses.

        Selection order:
          1. local ``file:`` URIs map straight to a local path
          2. the scheme is the file system type
          3. the ``fs`` query parameter names the instance exactly
          4. otherwise the host (or authority) names the instance if one
             with that id exists
          5. otherwise the first file system of that type is used

        Raises:
            MissingTypeError: URI has no scheme
            ProviderNotFoundError: no file system matches
            ResolutionError: the file system failed to resolve the URI
        """
        self._check_open()
        progress = progress or ProgressMonitor()
        if isinstance(uri, str):
            uri = parse_location(uri)

        if is_local_uri(uri):
            return to_local_path(uri)

        fs_type = uri.scheme
        if not fs_type:
            raise MissingTypeError(uri.raw)

        snapshot = self.ensure_snapshot(progress)
        file_system = self._select(snapshot, fs_type, uri)
        if file_system is None:
            raise ProviderNotFoundError(uri.raw, fs_type, uri.instance_id)

        logger.debug(f"Resolving '{uri}' with {file_system.label}")
        try:
            return file_system.resolve_path(progress, uri)
        except Exception as e:
            raise ResolutionError(uri.raw, e) from e

    def _select(
        self, snapshot: FileSystemSnapshot, fs_type: str, uri: LocationURI
    ) -> VirtualFileSystem | None:
        if uri.fs_id:
            # Explicit instance id is authoritative
            return snapshot.get(fs_type, uri.fs_id)

        candidate = uri.host or uri.authority
        if candidate:
            file_system = snapshot.get(fs_type, candidate)
            if file_system is not None:
                return file_system
        return self._default_for_type(snapshot, fs_type)

    @staticmethod
    def _default_for_type(
        snapshot: FileSystemSnapshot, fs_type: str
    ) -> VirtualFileSystem | None:
        return snapshot.first_of_type(fs_type)

    # Lookups

    def get_available(self) -> tuple[VirtualFileSystem, ...]:
        """All file systems of the current snapshot, in snapshot order"""
        self._check_open()
        return self.ensure_snapshot().file_systems

    def get_by_type_and_id(self, fs_type: str, fs_id: str) -> VirtualFileSystem | None:
        self._check_open()
        return self.ensure_snapshot().get(fs_type, fs_id)

    def get_default_for_type(self, fs_type: str) -> VirtualFileSystem | None:
        """First file system of ``fs_type``, the one used when a URI names no instance"""
        self._check_open()
        return self._default_for_type(self.ensure_snapshot(), fs_type)

    # Lifecycle

    def handle_fs_event(self) -> None:
        """Invalidation callback: rebuild, keeping the old snapshot on failure"""
        if self._closed:
            return
        try:
            self.reload(LoggingProgressMonitor())
        except ResolverClosedError:
            logger.debug(f"Ignoring invalidation for disposed project '{self._project}'")
        except VFSError as e:
            logger.warning(
                f"File system reload for project '{self._project}' failed, "
                f"keeping previous snapshot: {e}"
            )

    def dispose(self) -> None:
        """Unsubscribe from the bus and drop the snapshot. Safe to call twice."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            self._snapshot = None

        if self._bus is not None:
            self._bus.unsubscribe(self)
        logger.info(f"Disposed file system resolver for project '{self._project}'")

    close = dispose

    def _check_open(self) -> None:
        if self._closed:
            raise ResolverClosedError(
                f"File system resolver for project '{self._project}' is disposed"
            )

    def __repr__(self) -> str:
        return f"<FileSystemResolver project={self._project!r} snapshot={self._snapshot!r}>"
