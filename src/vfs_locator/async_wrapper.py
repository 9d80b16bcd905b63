"""
Asynchronous wrapper for FileSystemResolver

Provider enumeration and path resolution may block on I/O, so every call is
run in a worker thread to keep the event loop responsive.
"""

import asyncio
import os
from pathlib import PurePath
from typing import Any

from vfs_locator.events import InvalidationBus
from vfs_locator.fs_manager import FileSystemResolver
from vfs_locator.location import LocationURI
from vfs_locator.progress import ProgressMonitor
from vfs_locator.provider_base import VirtualFileSystem
from vfs_locator.registry import ProviderRegistry
from vfs_locator.snapshot import FileSystemSnapshot


class AsyncFileSystemResolver:
    """asyncio interface to a FileSystemResolver"""

    def __init__(
        self,
        project: Any,
        registry: ProviderRegistry,
        bus: InvalidationBus | None = None,
    ):
        self._resolver = FileSystemResolver(project, registry, bus)

    @classmethod
    def wrap(cls, resolver: FileSystemResolver) -> "AsyncFileSystemResolver":
        """Share an existing resolver (and its snapshot) with async callers"""
        wrapper = cls.__new__(cls)
        wrapper._resolver = resolver
        return wrapper

    @property
    def resolver(self) -> FileSystemResolver:
        """Access to the underlying resolver"""
        return self._resolver

    @property
    def project(self) -> Any:
        return self._resolver.project

    @property
    def snapshot(self) -> FileSystemSnapshot | None:
        return self._resolver.snapshot

    async def reload(self, progress: ProgressMonitor | None = None) -> FileSystemSnapshot:
        """Rebuild the snapshot"""
        return await asyncio.to_thread(self._resolver.reload, progress)

    async def ensure_snapshot(
        self, progress: ProgressMonitor | None = None
    ) -> FileSystemSnapshot:
        snapshot = self._resolver.snapshot
        if snapshot is not None:
            return snapshot
        return await asyncio.to_thread(self._resolver.ensure_snapshot, progress)

    async def resolve(
        self, location: str | os.PathLike[str], progress: ProgressMonitor | None = None
    ) -> PurePath:
        """Resolve a local path or file system URI"""
        return await asyncio.to_thread(self._resolver.resolve, location, progress)

    async def resolve_uri(
        self, uri: str | LocationURI, progress: ProgressMonitor | None = None
    ) -> PurePath:
        return await asyncio.to_thread(self._resolver.resolve_uri, uri, progress)

    async def get_available(self) -> tuple[VirtualFileSystem, ...]:
        return await asyncio.to_thread(self._resolver.get_available)

    async def get_by_type_and_id(
        self, fs_type: str, fs_id: str
    ) -> VirtualFileSystem | None:
        return await asyncio.to_thread(self._resolver.get_by_type_and_id, fs_type, fs_id)

    async def get_default_for_type(self, fs_type: str) -> VirtualFileSystem | None:
        return await asyncio.to_thread(self._resolver.get_default_for_type, fs_type)

    def dispose(self) -> None:
        """Dispose the underlying resolver"""
        self._resolver.dispose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False
