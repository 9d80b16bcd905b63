"""
vfs_locator/provider_base.py - Contracts for file systems and their providers
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import PurePath
from typing import Any

from vfs_locator.location import LocationURI
from vfs_locator.progress import ProgressMonitor


class VirtualFileSystem(ABC):
    """
    An addressable storage backend.

    Identified by a stable ``(fs_type, fs_id)`` pair. Implementations map a
    location URI to a concrete path inside the backend and must not change
    their identity after being handed to a resolver.
    """

    @property
    @abstractmethod
    def fs_type(self) -> str:
        """File system type, matched against the URI scheme"""

    @property
    @abstractmethod
    def fs_id(self) -> str:
        """Instance id, unique per type"""

    @property
    def label(self) -> str:
        return f"{self.fs_type}:{self.fs_id}"

    @abstractmethod
    def resolve_path(self, progress: ProgressMonitor, uri: LocationURI) -> PurePath:
        """
        Map a location URI to a path within this file system.

        May block on I/O. Any exception raised here is wrapped by the
        resolver into a ResolutionError.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.label}>"


class FileSystemProvider(ABC):
    """Factory enumerating the file systems available to a project"""

    @abstractmethod
    def get_available_file_systems(
        self, progress: ProgressMonitor, project: Any
    ) -> Iterable[VirtualFileSystem]:
        """
        Enumerate file systems for ``project``.

        Enumeration order is preserved in the resolver's snapshot. Raising
        aborts the whole reload.
        """
