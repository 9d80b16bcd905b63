"""
vfs_locator/snapshot.py - Immutable view of the available file systems
"""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from vfs_locator.exceptions import DuplicateFileSystemError
from vfs_locator.provider_base import VirtualFileSystem


class FileSystemSnapshot:
    """
    Ordered, read-only set of file systems keyed by ``(fs_type, fs_id)``.

    Order is the order in which file systems were handed to the
    constructor. A rebuild creates a new snapshot; existing snapshots are
    never modified.
    """

    __slots__ = ("_entries", "_by_key", "project", "generation")

    def __init__(
        self,
        file_systems: Iterable[VirtualFileSystem] = (),
        project: object = None,
        generation: int = 0,
    ):
        by_key: dict[tuple[str, str], VirtualFileSystem] = {}
        for fs in file_systems:
            key = (fs.fs_type, fs.fs_id)
            if key in by_key:
                raise DuplicateFileSystemError(fs.fs_type, fs.fs_id, project)
            by_key[key] = fs

        self._entries: tuple[VirtualFileSystem, ...] = tuple(by_key.values())
        self._by_key = MappingProxyType(by_key)
        self.project = project
        self.generation = generation

    @property
    def file_systems(self) -> tuple[VirtualFileSystem, ...]:
        return self._entries

    def get(self, fs_type: str, fs_id: str) -> VirtualFileSystem | None:
        """Exact (type, id) match or None"""
        return self._by_key.get((fs_type, fs_id))

    def first_of_type(self, fs_type: str) -> VirtualFileSystem | None:
        """First file system of ``fs_type`` in snapshot order, or None"""
        for fs in self._entries:
            if fs.fs_type == fs_type:
                return fs
        return None

    def by_id(self, fs_id: str) -> list[VirtualFileSystem]:
        return [fs for fs in self._entries if fs.fs_id == fs_id]

    def keys(self) -> list[tuple[str, str]]:
        return list(self._by_key)

    def types(self) -> list[str]:
        return list(dict.fromkeys(fs.fs_type for fs in self._entries))

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[VirtualFileSystem]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"<FileSystemSnapshot generation={self.generation} "
            f"size={len(self._entries)}>"
        )
