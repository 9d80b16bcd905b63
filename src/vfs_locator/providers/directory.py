"""Directory-backed file systems.

Each instance exposes one local directory under a ``(type, id)`` pair, so
``dir://docs/guide/intro.md`` resolves to ``<docs root>/guide/intro.md``.
Useful for tests, demos and for projects that keep resources in known
folders.
"""

import logging
import os
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vfs_locator.events import InvalidationBus
from vfs_locator.location import LocationURI
from vfs_locator.progress import ProgressMonitor
from vfs_locator.provider_base import FileSystemProvider, VirtualFileSystem
from vfs_locator.providers.directory_models import DirectoryProviderConfig

logger = logging.getLogger(__name__)


class DirectoryFileSystem(VirtualFileSystem):
    """A local directory addressed as a virtual file system"""

    def __init__(self, fs_type: str, fs_id: str, root: str | os.PathLike[str]):
        self._fs_type = fs_type
        self._fs_id = fs_id
        self.root = Path(root)

    @property
    def fs_type(self) -> str:
        return self._fs_type

    @property
    def fs_id(self) -> str:
        return self._fs_id

    def resolve_path(self, progress: ProgressMonitor, uri: LocationURI) -> Path:
        """
        Map the URI path below the root directory.

        Raises:
            ValueError: if the path escapes the root directory
        """
        relative = uri.decoded_path.lstrip("/")
        root = os.path.abspath(self.root)
        target = os.path.normpath(os.path.join(root, relative))
        if os.path.commonpath([root, target]) != root:
            raise ValueError(f"Path '{uri.decoded_path}' escapes root of {self.label}")
        return Path(target)


class DirectoryProvider(FileSystemProvider):
    """
    Provider serving one DirectoryFileSystem per configured root.

    Roots can be added or removed at runtime; when a bus is attached every
    change is announced so resolvers rebuild.

    Examples:
        provider = DirectoryProvider(
            fs_type="dir",
            roots={"docs": "/srv/docs", "assets": "/srv/assets"},
        )
    """

    def __init__(
        self,
        fs_type: str = "dir",
        roots: dict[str, str | os.PathLike[str]] | None = None,
        bus: InvalidationBus | None = None,
    ):
        try:
            self.config = DirectoryProviderConfig(fs_type=fs_type, roots=roots or {})
        except ValidationError as e:
            raise ValueError(f"Invalid directory provider configuration: {e}") from e

        self.bus = bus
        self._roots: dict[str, Path] = dict(self.config.roots)
        self._lock = threading.Lock()

    @property
    def fs_type(self) -> str:
        return self.config.fs_type

    def roots(self) -> dict[str, Path]:
        with self._lock:
            return dict(self._roots)

    def add_root(self, fs_id: str, root: str | os.PathLike[str]) -> None:
        """
        Serve ``root`` as ``<fs_type>://<fs_id>``, replacing an existing root.

        Raises:
            ValueError: if the id or root is not valid
        """
        try:
            DirectoryProviderConfig(fs_type=self.fs_type, roots={fs_id: root})
        except ValidationError as e:
            raise ValueError(f"Invalid directory root '{fs_id}': {e}") from e
        with self._lock:
            self._roots[fs_id] = Path(root)
        logger.debug(f"Added directory root {self.fs_type}:{fs_id} -> {root}")
        self._announce()

    def remove_root(self, fs_id: str) -> bool:
        with self._lock:
            removed = self._roots.pop(fs_id, None) is not None
        if removed:
            self._announce()
        return removed

    def get_available_file_systems(
        self, progress: ProgressMonitor, project: Any
    ) -> Iterable[VirtualFileSystem]:
        return [
            DirectoryFileSystem(self.fs_type, fs_id, root)
            for fs_id, root in self.roots().items()
        ]

    def _announce(self) -> None:
        if self.bus is not None:
            self.bus.notify_changed()
