"""
vfs_locator/registry.py - Static table of file system provider descriptors

Providers are registered explicitly at application start. The resolver
reads the descriptor list on every reload and never discovers providers on
its own.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from vfs_locator.exceptions import RegistryError
from vfs_locator.provider_base import FileSystemProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[], FileSystemProvider]


@dataclass(frozen=True)
class FileSystemDescriptor:
    """
    A registry entry.

    ``id`` is unique within a registry, ``fs_type`` tags the kind of file
    systems the provider offers. Several providers may share a type.
    """

    id: str
    fs_type: str
    factory: ProviderFactory = field(repr=False)
    label: str | None = None
    description: str = ""

    _instance: list[FileSystemProvider] = field(
        default_factory=list, init=False, repr=False, compare=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if not self.id or not self.fs_type:
            raise RegistryError("File system descriptor requires an id and a type")

    @classmethod
    def for_provider(
        cls, id: str, fs_type: str, provider: FileSystemProvider, **kwargs
    ) -> "FileSystemDescriptor":
        """Descriptor wrapping an already constructed provider"""
        return cls(id, fs_type, lambda: provider, **kwargs)

    def get_instance(self) -> FileSystemProvider:
        """Return the provider, creating it on first use"""
        with self._lock:
            if not self._instance:
                provider = self.factory()
                if not isinstance(provider, FileSystemProvider):
                    raise RegistryError(
                        f"Factory for '{self.id}' returned "
                        f"{type(provider).__name__}, not a FileSystemProvider"
                    )
                self._instance.append(provider)
                logger.debug(f"Created file system provider '{self.id}'")
            return self._instance[0]


class ProviderRegistry:
    """Ordered, thread-safe collection of FileSystemDescriptor entries"""

    def __init__(self, descriptors: Iterable[FileSystemDescriptor] = ()):
        self._descriptors: tuple[FileSystemDescriptor, ...] = ()
        self._lock = threading.Lock()
        for descriptor in descriptors:
            self.register_provider(descriptor)

    def register_provider(self, descriptor: FileSystemDescriptor) -> None:
        """
        Append a descriptor.

        Raises:
            RegistryError: if a descriptor with the same id is registered
        """
        with self._lock:
            if self._find(descriptor.id) is not None:
                raise RegistryError(
                    f"File system provider '{descriptor.id}' is already registered"
                )
            self._descriptors = self._descriptors + (descriptor,)
        logger.debug(
            f"Registered file system provider '{descriptor.id}' ({descriptor.fs_type})"
        )

    def list_descriptors(self) -> tuple[FileSystemDescriptor, ...]:
        """All descriptors in registration order"""
        return self._descriptors

    def get_descriptor(self, id: str) -> FileSystemDescriptor | None:
        """Descriptor by id (case insensitive), or None"""
        return self._find(id)

    def descriptors_for_type(self, fs_type: str) -> list[FileSystemDescriptor]:
        return [d for d in self._descriptors if d.fs_type == fs_type]

    def types(self) -> list[str]:
        """Distinct file system types in registration order"""
        return list(dict.fromkeys(d.fs_type for d in self._descriptors))

    def _find(self, id: str) -> FileSystemDescriptor | None:
        wanted = id.lower()
        for descriptor in self._descriptors:
            if descriptor.id.lower() == wanted:
                return descriptor
        return None

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self):
        return iter(self._descriptors)
