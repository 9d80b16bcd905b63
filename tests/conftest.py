"""
Shared fakes and fixtures for resolver tests
"""

import threading
from pathlib import PurePosixPath

import pytest

from vfs_locator.location import LocationURI
from vfs_locator.progress import ProgressMonitor
from vfs_locator.provider_base import FileSystemProvider, VirtualFileSystem
from vfs_locator.registry import FileSystemDescriptor, ProviderRegistry


class FakeFileSystem(VirtualFileSystem):
    """Resolves ``<type>://.../p`` to ``/<type>/<id>/p`` and records calls"""

    def __init__(self, fs_type: str, fs_id: str, error: Exception | None = None):
        self._fs_type = fs_type
        self._fs_id = fs_id
        self.error = error
        self.calls: list[LocationURI] = []

    @property
    def fs_type(self) -> str:
        return self._fs_type

    @property
    def fs_id(self) -> str:
        return self._fs_id

    def resolve_path(self, progress: ProgressMonitor, uri: LocationURI) -> PurePosixPath:
        self.calls.append(uri)
        if self.error is not None:
            raise self.error
        return PurePosixPath("/", self.fs_type, self.fs_id) / uri.decoded_path.lstrip("/")


class FakeProvider(FileSystemProvider):
    """
    Provider returning a configurable list of file systems.

    ``release`` makes enumeration block until the event is set, which lets
    tests hold a reload in flight.
    """

    def __init__(self, file_systems=(), error: Exception | None = None, on_enumerate=None):
        self.file_systems = list(file_systems)
        self.error = error
        self.on_enumerate = on_enumerate
        self.calls: list[object] = []
        self.entered = threading.Event()
        self.release: threading.Event | None = None
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def get_available_file_systems(self, progress, project):
        with self._lock:
            self.calls.append(project)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            self.entered.set()
            if self.on_enumerate is not None:
                self.on_enumerate(progress)
            if self.release is not None:
                assert self.release.wait(5), "provider was never released"
            if self.error is not None:
                raise self.error
            return list(self.file_systems)
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def make_fs():
    """Factory for FakeFileSystem instances"""
    return FakeFileSystem


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances"""
    return FakeProvider


@pytest.fixture
def make_registry():
    """Build a registry with one descriptor per provider, in order"""

    def _make(*providers: FileSystemProvider) -> ProviderRegistry:
        registry = ProviderRegistry()
        for index, provider in enumerate(providers):
            file_systems = getattr(provider, "file_systems", [])
            fs_type = file_systems[0].fs_type if file_systems else "fake"
            registry.register_provider(
                FileSystemDescriptor.for_provider(f"provider-{index}", fs_type, provider)
            )
        return registry

    return _make
