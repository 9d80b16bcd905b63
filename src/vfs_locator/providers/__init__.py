"""
vfs_locator/providers - Bundled file system providers
"""

from vfs_locator.providers.directory import DirectoryFileSystem, DirectoryProvider
from vfs_locator.providers.directory_models import DirectoryProviderConfig

__all__ = [
    "DirectoryFileSystem",
    "DirectoryProvider",
    "DirectoryProviderConfig",
]
