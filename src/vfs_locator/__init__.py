"""
vfs_locator - Resolve local paths and virtual file system URIs through pluggable providers
"""

from vfs_locator import exceptions, location
from vfs_locator.async_wrapper import AsyncFileSystemResolver
from vfs_locator.config import (
    RegistryConfig,
    build_registry,
    load_registry_config,
    parse_registry_config,
)
from vfs_locator.events import FileSystemEventListener, InvalidationBus
from vfs_locator.exceptions import (
    ConfigurationError,
    DuplicateFileSystemError,
    InvalidLocationError,
    MissingTypeError,
    OperationCanceledError,
    ProviderNotFoundError,
    ProviderOperationError,
    RebuildError,
    RegistryError,
    ResolutionError,
    ResolverClosedError,
    VFSError,
)
from vfs_locator.fs_manager import FileSystemResolver
from vfs_locator.location import (
    QUERY_PARAM_FS_ID,
    LocationURI,
    build_location,
    get_query_parameters,
    parse_location,
)
from vfs_locator.progress import LoggingProgressMonitor, ProgressMonitor
from vfs_locator.provider_base import FileSystemProvider, VirtualFileSystem
from vfs_locator.registry import FileSystemDescriptor, ProviderRegistry
from vfs_locator.snapshot import FileSystemSnapshot

__all__ = [
    # Core
    "FileSystemResolver",
    "AsyncFileSystemResolver",
    "FileSystemSnapshot",
    # Contracts
    "VirtualFileSystem",
    "FileSystemProvider",
    "FileSystemDescriptor",
    "ProviderRegistry",
    "InvalidationBus",
    "FileSystemEventListener",
    "ProgressMonitor",
    "LoggingProgressMonitor",
    # Locations
    "LocationURI",
    "QUERY_PARAM_FS_ID",
    "parse_location",
    "build_location",
    "get_query_parameters",
    # Configuration
    "RegistryConfig",
    "build_registry",
    "load_registry_config",
    "parse_registry_config",
    # Errors
    "VFSError",
    "MissingTypeError",
    "InvalidLocationError",
    "ProviderNotFoundError",
    "ProviderOperationError",
    "ResolutionError",
    "RebuildError",
    "DuplicateFileSystemError",
    "OperationCanceledError",
    "ResolverClosedError",
    "RegistryError",
    "ConfigurationError",
    # Modules
    "exceptions",
    "location",
]
