"""
vfs_locator/exceptions.py - Error taxonomy for location resolution
"""

from typing import Any


class VFSError(Exception):
    """Base exception for all resolver errors."""


class MissingTypeError(VFSError):
    """Raised when a location URI carries no file system type (scheme)."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"File system type not present in the file uri: {uri}")


class InvalidLocationError(VFSError):
    """Raised when a location string cannot be parsed as a URI."""


class ProviderNotFoundError(VFSError):
    """Raised when no registered file system matches the requested type/id."""

    def __init__(self, uri: str, fs_type: str | None = None, fs_id: str | None = None):
        self.uri = uri
        self.fs_type = fs_type
        self.fs_id = fs_id
        super().__init__(f"Cannot find file system provider for the uri '{uri}'")


class ProviderOperationError(VFSError):
    """
    A provider call failed.

    The original exception stays reachable through ``cause`` (and the
    standard ``__cause__`` chain when raised with ``from``).
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        cause: BaseException | None = None,
        uri: str | None = None,
        project: Any = None,
    ):
        self.operation = operation
        self.cause = cause
        self.uri = uri
        self.project = project
        super().__init__(message)


class ResolutionError(ProviderOperationError):
    """Raised when the selected file system fails to resolve a URI to a path."""

    def __init__(self, uri: str, cause: BaseException):
        super().__init__(
            f"Failed to get path from uri '{uri}': {cause}",
            operation="resolve_path",
            cause=cause,
            uri=uri,
        )


class RebuildError(ProviderOperationError):
    """
    Raised when a reload fails.

    Nothing is published on failure; the previous snapshot stays current.
    """

    def __init__(
        self,
        message: str,
        *,
        provider_id: str | None = None,
        fs_type: str | None = None,
        cause: BaseException | None = None,
        project: Any = None,
    ):
        self.provider_id = provider_id
        self.fs_type = fs_type
        super().__init__(
            message, operation="enumerate", cause=cause, project=project
        )


class DuplicateFileSystemError(RebuildError):
    """Raised when two file systems with the same (type, id) pair are enumerated."""

    def __init__(self, fs_type: str, fs_id: str, project: Any = None):
        self.fs_id = fs_id
        super().__init__(
            f"Duplicate file system '{fs_type}:{fs_id}' for project '{project}'",
            fs_type=fs_type,
            project=project,
        )


class OperationCanceledError(VFSError):
    """Raised when a progress monitor is cancelled during a long operation."""


class ResolverClosedError(VFSError):
    """Raised when a disposed resolver is used."""


class RegistryError(VFSError):
    """Raised on invalid provider registration."""


class ConfigurationError(VFSError):
    """Raised when a registry configuration cannot be loaded or applied."""
