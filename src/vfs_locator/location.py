"""
vfs_locator/location.py - Location URI parsing and composition

A non-local location is written as

    <fsType>://[<authority-or-host>][/path][?fs=<id>][&...]

The ``fs`` query parameter, when present, names the file system instance
and takes precedence over the host/authority.
"""

import os
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit
from urllib.request import url2pathname

from vfs_locator.exceptions import InvalidLocationError

SCHEME_SEPARATOR = "://"
QUERY_PARAM_FS_ID = "fs"
LOCAL_SCHEME = "file"
LOCAL_HOSTS = ("", "localhost")
# urlsplit silently removes these from anywhere in the text
UNSAFE_CHARACTERS = ("\t", "\r", "\n")


def has_scheme(location: str) -> bool:
    """True if ``location`` looks like a URI rather than a plain path"""
    return SCHEME_SEPARATOR in location


def get_query_parameters(raw_query: str | None) -> dict[str, str]:
    """
    Parse a ``key=value&key=value`` query string.

    Names are case-sensitive and values are percent-decoded. A name
    without ``=`` maps to an empty string. When a name repeats, the first
    occurrence wins.
    """
    params: dict[str, str] = {}
    if not raw_query:
        return params
    for name, value in parse_qsl(raw_query, keep_blank_values=True):
        params.setdefault(name, value)
    return params


def _split_authority(authority: str) -> tuple[str, int | None]:
    """Return (host, port) for an authority, host is "" when not server-based"""
    _, _, hostport = authority.rpartition("@")
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise InvalidLocationError(f"Invalid IPv6 host in authority '{authority}'")
        host, rest = hostport[: end + 1], hostport[end + 1 :]
        port_text = rest[1:] if rest.startswith(":") else rest
    else:
        host, _, port_text = hostport.partition(":")

    if not port_text:
        return host, None
    if not port_text.isdigit():
        # Registry-based authority, no usable host
        return "", None
    return host, int(port_text)


@dataclass(frozen=True)
class LocationURI:
    """A parsed location URI. Host keeps its original case."""

    raw: str
    scheme: str
    authority: str
    host: str
    port: int | None
    path: str
    query: str
    fragment: str

    def __str__(self) -> str:
        return self.raw

    @cached_property
    def query_params(self) -> dict[str, str]:
        return get_query_parameters(self.query)

    @property
    def fs_id(self) -> str | None:
        """Instance id given explicitly through the ``fs`` query parameter"""
        return self.query_params.get(QUERY_PARAM_FS_ID) or None

    @property
    def instance_id(self) -> str | None:
        """Instance id: ``fs`` parameter, else host, else authority"""
        return self.fs_id or self.host or self.authority or None

    @property
    def decoded_path(self) -> str:
        return unquote(self.path)

    @property
    def is_local(self) -> bool:
        return is_local_uri(self)


def parse_location(text: str) -> LocationURI:
    """
    Parse a location string into a LocationURI.

    Raises:
        InvalidLocationError: if the string is not a syntactically valid URI
    """
    if any(char in text for char in UNSAFE_CHARACTERS):
        raise InvalidLocationError(
            f"Invalid location uri {text!r}: tab and line breaks are not allowed"
        )

    try:
        parts = urlsplit(text)
    except ValueError as e:
        raise InvalidLocationError(f"Invalid location uri '{text}': {e}") from e

    # urlsplit lowercases the scheme; file system types are matched verbatim
    stripped = text.strip()
    scheme = stripped[: len(parts.scheme)] if parts.scheme else ""
    host, port = _split_authority(parts.netloc)

    return LocationURI(
        raw=text,
        scheme=scheme,
        authority=parts.netloc,
        host=host,
        port=port,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
    )


def is_local_uri(uri: LocationURI | str) -> bool:
    """True for ``file:`` URIs that point at this machine"""
    if isinstance(uri, str):
        uri = parse_location(uri)
    return uri.scheme.lower() == LOCAL_SCHEME and uri.authority.lower() in LOCAL_HOSTS


def to_local_path(uri: LocationURI | str) -> Path:
    """
    Convert a local ``file:`` URI into a filesystem path.

    Raises:
        InvalidLocationError: if the URI does not denote a local file
    """
    if isinstance(uri, str):
        uri = parse_location(uri)
    if not is_local_uri(uri):
        raise InvalidLocationError(f"Not a local file uri: '{uri}'")
    return Path(url2pathname(uri.path))


def build_location(
    fs_type: str,
    path: str | os.PathLike[str] = "",
    *,
    fs_id: str | None = None,
    host: str | None = None,
    params: dict[str, str] | None = None,
) -> str:
    """
    Compose a location URI.

    Examples:
        build_location("s3", "key.txt", fs_id="bucket2")
            -> "s3:///key.txt?fs=bucket2"
        build_location("s3", "/key.txt", host="bucket1")
            -> "s3://bucket1/key.txt"
    """
    if not fs_type:
        raise InvalidLocationError("File system type is required")

    path = os.fspath(path)
    if path and not path.startswith("/"):
        path = "/" + path

    query: dict[str, str] = {}
    if fs_id:
        query[QUERY_PARAM_FS_ID] = fs_id
    for name, value in (params or {}).items():
        if name != QUERY_PARAM_FS_ID:
            query[name] = value

    location = f"{fs_type}{SCHEME_SEPARATOR}{host or ''}{quote(path, safe='/')}"
    if query:
        location += "?" + urlencode(query)
    return location
