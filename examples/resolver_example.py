#!/usr/bin/env python3
"""
File System Resolver Example
============================
Registers two directory providers of the same type, resolves locations
through them and shows how invalidation picks up new file systems.
"""

import logging
import tempfile
from pathlib import Path

from vfs_locator import (
    FileSystemDescriptor,
    FileSystemResolver,
    InvalidationBus,
    ProviderRegistry,
    build_location,
)
from vfs_locator.providers import DirectoryProvider


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s - %(message)s")

    base = Path(tempfile.mkdtemp(prefix="vfs-locator-"))
    bus = InvalidationBus(synchronous=True)

    team_a = DirectoryProvider("bucket", {"bucket1": base / "a"}, bus=bus)
    team_b = DirectoryProvider("bucket", {"bucket2": base / "b"}, bus=bus)
    registry = ProviderRegistry(
        [
            FileSystemDescriptor.for_provider("team-a", "bucket", team_a),
            FileSystemDescriptor.for_provider("team-b", "bucket", team_b),
        ]
    )

    with FileSystemResolver("demo", registry, bus) as resolver:
        print("\n1. Available file systems")
        for fs in resolver.get_available():
            print(f"  - {fs.label}")

        print("\n2. Resolving locations")
        for location in [
            "/var/log/app.log",
            "bucket://anyhost/key.txt?fs=bucket2",
            "bucket://bucket1/key.txt",
            "bucket:///default.txt",
            build_location("bucket", "reports/q3.csv", fs_id="bucket2"),
        ]:
            print(f"  {location}\n    -> {resolver.resolve(location)}")

        print("\n3. Adding a root at runtime")
        team_b.add_root("bucket3", base / "c")
        print(f"  bucket://bucket3/x -> {resolver.resolve('bucket://bucket3/x')}")

    bus.close()


if __name__ == "__main__":
    main()
