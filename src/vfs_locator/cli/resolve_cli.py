#!/usr/bin/env python3
"""
CLI tool for resolving locations against configured file system providers.

Examples:
    # Resolve URIs with providers from a registry file
    vfs-resolve --config registry.yaml resolve "s3://bucket1/key.txt"

    # Quick directory-backed file systems without a config file
    vfs-resolve --root docs=/srv/docs resolve "dir://docs/guide/intro.md"

    # List every available file system
    vfs-resolve --config registry.yaml list
"""

import argparse
import logging
import sys

from vfs_locator.config import build_registry, load_registry_config
from vfs_locator.exceptions import ConfigurationError, RegistryError, VFSError
from vfs_locator.fs_manager import FileSystemResolver
from vfs_locator.progress import LoggingProgressMonitor
from vfs_locator.providers import DirectoryProvider
from vfs_locator.registry import FileSystemDescriptor, ProviderRegistry


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def parse_roots(values: list[str]) -> dict[str, str]:
    """Parse repeated ``ID=DIRECTORY`` arguments"""
    roots: dict[str, str] = {}
    for value in values:
        fs_id, sep, directory = value.partition("=")
        if not sep or not fs_id or not directory:
            raise ConfigurationError(f"Expected ID=DIRECTORY, got '{value}'")
        roots[fs_id] = directory
    return roots


def create_registry(args: argparse.Namespace) -> ProviderRegistry:
    """
    Build the provider registry from CLI arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        Registry with configured providers, then ``--root`` directories
    """
    if args.config:
        registry = build_registry(load_registry_config(args.config))
    else:
        registry = ProviderRegistry()

    if args.root:
        provider = DirectoryProvider(fs_type=args.root_type, roots=parse_roots(args.root))
        try:
            registry.register_provider(
                FileSystemDescriptor.for_provider(
                    "cli-roots",
                    args.root_type,
                    provider,
                    label="Command line directories",
                )
            )
        except RegistryError as e:
            raise ConfigurationError(str(e)) from e
    return registry


def cmd_resolve(resolver: FileSystemResolver, args: argparse.Namespace) -> int:
    progress = LoggingProgressMonitor()
    for location in args.locations:
        print(resolver.resolve(location, progress))
    return 0


def cmd_list(resolver: FileSystemResolver, args: argparse.Namespace) -> int:
    for fs in resolver.get_available():
        print(f"{fs.fs_type}\t{fs.fs_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vfs-resolve",
        description="Resolve paths and virtual file system URIs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="YAML registry configuration file",
    )

    parser.add_argument(
        "--root",
        action="append",
        default=[],
        metavar="ID=DIRECTORY",
        help="Expose a local directory as a file system (repeatable)",
    )

    parser.add_argument(
        "--root-type",
        type=str,
        default="dir",
        help="File system type used for --root directories (default: dir)",
    )

    parser.add_argument(
        "--project",
        "-p",
        type=str,
        default="default",
        help="Project name handed to providers (default: default)",
    )

    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve", help="Resolve locations to paths")
    resolve_parser.add_argument("locations", nargs="+", help="Paths or URIs")
    resolve_parser.set_defaults(handler=cmd_resolve)

    list_parser = subparsers.add_parser("list", help="List available file systems")
    list_parser.set_defaults(handler=cmd_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.debug)
    logger = logging.getLogger(__name__)

    try:
        registry = create_registry(args)
        with FileSystemResolver(args.project, registry) as resolver:
            return args.handler(resolver, args)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except VFSError as e:
        logger.error(f"Error: {e}", exc_info=args.debug)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
