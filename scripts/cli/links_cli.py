#!/usr/bin/env python3
"""
Command-line interface for the shortlinks store.

Usage:
    python links_cli.py shorten <url> [--code CODE]
    python links_cli.py get <code>
    python links_cli.py list
    python links_cli.py delete <code>
    python links_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from shortlinks.common.logging_config import setup_logging
from shortlinks.database import create_link_store
from shortlinks.errors import LinkError
from shortlinks.registry import LinkRegistry
from shortlinks.shortcode import ShortCodeGenerator


class LinksCLI:
    """Command-line interface for link management."""

    def __init__(self, store_url: str, timeout: Optional[float] = None, verbose: bool = False):
        """Initialize CLI."""
        self.store_url = store_url
        self.timeout = timeout
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = None
        self.registry = None

    async def initialize(self):
        """Initialize store and registry."""
        self.store = create_link_store(self.store_url, logger=self.logger)
        await self.store.initialize()

        self.registry = LinkRegistry(
            store=self.store,
            code_generator=ShortCodeGenerator(),
            logger=self.logger,
            timeout=self.timeout,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.store:
            await self.store.close()

    @staticmethod
    def _print_error(error: LinkError) -> int:
        print(json.dumps({
            "success": False,
            "error": error.reason,
            "detail": error.message,
        }, indent=2), file=sys.stderr)
        return 1

    async def shorten(self, url: str, code: Optional[str] = None) -> int:
        """Create a link."""
        try:
            record = await self.registry.create(url, code=code)
        except LinkError as e:
            return self._print_error(e)

        print(json.dumps({"success": True, **record.to_dict()}, indent=2))
        return 0

    async def get(self, code: str) -> int:
        """Show one link without counting a click."""
        try:
            record = await self.registry.lookup(code)
        except LinkError as e:
            return self._print_error(e)

        print(json.dumps({"success": True, **record.to_dict()}, indent=2))
        return 0

    async def list_links(self) -> int:
        """List all links, newest first."""
        try:
            records = await self.registry.list_links()
        except LinkError as e:
            return self._print_error(e)

        print(json.dumps({
            "success": True,
            "count": len(records),
            "links": [record.to_dict() for record in records],
        }, indent=2))
        return 0

    async def delete(self, code: str) -> int:
        """Delete a link."""
        try:
            await self.registry.delete(code)
        except LinkError as e:
            return self._print_error(e)

        print(json.dumps({"success": True, "message": "Link deleted"}, indent=2))
        return 0

    async def health(self) -> int:
        """Check store health."""
        healthy = await self.store.health_check()
        print(json.dumps({"success": healthy, "store": "healthy" if healthy else "unhealthy"}, indent=2))
        return 0 if healthy else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Shortlinks CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --code PROMO1

  # Show a link and its clicks
  %(prog)s get PROMO1

  # List all links
  %(prog)s list
        """
    )

    parser.add_argument(
        "--store-url",
        default=os.getenv("STORE_URL", "sqlite:///links.db"),
        help="Link store URL (default: from STORE_URL env or sqlite:///links.db)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-operation timeout in seconds"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Create a short link")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--code", help="Custom code (6-12 letters/digits)")

    get_parser = subparsers.add_parser("get", help="Show a link and its clicks")
    get_parser.add_argument("code", help="Code to look up")

    subparsers.add_parser("list", help="List all links")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("code", help="Code to delete")

    subparsers.add_parser("health", help="Check store health")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = LinksCLI(store_url=args.store_url, timeout=args.timeout, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.code)
        elif args.command == "get":
            return await cli.get(args.code)
        elif args.command == "list":
            return await cli.list_links()
        elif args.command == "delete":
            return await cli.delete(args.code)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
