"""Command-line interface for schedcast."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn

from .config import settings
from .errors import BroadcastError


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="schedcast - Share a read-only snapshot of your schedule"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Publish command
    publish_parser = subparsers.add_parser(
        "publish", help="Publish a schedule export as a broadcast"
    )
    publish_parser.add_argument(
        "--source", "-s", type=Path, default=settings.source_path,
        help="Editor export JSON file (default: SOURCE_PATH)",
    )
    publish_parser.add_argument("--title", "-t", help="Broadcast title")
    publish_parser.add_argument(
        "--auto-update", action=argparse.BooleanOptionalAction, default=None,
        help="Mark the broadcast as auto-updating",
    )

    # Auto-publish command
    auto_parser = subparsers.add_parser(
        "auto", help="Show or change the auto-publish-on-save setting"
    )
    auto_parser.add_argument("state", nargs="?", choices=["on", "off", "status"], default="status")

    # Show command
    show_parser = subparsers.add_parser("show", help="Show a broadcast by its code")
    show_parser.add_argument("code", help="6-character broadcast code")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "publish":
        sys.exit(asyncio.run(run_publish(args.source, args.title, args.auto_update)))
    elif args.command == "auto":
        sys.exit(asyncio.run(run_auto(args.state)))
    elif args.command == "show":
        sys.exit(asyncio.run(run_show(args.code)))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "schedcast.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


async def run_publish(source: Path = None, title: str = None, auto_update: bool = None) -> int:
    """Publish once and print the share link."""
    from .broadcast import PublishOptions
    from .service import BroadcastService
    from .table import FileSourceProvider

    if source is None:
        print("No source given. Use --source or set SOURCE_PATH.")
        return 1

    service = BroadcastService(source=FileSourceProvider(source))
    await service.initialize()
    try:
        result = await service.publish(PublishOptions(title=title, auto_update=auto_update))
    except BroadcastError as e:
        print(f"Broadcast failed ({e.kind}): {e}")
        return 1
    finally:
        await service.shutdown()

    print(f"BROADCAST LIVE: {result.title}")
    print(f"Code: {result.code}")
    print(f"Link: {result.url}")
    return 0


async def run_auto(state: str) -> int:
    """Show or change the auto-publish setting."""
    from .service import BroadcastService

    service = BroadcastService()
    await service.initialize()
    try:
        if state in ("on", "off"):
            await service.set_auto_publish_enabled(state == "on")
        enabled = service.is_auto_publish_enabled()
    except BroadcastError as e:
        print(f"Could not update setting: {e}")
        return 1
    finally:
        await service.shutdown()

    print(f"Auto-update on every save: {'on' if enabled else 'off'}")
    return 0


async def run_show(code: str) -> int:
    """Print a broadcast's details."""
    from .service import BroadcastService

    service = BroadcastService()
    await service.initialize()
    try:
        found = await service.lookup(code)
    except BroadcastError as e:
        print(f"Lookup failed: {e}")
        return 1
    finally:
        await service.shutdown()

    if found is None:
        print(f"No broadcast with code {code}")
        return 1

    record, body = found
    print(f"Title: {record.title}")
    print(f"Code: {record.code}")
    print(f"Link: {service.url_for(record.code)}")
    print(f"Auto-update: {'on' if record.auto_update else 'off'}")
    print(f"Updated: {record.updated_at.isoformat()}")
    print(f"Snapshot: {'available' if body is not None else 'missing'}")
    return 0


if __name__ == "__main__":
    main()
