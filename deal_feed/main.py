"""
Main entry point for the Deal Feed system.

Commands:
    serve   run the HTTP server exposing /deals
    fetch   build the feed once and print it as JSON
    watch   poll a running server and render the deals as a table
    filter  set or clear the platform filter used by ``watch``
    config  print a configuration template as YAML
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

import yaml

from .components.feed_client import AuthorFeedClient, FetchError
from .components.feed_pipeline import FeedPipeline
from .components.filter_preferences import FilterPreferences
from .components.platform_classifier import PlatformClassifier
from .components.seen_store import JsonFileSeenStore
from .models.config import Configuration
from .services.config_manager import ConfigurationManager
from .services.feed_server import run_server
from .services.feed_watcher import FeedWatcher
from .utils.logging import LogLevel, get_logger, setup_logging


def build_pipeline(config: Configuration) -> FeedPipeline:
    """Create the feed pipeline described by the configuration."""
    client = AuthorFeedClient(api_url=config.feed.api_url, timeout=config.feed.timeout)
    return FeedPipeline(client=client, actor=config.feed.actor, limit=config.feed.limit)


def cmd_serve(config: Configuration, args: argparse.Namespace) -> int:
    """Run the feed server."""
    host = args.host or config.server.host
    port = args.port or config.server.port
    run_server(build_pipeline(config), host=host, port=port)
    return 0


def cmd_fetch(config: Configuration, args: argparse.Namespace) -> int:
    """Build the feed once and print it."""
    pipeline = build_pipeline(config)
    try:
        deals = pipeline.build_feed(actor=args.actor, limit=args.limit)
    except FetchError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        pipeline.client.close()

    print(json.dumps([deal.to_dict() for deal in deals], ensure_ascii=False, indent=2))
    return 0


async def _watch(config: Configuration, args: argparse.Namespace) -> None:
    watcher = FeedWatcher(
        endpoint=args.endpoint or config.client.endpoint,
        seen_store=JsonFileSeenStore(config.client.seen_state_file),
        preferences=FilterPreferences(config.client.preferences_file),
        poll_interval=config.client.poll_interval,
        color=not args.no_color,
    )
    async with watcher:
        await watcher.run(max_polls=args.polls)


def cmd_watch(config: Configuration, args: argparse.Namespace) -> int:
    """Poll the server and render deals."""
    try:
        asyncio.run(_watch(config, args))
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
    return 0


def cmd_filter(config: Configuration, args: argparse.Namespace) -> int:
    """Set or clear the stored platform filter."""
    preferences = FilterPreferences(config.client.preferences_file)
    if args.clear or not args.platforms:
        preferences.clear()
        print("Platform filter cleared")
    else:
        known = PlatformClassifier().tags
        unknown = [tag for tag in args.platforms if tag not in known]
        if unknown:
            print(f"Unknown platform tags: {' '.join(unknown)}", file=sys.stderr)
            print(f"Known tags: {' '.join(known)}", file=sys.stderr)
            return 2
        preferences.save(args.platforms)
        print(f"Platform filter set: {' '.join(sorted(set(args.platforms)))}")
    return 0


def cmd_config(config: Configuration, args: argparse.Namespace) -> int:
    """Print a configuration template."""
    template = ConfigurationManager(args.config).get_config_template()
    print(yaml.safe_dump(template, sort_keys=False, allow_unicode=True), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(prog="deal-feed", description="Bluesky deal feed")
    parser.add_argument("-c", "--config", help="Path to configuration file")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=[level.value for level in LogLevel],
        help="Override the configured log level",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Serve /deals over HTTP")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")
    serve.set_defaults(func=cmd_serve)

    fetch = subparsers.add_parser("fetch", help="Print the deal feed once as JSON")
    fetch.add_argument("--actor", help="Actor DID or handle")
    fetch.add_argument("--limit", type=int, help="Number of posts to fetch")
    fetch.set_defaults(func=cmd_fetch)

    watch = subparsers.add_parser("watch", help="Poll a server and show deals")
    watch.add_argument("--endpoint", help="URL of the /deals endpoint")
    watch.add_argument("--polls", type=int, help="Stop after this many polls")
    watch.add_argument("--no-color", action="store_true", help="Disable dimming")
    watch.set_defaults(func=cmd_watch)

    filter_cmd = subparsers.add_parser("filter", help="Set the platform filter")
    filter_cmd.add_argument("platforms", nargs="*", help="Platform tags to show")
    filter_cmd.add_argument("--clear", action="store_true", help="Show all platforms")
    filter_cmd.set_defaults(func=cmd_filter)

    config_cmd = subparsers.add_parser("config", help="Print a configuration template")
    config_cmd.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 2

    try:
        config = ConfigurationManager(args.config).load_config()
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        log_dir=config.logging.log_dir,
        log_level=args.log_level or config.logging.level,
    )
    logger = get_logger("main")
    logger.info("Starting Deal Feed", extra={"command": args.command})

    return args.func(config, args)


if __name__ == "__main__":
    sys.exit(main())
