#!/usr/bin/env python3
"""
Proven message CLI - Build a Proven message from a JSON document.

Usage:
    python -m proven_message.main --help
    python -m proven_message.main message.json
    cat message.json | python -m proven_message.main --domain grid --keyword power
"""

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path

import pyfiglet
from dotenv import load_dotenv

from proven_message import __version__
from proven_message.builder import BuildTrace, MessageBuilder
from proven_message.config.settings import Settings, get_settings, load_config
from proven_message.exceptions import MessageBuildError, MessageModelError
from proven_message.message.response import response_for, response_for_error
from proven_message.model.bundle import load_message_model
from proven_message.triples.serializer import FORMATS, graph_statistics, serialize_graph
from proven_message.utils.logging import setup_colored_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_BUILD_ERROR = 2


def setup_logging(settings: Settings, verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(settings.logging.level)
        level = max(level, logging.WARNING)

    setup_colored_logging(level=level, log_file=settings.logging.log_file)


def print_banner() -> None:
    """Print the application banner to stderr."""
    text = pyfiglet.figlet_format("Proven", font="standard", width=80)
    print("".center(80, "*"), file=sys.stderr)
    print(text, file=sys.stderr)
    print(" Proven message builder ".center(80, "*"), file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="proven-message",
        description="Build a Proven message from a JSON (JSON-LD) document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build a message read from a file
  proven-message measurement.json

  # Build from stdin with message metadata
  cat measurement.json | proven-message --domain grid --keyword power --keyword load

  # Inspect the enriched graph as Turtle, skipping the SHACL rules
  proven-message query.json --no-rules --dump-graph turtle
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="JSON message file (default: read stdin)",
    )

    # Message metadata
    parser.add_argument("--name", "-n", default=None, help="Message name")
    parser.add_argument("--domain", default=None, help="Message domain (default: from config)")
    parser.add_argument("--source", "-s", default=None, help="Message source")
    parser.add_argument(
        "--keyword",
        "-k",
        action="append",
        default=[],
        help="Message keyword (repeatable)",
    )
    parser.add_argument("--transient", action="store_true", help="Mark the message transient")
    parser.add_argument("--static", action="store_true", help="Mark the message static")

    # Model and configuration
    parser.add_argument("--config", "-c", default=None, help="YAML configuration file")
    parser.add_argument(
        "--model-dir",
        "-m",
        default=None,
        help="Message model directory (default: packaged model)",
    )
    parser.add_argument(
        "--no-rules",
        action="store_true",
        help="Skip SHACL rule processing",
    )
    parser.add_argument(
        "--dump-graph",
        metavar="FORMAT",
        choices=sorted(FORMATS),
        default=None,
        help="Write the enriched message graph to stderr in FORMAT",
    )

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output (very verbose)",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress all output except results and errors",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> None:
    """Apply CLI arguments to settings."""
    if args.model_dir:
        settings.model.model_dir = Path(args.model_dir)

    if args.no_rules:
        settings.rules.enabled = False


def read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    # Load and configure settings
    try:
        settings = load_config(args.config) if args.config else get_settings()
        settings = settings.model_copy(deep=True)
        apply_cli_overrides(settings, args)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.quiet:
        setup_logging(settings)
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(settings, verbose=args.verbose, debug=args.debug)
        print_banner()

    # Model is loaded once and shared by every build
    try:
        model = load_message_model(settings.model.model_dir, settings.model.registry_file)
    except MessageModelError as e:
        logger.error("Message model error: %s", e)
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    builder = MessageBuilder(
        model,
        default_domain=settings.message.default_domain,
        default_source=settings.message.default_source,
        rules_enabled=settings.rules.enabled,
        iterate_rules=settings.rules.iterate_rules,
    )

    try:
        text = read_input(args.input)
    except OSError as e:
        print(f"Cannot read message: {e}", file=sys.stderr)
        return EXIT_BUILD_ERROR

    trace = BuildTrace()
    message_id = uuid.uuid4()
    try:
        message = builder.build(
            text,
            name=args.name,
            domain=args.domain,
            source=args.source,
            is_transient=args.transient,
            is_static=args.static,
            keywords=args.keyword,
            message_id=message_id,
            trace=trace,
        )
    except MessageBuildError as e:
        logger.error("Message build failed at stage '%s': %s", e.stage, e.cause)
        response = response_for_error(message_id, e)
        print(json.dumps(response.model_dump(mode="json"), indent=2))
        return EXIT_BUILD_ERROR

    if args.dump_graph and trace.enriched is not None:
        print(serialize_graph(trace.enriched, args.dump_graph), file=sys.stderr)
        logger.info("Graph statistics: %s", graph_statistics(trace.enriched))

    logger.info("Response: %s", response_for(message).model_dump(mode="json"))
    print(json.dumps(message.model_dump(mode="json"), indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
