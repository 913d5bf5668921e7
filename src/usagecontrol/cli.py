"""
Usage Patterns Command Line Interface.

Provides commands for working with usage-control policy patterns:
- classify: Detect the pattern of a policy document
- example: Print the example document for a pattern
- patterns: List known patterns
- validate: Check a policy document for problems
- serve: Run the HTTP API
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from usagecontrol import __version__
from usagecontrol.config import PatternsConfig, load_config, validate_config
from usagecontrol.logging_setup import setup_logging
from usagecontrol.policy.engine import classify_file, example_document, load_document
from usagecontrol.policy.models import Pattern
from usagecontrol.policy.parser import PolicyParseError, validate_policy
from usagecontrol.policy.synthesizer import UnknownPatternError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="usage-patterns",
        description="Usage-control policy pattern engine",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # classify command
    classify_parser = subparsers.add_parser("classify", help="Detect the pattern of a policy")
    classify_parser.add_argument("file", help="Policy document ('-' for stdin)")
    classify_parser.set_defaults(func=cmd_classify)

    # example command
    example_parser = subparsers.add_parser("example", help="Print an example policy")
    example_parser.add_argument("pattern", help="Pattern name, e.g. N_TIMES_USAGE")
    example_parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    example_parser.set_defaults(func=cmd_example)

    # patterns command
    patterns_parser = subparsers.add_parser("patterns", help="List known patterns")
    patterns_parser.set_defaults(func=cmd_patterns)

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a policy document")
    validate_parser.add_argument("file", help="Policy document ('-' for stdin)")
    validate_parser.set_defaults(func=cmd_validate)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Bind port")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging, verbose=args.verbose)
    args.settings = config

    return args.func(args)


def output(data: Any, args: argparse.Namespace) -> None:
    """Output data in requested format."""
    if getattr(args, "json", False):
        print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, dict):
        for key, value in data.items():
            print(f"{key}: {value}")
    elif isinstance(data, list):
        for item in data:
            print(f"  {item}")
    else:
        print(data)


def cmd_classify(args: argparse.Namespace) -> int:
    """Classify a policy document."""
    try:
        pattern = classify_file(args.file)
    except (FileNotFoundError, PolicyParseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if getattr(args, "json", False):
        output({
            "pattern": pattern.value,
            "recognized": pattern is not Pattern.NOT_RECOGNIZED,
        }, args)
    else:
        print(pattern.value)

    return 0


def cmd_example(args: argparse.Namespace) -> int:
    """Print the example document for a pattern."""
    config: PatternsConfig = args.settings

    try:
        document = example_document(args.pattern, indent=config.output.indent)
    except UnknownPatternError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Run 'usage-patterns patterns' for the list of known patterns", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(document + "\n")
        print(f"Exported to: {args.output}")
    else:
        print(document)

    return 0


def cmd_patterns(args: argparse.Namespace) -> int:
    """List known patterns."""
    patterns = Pattern.concrete()

    if getattr(args, "json", False):
        output([{"name": p.value, "slug": p.slug} for p in patterns], args)
    else:
        print(f"Known Patterns ({len(patterns)})")
        print("=" * 50)
        for pattern in patterns:
            print(f"{pattern.value:<25} {pattern.slug}")

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a policy document."""
    try:
        policy = load_document(args.file)
    except (FileNotFoundError, PolicyParseError) as e:
        print(f"Policy validation failed: {e}")
        return 1

    warnings = validate_policy(policy)

    if getattr(args, "json", False):
        output({
            "valid": True,
            "rules": len(policy.rules),
            "warnings": warnings,
            "policy": policy.to_dict(),
        }, args)
        return 0

    print(f"Policy valid: {len(policy.rules)} rules loaded")
    if warnings:
        print("\nWarnings:")
        for w in warnings:
            print(f"  - {w}")

    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API."""
    import uvicorn

    from usagecontrol.api import create_app

    config: PatternsConfig = args.settings
    if args.host:
        config.api.host = args.host
    if args.port:
        config.api.port = args.port
    if args.verbose:
        config.logging.level = "debug"

    errors = validate_config(config)
    if errors:
        print("Configuration errors:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        return 1

    app = create_app(
        debug=config.logging.level == "debug",
        cors_origins=config.api.cors_origins if config.api.cors_enabled else None,
    )

    uvicorn.run(
        app,
        host=config.api.host,
        port=config.api.port,
        log_level=config.logging.level,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
