"""Command-line interface for the S3 presigner.

Provides argument parsing and main entry point for signing URLs from the
command line, plus a --stdin mode that speaks the JSON message boundary.
"""

import argparse
import json
import logging
import sys
from typing import Any, Optional

from s3presign.boundary import handle_message
from s3presign.config import ConfigError, load_providers
from s3presign.models import REQUEST_DEFAULTS, ProviderConfig
from s3presign.reporters import ConsoleReporter, JsonReporter, Reporter
from s3presign.runner import PresignRunner
from s3presign.validation import InvalidRequestError, parse_timestamp, validate_expires_in

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_provider_start(self, provider_name: str) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_provider_start(provider_name)

    def on_url_signed(self, provider_name: str, result) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_url_signed(provider_name, result)

    def on_provider_complete(self, result) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_provider_complete(result)

    def on_run_complete(self, results: dict) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_run_complete(results)


def configure_logging(level: int = logging.WARNING, log_format: str = DEFAULT_LOG_FORMAT) -> None:
    """Configure global logging; logs go to stderr."""
    logging.basicConfig(level=level, format=log_format, stream=sys.stderr)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="s3presign",
        description="Generate SigV4 presigned URLs for S3-compatible storage",
    )

    parser.add_argument(
        "-c", "--config",
        default="config.json",
        help="Path to configuration file (default: config.json)",
    )

    parser.add_argument(
        "-p", "--providers",
        metavar="LIST",
        help="Comma-separated list of provider keys to sign for",
    )

    parser.add_argument(
        "-k", "--key",
        dest="keys",
        action="append",
        metavar="KEY",
        help="Object key to sign (repeatable)",
    )

    parser.add_argument(
        "-m", "--method",
        default=REQUEST_DEFAULTS["http_method"],
        help="HTTP method the URL is valid for (default: GET)",
    )

    parser.add_argument(
        "-e", "--expires",
        type=int,
        default=REQUEST_DEFAULTS["expires_in"],
        metavar="SECONDS",
        help=f"URL validity in seconds (default: {REQUEST_DEFAULTS['expires_in']})",
    )

    parser.add_argument(
        "--timestamp",
        metavar="ISO8601",
        help="Signing time, e.g. 2023-01-01T00:00:00Z (default: now)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress per-URL output, show only summary",
    )

    parser.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="Write JSON results to file",
    )

    parser.add_argument(
        "--cross-check",
        action="store_true",
        help="Compare every URL against botocore's presigner",
    )

    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read one JSON boundary request from stdin, write the response to stdout",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log canonical requests and strings to sign",
    )

    return parser.parse_args(argv)


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = [ConsoleReporter(quiet=args.quiet)]

    if args.json_output:
        reporters.append(JsonReporter(output_path=args.json_output))

    return reporters


def filter_providers(
    providers: dict[str, ProviderConfig],
    filter_str: str,
) -> dict[str, ProviderConfig]:
    """Filter providers by comma-separated key list.

    Args:
        providers: All available providers
        filter_str: Comma-separated list of keys to include

    Returns:
        Filtered dictionary of providers
    """
    keys = [k.strip() for k in filter_str.split(",")]
    return {k: v for k, v in providers.items() if k in keys}


def run_boundary(stdin: Any, stdout: Any) -> int:
    """Answer a single boundary request read from stdin."""
    response = handle_message(stdin.read())
    stdout.write(response + b"\n")
    stdout.flush()
    return 0 if json.loads(response)["ok"] else 2


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for cross-check mismatches,
        2 for configuration or input errors
    """
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.stdin:
        return run_boundary(sys.stdin.buffer, sys.stdout.buffer)

    if not args.keys:
        print("No object keys given; use -k/--key", file=sys.stderr)
        return 2

    try:
        validate_expires_in(args.expires)
        timestamp = parse_timestamp(args.timestamp) if args.timestamp else None
    except InvalidRequestError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2

    try:
        providers = load_providers(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.providers:
        providers = filter_providers(providers, args.providers)
        if not providers:
            print("No matching providers found", file=sys.stderr)
            return 2

    reporters = create_reporters(args)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    runner = PresignRunner(
        providers,
        object_keys=args.keys,
        http_method=args.method.upper(),
        expires_in=args.expires,
        timestamp=timestamp,
        cross_check=args.cross_check,
        reporter=reporter,
    )
    result = runner.run()

    if result.has_errors:
        return 2
    return 0 if result.all_matched else 1


if __name__ == "__main__":
    sys.exit(main())
