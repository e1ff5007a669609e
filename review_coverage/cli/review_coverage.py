"""Main CLI entry point for review-coverage."""

import argparse
import logging
import sys
from functools import partial
from pathlib import Path

from ..config import REPO_DELAY_SECONDS, RATE_LIMIT_MAX_WAIT, WINDOW_DAYS, default_output_path
from ..errors import AuthorizationError, ConfigError, RateLimitError, RateLimitExhausted

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_AUTH = 2
EXIT_RATE_LIMIT = 3
EXIT_UNEXPECTED = 4
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-coverage",
        description="Per-repository review coverage of merged pull requests in a GitHub org",
        epilog="Run 'review-coverage <command> --help' for more information on a command.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # report command - fetch, classify, write CSV
    report_parser = subparsers.add_parser(
        "report",
        help="Compute review coverage and write the CSV",
        description="Fetch merged PRs for every repository in the org and classify their reviews.",
    )
    report_parser.add_argument("--org", type=str, default=None, help="GitHub organization (default: GITHUB_ORG)")
    report_parser.add_argument("--token", type=str, default=None, help="GitHub token (default: GITHUB_TOKEN)")
    report_parser.add_argument(
        "--days",
        "-d",
        type=int,
        default=WINDOW_DAYS,
        help=f"Window length in days, ending now (default: {WINDOW_DAYS})",
    )
    report_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="CSV path (default: by_repo_<days>d.csv in the current directory)",
    )
    report_parser.add_argument(
        "--delay",
        type=float,
        default=REPO_DELAY_SECONDS,
        help=f"Seconds to pause between repositories (default: {REPO_DELAY_SECONDS:g})",
    )
    report_parser.add_argument(
        "--max-wait",
        type=float,
        default=RATE_LIMIT_MAX_WAIT,
        help="Give up if a single rate-limit wait exceeds this many seconds (default: wait forever)",
    )
    report_parser.add_argument(
        "--keep-going",
        "-k",
        action="store_true",
        help="Skip repositories that fail instead of stopping the run",
    )
    report_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Report settings file (default: coverage.yaml if present)",
    )

    # init command - write default coverage.yaml
    init_parser = subparsers.add_parser(
        "init",
        help="Generate a default coverage.yaml",
        description="Write report settings (repo exclusions, bot detection) with defaults.",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("coverage.yaml"),
        help="Output file path (default: coverage.yaml)",
    )

    return parser


def run_report(args: argparse.Namespace) -> int:
    """Run the report command, mapping failures to exit codes."""
    # Import here to keep --help fast
    import trio
    from rich.console import Console

    from ..main import main as report_main
    from ..main import setup_logging

    console = Console()
    output = args.output or default_output_path(args.days)

    try:
        setup_logging()
        failures = trio.run(
            partial(
                report_main,
                console,
                output,
                args.days,
                args.delay,
                org=args.org,
                token=args.token,
                continue_on_error=args.keep_going,
                max_wait=args.max_wait,
                config_path=args.config,
            )
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except AuthorizationError as e:
        logger.error(f"Authorization failed: {e}")
        print(f"Error: authorization failed, check the token and its scopes ({e})", file=sys.stderr)
        return EXIT_AUTH
    except (RateLimitExhausted, RateLimitError) as e:
        logger.error(f"Rate limit: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RATE_LIMIT
    except KeyboardInterrupt:
        print("Interrupted, no CSV written", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_UNEXPECTED

    return EXIT_UNEXPECTED if failures else EXIT_OK


def init_config(output: Path) -> int:
    from ..report_config import ReportConfig

    if output.exists():
        print(f"{output} already exists, not overwriting", file=sys.stderr)
        return EXIT_CONFIG
    output.write_text(ReportConfig.default().to_yaml())
    print(f"Wrote {output}")
    return EXIT_OK


def main(argv: list[str] | None = None):
    """Main CLI entry point for review-coverage."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "report":
        sys.exit(run_report(args))

    elif args.command == "init":
        sys.exit(init_config(args.output))

    elif args.command is None:
        parser.print_help()
        sys.exit(0)

    else:
        print(f"Unknown command: {args.command}")
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
