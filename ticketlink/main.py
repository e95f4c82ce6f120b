"""ticketlink entry point.

Runs once per pull_request event, typically as a GitHub Actions step.
Usage: ticketlink [--config config.yaml] [--event event.json] [--check].
"""

import argparse
import logging
import sys
from pathlib import Path

from ticketlink.config import ConfigError, load_config
from ticketlink.logging import TicketLinkLogging
from ticketlink.runner import EXIT_FAILED, EXIT_OK, run


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ticketlink",
        description="Link a pull request to its Jira ticket",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file (optional; env and action inputs also apply)",
    )
    parser.add_argument(
        "--event",
        "-e",
        type=Path,
        default=None,
        help="Path to the pull_request event JSON (default: $GITHUB_EVENT_PATH)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv if argv is not None else sys.argv[1:])


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, set up logging, link the pull request."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except Exception as e:
        TicketLinkLogging().setup()
        logging.getLogger("ticketlink").exception("Invalid configuration: %s", e)
        return EXIT_FAILED

    TicketLinkLogging(config.logging).setup()
    log = logging.getLogger("ticketlink")

    try:
        config.validate_required()
    except ConfigError as e:
        log.error("%s", e)
        return EXIT_FAILED

    if args.check:
        print("Config OK:", config.jira.base_url, config.github.api_url)
        return EXIT_OK

    return run(config, event_path=args.event)


if __name__ == "__main__":
    sys.exit(main())
