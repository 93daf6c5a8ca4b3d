"""Command line entry point for the exporter."""

import argparse
import logging
import sys
from typing import NoReturn

from dotenv import load_dotenv

from pingdom_exporter import __version__
from pingdom_exporter.config import Settings
from pingdom_exporter.exceptions import ConfigurationError
from pingdom_exporter.runner import run
from pingdom_exporter.services.pingdom_client import PingdomCredentials

SERVER_USAGE = "%(prog)s [options] username password api-key [multi-user-token]"


def create_parser() -> tuple[argparse.ArgumentParser, argparse.ArgumentParser]:
    parser = argparse.ArgumentParser(
        prog="pingdom-exporter",
        description="Prometheus exporter for Pingdom checks and transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    server_parser = subparsers.add_parser(
        "server",
        help="Start the HTTP server",
        description="Start the HTTP server",
        usage=SERVER_USAGE,
    )
    server_parser.add_argument(
        "credentials",
        nargs="*",
        metavar="credential",
        help="username, password, api-key and, for multi-user accounts, the account email",
    )
    server_parser.add_argument(
        "--wait",
        type=int,
        default=None,
        help="time (in seconds) between accessing the Pingdom API (default: 10)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="port to listen on (default: 9158)",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="address to listen on (default: 0.0.0.0)",
    )

    return parser, server_parser


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level_value,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def handle_server(server_parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        credentials = PingdomCredentials.from_args(args.credentials)
    except ValueError:
        server_parser.print_help()
        return 1

    settings = Settings.load().with_overrides(
        wait_seconds=args.wait,
        port=args.port,
        host=args.host,
    )

    try:
        settings.validate_config()
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        server_parser.print_help()
        return 1

    configure_logging(settings)

    return run(settings, credentials)


def main(argv: list[str] | None = None) -> NoReturn:
    load_dotenv()

    parser, server_parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "server":
        sys.exit(handle_server(server_parser, args))

    print(f"Unknown command: {args.command}", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
