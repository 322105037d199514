"""Command line entry point.

Usage examples:
  openfga-demo serve
  openfga-demo check-openfga
  openfga-demo seed
  openfga-demo api alice create my-service web org-1 my-resource
  openfga-demo demo
  openfga-demo listing --store-id 01HXYZ...
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from openfga_demo.cli import api_test, demo, listing, openfga_server, seed
from openfga_demo.core.config import settings


def cmd_serve(args: argparse.Namespace) -> int:
    from openfga_demo.main import run

    run()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openfga-demo",
        description="OpenFGA demo API and tooling",
    )
    parser.add_argument(
        "--base-url",
        default=f"http://localhost:{settings.PORT}",
        help="Demo API base URL",
    )
    parser.add_argument(
        "--openfga-url",
        default=settings.OPENFGA_CLIENT_URL,
        help="OpenFGA HTTP API URL",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.OPENFGA_TIMEOUT_SECONDS,
        help="HTTP timeout in seconds",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the demo API server")
    serve.set_defaults(handler=cmd_serve)

    api_test.add_parser(sub)
    demo.add_parser(sub)
    openfga_server.add_parsers(sub)
    seed.add_parser(sub)
    listing.add_parser(sub)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.handler(args))


if __name__ == "__main__":
    main()
