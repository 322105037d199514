"""Walk through every API operation against a running demo server."""

from __future__ import annotations

import argparse
from pathlib import Path

import httpx

from openfga_demo.cli import output
from openfga_demo.cli.api_test import ResourcePath, make_request, run_action

PAYLOADS_DIR = Path(__file__).parent / "payloads"

# (description, user, action, resource, payload file)
STEPS = [
    (
        "Testing Public Endpoints",
        [
            ("Testing health endpoint...", "alice", "health", None, None),
            ("Testing root endpoint...", "alice", "root", None, None),
        ],
    ),
    (
        "Testing Resource Operations (User: alice)",
        [
            ("Creating a resource...", "alice", "create", ResourcePath(name="demo-resource"), None),
            ("Getting the resource...", "alice", "get", ResourcePath(name="demo-resource"), None),
            ("Updating the resource...", "alice", "update", ResourcePath(name="demo-resource"), None),
            ("Deleting the resource...", "alice", "delete", ResourcePath(name="demo-resource"), None),
        ],
    ),
    (
        "Testing with Different User (User: bob)",
        [
            (
                "Bob trying to create a resource...",
                "bob", "create", ResourcePath("my-app", "api", "org-2", "bob-resource"), None,
            ),
            (
                "Bob trying to get his resource...",
                "bob", "get", ResourcePath("my-app", "api", "org-2", "bob-resource"), None,
            ),
        ],
    ),
    (
        "Testing with Custom Payloads",
        [
            (
                "Creating resource with custom payload...",
                "charlie", "create", ResourcePath(name="payload-test"),
                PAYLOADS_DIR / "create-resource.json",
            ),
            (
                "Updating resource with custom payload...",
                "charlie", "update", ResourcePath(name="payload-test"),
                PAYLOADS_DIR / "update-resource.json",
            ),
        ],
    ),
]


def run_demo(client: httpx.Client, base_url: str) -> int:
    """Run every demo step.

    Returns:
        Number of requests that could not reach the server
    """
    output.console.print("[bold blue]OpenFGA Demo API - Full Demo[/bold blue]")
    unreachable = 0

    for number, (title, steps) in enumerate(STEPS, start=1):
        output.section(f"{number}. {title}")
        for description, user_id, action, resource, payload in steps:
            output.console.print(description)
            if run_action(client, base_url, user_id, action, resource, payload) is None:
                unreachable += 1
            output.console.print()

    output.section(f"{len(STEPS) + 1}. Testing Authentication Scenarios")
    url = ResourcePath(name="test-resource").url(base_url)

    output.console.print("Testing without user header (should fail)...")
    if make_request(client, "GET", url) is None:
        unreachable += 1
    output.console.print()

    output.console.print("Testing with empty user header (should fail)...")
    try:
        response = client.get(url, headers={"X-User-Id": ""})
    except httpx.HTTPError as e:
        output.error(f"Request failed: {e}")
        unreachable += 1
    else:
        output.print_body(response)
        output.report_status(response.status_code)

    output.console.print()
    output.console.print("[yellow]Demo completed![/yellow]")
    output.console.print("\nYou can now test individual endpoints using:")
    output.console.print("  openfga-demo api <user-id> <action> [parameters...]", markup=False)
    return unreachable


def add_parser(sub: argparse._SubParsersAction) -> None:
    parser = sub.add_parser("demo", help="Showcase all API functionality")
    parser.set_defaults(handler=cmd_demo)


def cmd_demo(args: argparse.Namespace) -> int:
    with httpx.Client(timeout=args.timeout) as client:
        unreachable = run_demo(client, args.base_url)
    if unreachable:
        output.error(f"{unreachable} request(s) could not reach {args.base_url}")
        return 1
    return 0
