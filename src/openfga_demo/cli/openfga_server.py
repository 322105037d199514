"""Locate or start a local OpenFGA server."""

from __future__ import annotations

import argparse
import os
import shutil
import subprocess
import sys
from enum import Enum

import httpx

from openfga_demo.cli import output

COMMON_PORTS = (8080, 8081, 8082)
OPENFGA_IMAGE = "openfga/openfga"

PORT_NOTES = {
    8080: "HTTP API",
    8081: "gRPC API",
    3000: "Playground (web UI)",
}

ENV_VARS = ("OPENFGA_CLIENT_URL", "OPENFGA_STORE_ID", "OPENFGA_AUTH_MODEL_ID")


class ProbeResult(str, Enum):
    OPENFGA = "openfga"
    OTHER_SERVICE = "other_service"
    NO_SERVICE = "no_service"


def probe_port(client: httpx.Client, host: str, port: int) -> ProbeResult:
    """Tell an OpenFGA server apart from some other listener on a port."""
    base = f"http://{host}:{port}"
    try:
        response = client.get(f"{base}/healthz")
    except httpx.HTTPError:
        return ProbeResult.NO_SERVICE
    if response.is_success:
        return ProbeResult.OPENFGA

    try:
        client.get(base)
    except httpx.HTTPError:
        return ProbeResult.NO_SERVICE
    return ProbeResult.OTHER_SERVICE


def find_openfga(client: httpx.Client, host: str, ports=COMMON_PORTS) -> int | None:
    """Return the first port with a healthy OpenFGA server, printing each probe."""
    for port in ports:
        result = probe_port(client, host, port)
        if result is ProbeResult.OPENFGA:
            output.console.print(f"Checking port {port}... [green]OpenFGA server found![/green]")
            output.console.print(f"OpenFGA is running on http://{host}:{port}", highlight=False)
            return port
        if result is ProbeResult.OTHER_SERVICE:
            output.console.print(f"Checking port {port}... [yellow]Service found but not OpenFGA[/yellow]")
        else:
            output.console.print(f"Checking port {port}... [red]No service[/red]")
    return None


def docker_run_command(interactive: bool) -> list[str]:
    command = ["docker", "run", "--rm"]
    if interactive:
        command.append("-it")
    for port in PORT_NOTES:
        command += ["-p", f"{port}:{port}"]
    return command + [OPENFGA_IMAGE, "run", "--playground-enabled"]


def _print_start_instructions() -> None:
    output.console.print("[yellow]To start OpenFGA server:[/yellow]\n")
    output.console.print("1. Using Docker:")
    output.console.print(f"   {' '.join(docker_run_command(interactive=True))}", markup=False)
    output.console.print("   or: openfga-demo start-openfga\n")
    output.console.print("2. Using Docker Compose (if you have docker-compose.yml):")
    output.console.print("   docker-compose up openfga\n")
    output.console.print("3. Download and run binary:")
    output.console.print("   # Download from https://github.com/openfga/openfga/releases")
    output.console.print("   ./openfga run --playground-enabled\n")
    output.console.print("[yellow]Common OpenFGA ports:[/yellow]")
    for port, note in PORT_NOTES.items():
        output.console.print(f"   - {port}: {note}")


def add_parsers(sub: argparse._SubParsersAction) -> None:
    check = sub.add_parser("check-openfga", help="Look for a running OpenFGA server")
    check.add_argument("--host", default="localhost")
    check.add_argument("--ports", type=int, nargs="+", default=list(COMMON_PORTS))
    check.set_defaults(handler=cmd_check)

    start = sub.add_parser("start-openfga", help="Run OpenFGA in Docker (foreground)")
    start.set_defaults(handler=cmd_start)


def cmd_check(args: argparse.Namespace) -> int:
    output.console.print("[bold blue]OpenFGA Server Status Check[/bold blue]")
    output.console.print("============================\n")

    with httpx.Client(timeout=args.timeout) as client:
        port = find_openfga(client, args.host, args.ports)

    output.console.print()
    if port is None:
        output.console.print("[red]OpenFGA server not found on common ports.[/red]\n")
        _print_start_instructions()
    else:
        output.console.print("[yellow]Suggested environment configuration:[/yellow]")
        output.console.print(f"export OPENFGA_CLIENT_URL=http://{args.host}:{port}\n", highlight=False)
        output.console.print("[green]OpenFGA server is running![/green]\n")
        output.console.print("[yellow]Next steps:[/yellow]")
        output.console.print("1. Set environment variables (export them or create a .env file)")
        output.console.print("2. Create a store, model and tuples: openfga-demo seed")
        output.console.print("3. Update OPENFGA_STORE_ID and OPENFGA_AUTH_MODEL_ID in your environment\n")
        output.console.print("You can use the OpenFGA playground at http://localhost:3000 (if enabled)")

    output.console.print("\n[blue]Current environment variables:[/blue]")
    for name in ENV_VARS:
        output.console.print(f"{name}: {os.environ.get(name) or 'not set'}", highlight=False)
    return 0 if port is not None else 1


def cmd_start(args: argparse.Namespace) -> int:
    output.console.print("Starting OpenFGA server with Docker...")
    output.console.print("======================================")

    if shutil.which("docker") is None:
        output.error("Docker is not installed or not in PATH")
        return 1

    info = subprocess.run(["docker", "info"], capture_output=True, text=True)
    if info.returncode != 0:
        output.error("Docker is not running")
        return 1

    output.console.print("Starting OpenFGA server...")
    output.console.print("Ports:")
    for port, note in PORT_NOTES.items():
        output.console.print(f"  - {port}: {note}")
    output.console.print()

    try:
        result = subprocess.run(docker_run_command(interactive=sys.stdin.isatty()))
    except KeyboardInterrupt:
        result = None

    output.console.print("\nOpenFGA server stopped.")
    return result.returncode if result else 0
