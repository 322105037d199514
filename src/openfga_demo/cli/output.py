"""Console output shared by the CLI commands."""

import json
from enum import Enum

import httpx
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

console = Console()


class StatusBucket(str, Enum):
    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNEXPECTED = "unexpected"


def classify_status(status_code: int) -> StatusBucket:
    if 200 <= status_code < 300:
        return StatusBucket.SUCCESS
    if 400 <= status_code < 500:
        return StatusBucket.CLIENT_ERROR
    if status_code >= 500:
        return StatusBucket.SERVER_ERROR
    return StatusBucket.UNEXPECTED


def info(message: str) -> None:
    console.print(f"[blue]\\[INFO][/blue] {escape(message)}", highlight=False)


def success(message: str) -> None:
    console.print(f"[green]\\[SUCCESS][/green] {escape(message)}", highlight=False)


def error(message: str) -> None:
    console.print(f"[red]\\[ERROR][/red] {escape(message)}", highlight=False)


def warning(message: str) -> None:
    console.print(f"[yellow]\\[WARNING][/yellow] {escape(message)}", highlight=False)


def section(title: str) -> None:
    console.print()
    console.rule(f"[bold green]{title}[/bold green]", align="left")


def print_body(response: httpx.Response) -> bool:
    """Print a response body, pretty-printed when it is JSON.

    Returns:
        True if the body parsed as JSON
    """
    try:
        body = response.json()
    except ValueError:
        console.print(response.text, markup=False, highlight=False)
        return False
    console.print(Syntax(json.dumps(body, indent=2), "json", theme="ansi_dark", background_color="default"))
    return True


def report_status(status_code: int) -> StatusBucket:
    bucket = classify_status(status_code)
    console.print(f"HTTP Status Code: {status_code}")
    if bucket is StatusBucket.SUCCESS:
        success("Request successful!")
    elif bucket is StatusBucket.CLIENT_ERROR:
        error("Client error (4xx)")
    elif bucket is StatusBucket.SERVER_ERROR:
        error("Server error (5xx)")
    else:
        warning(f"Unexpected status code: {status_code}")
    return bucket
