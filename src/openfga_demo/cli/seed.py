"""Load the authorization model and a tuple scenario into OpenFGA."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from openfga_demo.authz import client as fga
from openfga_demo.authz.scenarios import SHARING_SCENARIO, ScenarioError, load_scenario
from openfga_demo.cli import output
from openfga_demo.core.config import settings


async def seed(scenario_path: Path, new_model: bool, dry_run: bool) -> tuple[str, str, int]:
    """Select the store and model, then write the scenario's tuples.

    Returns:
        Tuple of (store_id, model_id, tuples written)
    """
    scenario = load_scenario(scenario_path)
    output.info(f"Scenario: {scenario.description} ({len(scenario.tuples)} tuples)")
    if dry_run:
        for t in scenario.tuples:
            output.console.print(f"  {t}", markup=False, highlight=False)
        return settings.OPENFGA_STORE_ID or "", settings.OPENFGA_AUTH_MODEL_ID or "", 0

    try:
        store_id, model_id = await fga.ensure_store_and_model()
        if new_model:
            model_id = await fga.write_authorization_model()
        written = await fga.write_tuples(scenario.tuples)
    finally:
        await fga.close_client()
    return store_id, model_id, written


def add_parser(sub: argparse._SubParsersAction) -> None:
    parser = sub.add_parser("seed", help="Write the authorization model and sharing tuples")
    parser.add_argument(
        "--scenario",
        type=Path,
        default=SHARING_SCENARIO,
        help="YAML file with the tuples to write",
    )
    parser.add_argument(
        "--new-model",
        action="store_true",
        help="Write the bundled model even if the store already has one",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the tuples without writing")
    parser.set_defaults(handler=cmd_seed)


def cmd_seed(args: argparse.Namespace) -> int:
    settings.OPENFGA_CLIENT_URL = args.openfga_url
    try:
        store_id, model_id, written = asyncio.run(
            seed(args.scenario, new_model=args.new_model, dry_run=args.dry_run)
        )
    except ScenarioError as e:
        output.error(str(e))
        return 1
    except fga.AuthzError as e:
        output.error(e.message)
        output.warning("Tuples that already exist are rejected; seed a fresh store to start over.")
        return 1

    if args.dry_run:
        return 0

    output.success(f"Wrote {written} tuples")
    output.console.print("\n[yellow]Environment configuration:[/yellow]")
    output.console.print(f"export OPENFGA_CLIENT_URL={args.openfga_url}", highlight=False)
    output.console.print(f"export OPENFGA_STORE_ID={store_id}", highlight=False)
    output.console.print(f"export OPENFGA_AUTH_MODEL_ID={model_id}", highlight=False)
    return 0
