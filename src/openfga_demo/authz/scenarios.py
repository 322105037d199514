"""Relationship tuple scenarios loaded from YAML."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from openfga_demo.authz.client import RelationTuple
from openfga_demo.authz.objects import split_object

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SHARING_SCENARIO = FIXTURES_DIR / "sharing.yaml"


class ScenarioError(Exception):
    """Raised when a scenario file cannot be processed."""


@dataclass
class Scenario:
    description: str
    tuples: list[RelationTuple]
    expectations: dict[str, str] = field(default_factory=dict)


def _parse_tuple(index: int, entry: dict) -> RelationTuple:
    try:
        user, relation, obj = entry["user"], entry["relation"], entry["object"]
    except (KeyError, TypeError):
        raise ScenarioError(f"Tuple #{index} needs user, relation and object: {entry!r}")

    try:
        split_object(obj)
        split_object(user.split("#", 1)[0])
    except ValueError as e:
        raise ScenarioError(f"Tuple #{index}: {e}")

    return RelationTuple(user=user, relation=relation, object=obj)


def load_scenario(path: Path = SHARING_SCENARIO) -> Scenario:
    if not path.exists():
        raise ScenarioError(f"Scenario not found at {path}")
    with path.open() as handle:
        data = yaml.safe_load(handle) or {}

    entries = data.get("tuples") or []
    if not entries:
        raise ScenarioError(f"Scenario {path} defines no tuples")

    return Scenario(
        description=data.get("description", path.stem),
        tuples=[_parse_tuple(i, entry) for i, entry in enumerate(entries)],
        expectations=data.get("expectations") or {},
    )
