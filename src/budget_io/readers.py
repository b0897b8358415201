"""
Budget I/O Readers

Scenario files are YAML or JSON documents whose top-level keys are the
scenario name and the optional sections (budget, forecast, cash_flow, ...).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import yaml

from budget_engine.models import ScenarioInputs


logger = logging.getLogger(__name__)


def parse_input_dict(data: dict[str, Any]) -> ScenarioInputs:
    """
    Build a ScenarioInputs model from an already-decoded document.

    Both file readers go through here. Field types and value ranges are
    enforced by the pydantic models.

    Raises:
        ValueError: If the document is not a mapping
        pydantic.ValidationError: If a section has bad fields
    """
    if not isinstance(data, dict):
        raise ValueError(
            f"Scenario file must contain a mapping of sections, got {type(data).__name__}"
        )
    return ScenarioInputs.model_validate(data)


def _read(path: str | Path, load: Callable[[Any], Any]) -> ScenarioInputs:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = load(f)
    logger.debug("Loaded %s", path)
    return parse_input_dict(data)


def read_yaml(path: str | Path) -> ScenarioInputs:
    """Read a scenario from a YAML file."""
    return _read(path, yaml.safe_load)


def read_json(path: str | Path) -> ScenarioInputs:
    """Read a scenario from a JSON file."""
    return _read(path, json.load)


_READERS = {
    ".yaml": read_yaml,
    ".yml": read_yaml,
    ".json": read_json,
}


def read_input_file(path: str | Path) -> ScenarioInputs:
    """
    Read a scenario file, choosing the parser from its extension.

    Raises:
        ValueError: For extensions other than .yaml, .yml or .json
    """
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported file format: {path.suffix.lower()}")
    return reader(path)
