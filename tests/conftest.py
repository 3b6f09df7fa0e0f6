"""Conformance fixture loader for dispatch_criteria.

Loads YAML fixtures from tests/fixtures/ and parametrizes the conformance
tests with them. Two document shapes are supported:

- operation fixtures (01-03): ``operation`` plus cases holding that
  operation's arguments and the expected string;
- dispatcher fixtures (04): a ``config`` dict plus request cases, or
  ``expect_error: true`` for configs that must be rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class OperationCase:
    """A single case from an operation fixture."""

    fixture_name: str
    case_name: str
    operation: str
    args: dict[str, Any]
    expect: str


@dataclass
class DispatcherFixture:
    """A dispatcher fixture document."""

    name: str
    source: str
    config: dict[str, Any]
    cases: list[dict[str, Any]]
    expect_error: bool


# ─── Fixture loading ────────────────────────────────────────────────────────


def _load_documents(path: Path) -> list[dict[str, Any]]:
    """Load a fixture YAML file (may contain multiple documents)."""
    with path.open(encoding="utf-8") as f:
        return [doc for doc in yaml.safe_load_all(f) if doc is not None]


def load_operation_cases() -> list[OperationCase]:
    """Load all operation fixtures (01-03)."""
    cases: list[OperationCase] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("0[1-3]_*.yaml")):
        for doc in _load_documents(yaml_file):
            for case in doc["cases"]:
                args = {k: v for k, v in case.items() if k not in ("name", "expect")}
                cases.append(
                    OperationCase(
                        fixture_name=doc["name"],
                        case_name=case["name"],
                        operation=doc["operation"],
                        args=args,
                        expect=case["expect"],
                    )
                )
    return cases


def load_dispatcher_fixtures() -> list[DispatcherFixture]:
    """Load all dispatcher fixtures (04)."""
    fixtures: list[DispatcherFixture] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("04_*.yaml")):
        for doc in _load_documents(yaml_file):
            fixtures.append(
                DispatcherFixture(
                    name=doc["name"],
                    source=yaml_file.name,
                    config=doc["config"],
                    cases=doc.get("cases", []),
                    expect_error=doc.get("expect_error", False),
                )
            )
    return fixtures


# ─── Parametrization ────────────────────────────────────────────────────────


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "operation_case" in metafunc.fixturenames:
        cases = load_operation_cases()
        metafunc.parametrize(
            "operation_case",
            cases,
            ids=[f"{c.fixture_name}::{c.case_name}" for c in cases],
        )

    if "dispatcher_fixture" in metafunc.fixturenames:
        want_error = metafunc.function.__name__.endswith("_error")
        fixtures = [f for f in load_dispatcher_fixtures() if f.expect_error is want_error]
        metafunc.parametrize(
            "dispatcher_fixture",
            fixtures,
            ids=[f"{f.source}::{f.name}" for f in fixtures],
        )
