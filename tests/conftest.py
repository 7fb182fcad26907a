"""Shared fixtures: sample collections and a scripted in-process runner."""

from __future__ import annotations

import asyncio
import copy
import itertools
from typing import Any

import pytest
import structlog

from splitrun.models.result import ExecutionResult
from splitrun.runners.base import BaseRunner


class ScriptedRunner(BaseRunner):
    """Runner that fakes an engine run without any HTTP traffic.

    Copies the document, assigns ids n0, n1, ... to every node in
    pre-order (so ids repeat across partitions), and reports one execution
    per request with a passing 'has body' assertion plus a 'status is 200'
    assertion that fails for requests named in `failing`.
    """

    def __init__(
        self,
        calls: list[str],
        failing: set[str] | None = None,
        delays: dict[str, float] | None = None,
        errors: dict[str, Exception] | None = None,
        finished: list[str] | None = None,
    ) -> None:
        self._calls = calls
        self._failing = failing or set()
        self._delays = delays or {}
        self._errors = errors or {}
        self._finished = finished if finished is not None else []

    async def run(self, collection: dict[str, Any], reporter: str = "json") -> ExecutionResult:
        name = collection["info"]["name"]
        self._calls.append(name)
        await asyncio.sleep(self._delays.get(name, 0))
        if name in self._errors:
            raise self._errors[name]

        tree = copy.deepcopy(collection)
        counter = itertools.count()
        executions: list[dict[str, Any]] = []

        def walk(node: dict[str, Any]) -> None:
            for child in node.get("item", []):
                child["id"] = f"n{next(counter)}"
                if "item" in child:
                    walk(child)
                    continue
                assertions: list[dict[str, Any]] = [{"assertion": "has body", "skipped": False}]
                status = {"assertion": "status is 200", "skipped": False}
                if child.get("name") in self._failing:
                    status["error"] = {
                        "name": "AssertionError",
                        "message": "expected 500 to equal 200",
                        "test": "status is 200",
                    }
                assertions.append(status)
                executions.append(
                    {
                        "id": child["id"],
                        "item": {"id": child["id"], "name": child.get("name")},
                        "assertions": assertions,
                    }
                )

        walk(tree)
        self._finished.append(name)
        return ExecutionResult.model_validate({"collection": tree, "executions": executions})


def _request(name: str) -> dict[str, Any]:
    return {"name": name, "request": {"method": "GET", "url": f"{{{{baseUrl}}}}/{name.lower()}"}}


@pytest.fixture
def api_collection() -> dict[str, Any]:
    """Collection 'API' with folders Users (GetUser) and Orders (nested)."""
    return {
        "info": {
            "_postman_id": "c0ffee",
            "name": "API",
            "schema": "https://schema.getpostman.com/json/collection/v2.1.0/collection.json",
        },
        "item": [
            {"name": "Users", "item": [_request("GetUser")]},
            {
                "name": "Orders",
                "item": [
                    _request("ListOrders"),
                    {"name": "Archive", "item": [_request("OldOrders")]},
                ],
            },
        ],
        "variable": [{"key": "baseUrl", "value": "http://localhost:3000"}],
    }


@pytest.fixture
def make_runner_factory():
    """Build (calls, factory) where factory returns fresh ScriptedRunners."""

    def build(**kwargs: Any):
        calls: list[str] = []

        def factory() -> ScriptedRunner:
            return ScriptedRunner(calls=calls, **kwargs)

        return calls, factory

    return build


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()
