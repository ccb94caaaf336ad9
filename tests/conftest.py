"""Test fixtures for the document graph client.

This module provides:
- An `InMemoryChain` deployed at a test contract account, and the
  `ChainEndpoint` / `GraphClient` wired to it
- A factory fixture that writes document content files to a temp directory
- Collaborator stubs that fail in controlled ways, for checking how each
  remote failure is wrapped

Content files follow the contract's format: a JSON object with a
``content_groups`` list of groups, each a list of ``{label, value}`` items
where value is ``[type, value]``.
"""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from docgraph.chain.interfaces import (
    AbiEncoderInterface,
    Action,
    ChainEndpoint,
    TableReaderInterface,
    TableRows,
    TableRowsRequest,
    TransactionExecutorInterface,
)
from docgraph.chain.memory import InMemoryChain
from docgraph.errors import ChainError
from docgraph.graph import GraphClient

CONTRACT = "docs.hypha"
CREATOR = "johnnyhypha1"


def content_groups(title: str, owner: str = CREATOR) -> list[list[dict[str, Any]]]:
    """Two labeled content groups whose content depends on `title`."""
    return [
        [
            {"label": "content_group_label", "value": ["string", "details"]},
            {"label": "title", "value": ["string", title]},
            {"label": "owner", "value": ["name", owner]},
        ],
        [
            {"label": "content_group_label", "value": ["string", "system"]},
            {"label": "type", "value": ["name", "proposal"]},
            {"label": "votes", "value": ["int64", 42]},
        ],
    ]


@pytest.fixture
def chain() -> InMemoryChain:
    return InMemoryChain(CONTRACT)


@pytest.fixture
def endpoint(chain: InMemoryChain) -> ChainEndpoint:
    return ChainEndpoint.of(chain)


@pytest.fixture
def graph(endpoint: ChainEndpoint) -> GraphClient:
    return GraphClient(endpoint, CONTRACT)


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[..., Path]:
    """Write a content file and return its path.

    Pass `title` for generated content groups, or `data` for the exact JSON
    object (or any JSON value) to write.
    """
    counter = {"n": 0}

    def _write(title: str = "Hello", data: Any = None, **extra: Any) -> Path:
        counter["n"] += 1
        path = tmp_path / f"doc{counter['n']}.json"
        body = data if data is not None else {"content_groups": content_groups(title), **extra}
        path.write_text(json.dumps(body), encoding="utf-8")
        return path

    return _write


class FailingEncoder(AbiEncoderInterface):
    async def abi_json_to_bin(self, code: str, action: str, args: dict[str, Any]) -> str:
        raise ChainError("abi serializer rejected args", status=500)


class FailingExecutor(TransactionExecutorInterface):
    def __init__(self) -> None:
        self.attempts = 0

    async def execute(self, actions: list[Action]) -> str:
        self.attempts += 1
        raise ChainError("transaction declared expired", status=500)


class FailingReader(TableReaderInterface):
    def __init__(self) -> None:
        self.attempts = 0

    async def get_table_rows(self, request: TableRowsRequest) -> TableRows:
        self.attempts += 1
        raise ChainError("table read failed", status=500)


class StaticReader(TableReaderInterface):
    """Returns the same rows for every query."""

    def __init__(self, rows: list[Any]) -> None:
        self.rows = rows
        self.requests: list[TableRowsRequest] = []

    async def get_table_rows(self, request: TableRowsRequest) -> TableRows:
        self.requests.append(request)
        return TableRows(rows=self.rows)


@pytest.fixture
def failing_encoder() -> FailingEncoder:
    return FailingEncoder()


@pytest.fixture
def failing_executor() -> FailingExecutor:
    return FailingExecutor()


@pytest.fixture
def failing_reader() -> FailingReader:
    return FailingReader()


@pytest.fixture
def static_reader_factory() -> Callable[[list[Any]], StaticReader]:
    return StaticReader


@pytest.fixture
def groups_for() -> Callable[..., list[list[dict[str, Any]]]]:
    return content_groups
