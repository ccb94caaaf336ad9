"""In-memory document graph contract for testing and development.

`InMemoryChain` plays all three chain roles (ABI encoder, transaction
executor, table reader) against a simulated deployment of the document
graph contract. It behaves like the deployed contract where the client can
observe it:

- **Encoding**: action arguments are checked the way the ABI serializer
  checks them (names, checksum256 values, content group shape) and encoded
  as hex JSON.
- **Documents**: the contract assigns the hash (sha256 over the content
  groups) and rejects a document whose content already exists.
- **Edges**: both nodes must exist and a ``(from, to, name)`` triple can
  only be created once.
- **Tables**: ``documents`` has a primary index and a hash index (2);
  ``edges`` has a primary index, a from-node index (2) and a to-node
  index (3). Bounds are inclusive, and ``reverse``/``limit`` behave as on
  chain.

Transactions are atomic: if any action fails, none of its rows persist.

**Not a real chain**: there are no signatures, no blocks and no resource
accounting. Authorization only checks that the creator signed the action.
"""

from __future__ import annotations

import asyncio
import copy
import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from docgraph.chain.interfaces import (
    AbiEncoderInterface,
    Action,
    TableReaderInterface,
    TableRows,
    TableRowsRequest,
    TransactionExecutorInterface,
)
from docgraph.chain.names import is_checksum256, is_valid_name
from docgraph.content import ContentGroup
from docgraph.errors import ChainError

_content_groups = TypeAdapter(list[ContentGroup])

# table -> index position -> (row field, key type); None means the primary key
_INDEXES: dict[str, dict[str, tuple[str, str | None]]] = {
    "documents": {"1": ("id", None), "2": ("hash", "sha256")},
    "edges": {"1": ("id", None), "2": ("from_node", "sha256"), "3": ("to_node", "sha256")},
}


def _canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def hash_content_groups(content_groups: list[Any]) -> str:
    """Hash content groups the way the simulated contract identifies documents."""
    return hashlib.sha256(_canonical_json(content_groups).encode()).hexdigest()


def _chain_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]


class InMemoryChain(AbiEncoderInterface, TransactionExecutorInterface, TableReaderInterface):
    """A simulated document graph contract deployed at `contract`.

    `latency` delays every call by that many seconds, which is useful for
    exercising deadlines and cancellation.

    Example:
        ```python
        chain = InMemoryChain("docs.hypha")
        endpoint = ChainEndpoint.of(chain)
        doc = await create_document(endpoint, "docs.hypha", "alice", "doc.json")
        ```
    """

    def __init__(self, contract: str, latency: float = 0.0, clock: Callable[[], str] = _chain_now) -> None:
        if not is_valid_name(contract):
            raise ValueError(f"invalid contract account: {contract!r}")
        self.contract = contract
        self.latency = latency
        self._clock = clock
        self._tables: dict[str, list[dict[str, Any]]] = {"documents": [], "edges": []}
        self._next_id: dict[str, int] = {"documents": 0, "edges": 0}
        self.transactions: list[list[Action]] = []
        self.queries: list[TableRowsRequest] = []

    async def _delay(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)

    # --- ABI encoding ---

    async def abi_json_to_bin(self, code: str, action: str, args: dict[str, Any]) -> str:
        await self._delay()
        if code != self.contract:
            raise ChainError(f"no ABI found for account {code}", status=500)
        validate = {"create": self._check_create, "newedge": self._check_newedge}.get(action)
        if validate is None:
            raise ChainError(f"unknown action {action} in contract {code}", status=500)
        validate(args)
        return _canonical_json(args).encode().hex()

    @staticmethod
    def _check_create(args: dict[str, Any]) -> None:
        creator = args.get("creator")
        if not is_valid_name(creator):
            raise ChainError(f"unable to parse name: {creator!r}", status=500)
        if "content_groups" not in args:
            raise ChainError("missing create.content_groups", status=500)
        try:
            _content_groups.validate_python(args["content_groups"])
        except ValidationError as e:
            raise ChainError(f"invalid create.content_groups: {e.error_count()} errors", status=500) from e

    @staticmethod
    def _check_newedge(args: dict[str, Any]) -> None:
        for field in ("from_node", "to_node"):
            if not is_checksum256(args.get(field)):
                raise ChainError(f"invalid checksum256 for newedge.{field}: {args.get(field)!r}", status=500)
        if not is_valid_name(args.get("edge_name")):
            raise ChainError(f"unable to parse name: {args.get('edge_name')!r}", status=500)

    # --- transaction execution ---

    async def execute(self, actions: list[Action]) -> str:
        await self._delay()
        if not actions:
            raise ChainError("transaction must have at least one action", status=500)
        tables = copy.deepcopy(self._tables)
        next_id = dict(self._next_id)
        for action in actions:
            if action.account != self.contract:
                raise ChainError(f"account {action.account} has no contract deployed", status=500)
            try:
                args = json.loads(bytes.fromhex(action.data))
            except ValueError as e:
                raise ChainError(f"unable to unpack action data for {action.name}", status=500) from e
            signers = {p.actor for p in action.authorization}
            if action.name == "create":
                self._apply_create(tables, next_id, args, signers)
            elif action.name == "newedge":
                self._apply_newedge(tables, next_id, args, signers)
            else:
                raise ChainError(f"unknown action {action.name}", status=500)
        self._tables, self._next_id = tables, next_id
        self.transactions.append(list(actions))
        payload = _canonical_json([a.model_dump() for a in actions]) + str(len(self.transactions))
        return hashlib.sha256(payload.encode()).hexdigest()

    def _apply_create(self, tables, next_id, args: dict[str, Any], signers: set[str]) -> None:
        creator = args["creator"]
        if creator not in signers:
            raise ChainError(f"missing authority of {creator}", status=401)
        doc_hash = hash_content_groups(args["content_groups"])
        if any(row["hash"] == doc_hash for row in tables["documents"]):
            raise ChainError(f"document exists already: {doc_hash}", status=500)
        tables["documents"].append(
            {
                "id": next_id["documents"],
                "hash": doc_hash,
                "creator": creator,
                "content_groups": args["content_groups"],
                "certificates": [],
                "created_date": self._clock(),
                "contract": self.contract,
            }
        )
        next_id["documents"] += 1

    def _apply_newedge(self, tables, next_id, args: dict[str, Any], signers: set[str]) -> None:
        hashes = {row["hash"] for row in tables["documents"]}
        for field in ("from_node", "to_node"):
            if args[field] not in hashes:
                raise ChainError(f"document not found: {args[field]}", status=500)
        key = (args["from_node"], args["to_node"], args["edge_name"])
        if any((e["from_node"], e["to_node"], e["edge_name"]) == key for e in tables["edges"]):
            raise ChainError(f"edge already exists: {args['edge_name']}", status=500)
        tables["edges"].append(
            {
                "id": next_id["edges"],
                "from_node": args["from_node"],
                "to_node": args["to_node"],
                "edge_name": args["edge_name"],
                "creator": sorted(signers)[0] if signers else None,
                "created_date": self._clock(),
                "contract": self.contract,
            }
        )
        next_id["edges"] += 1

    # --- table reads ---

    async def get_table_rows(self, request: TableRowsRequest) -> TableRows:
        await self._delay()
        self.queries.append(request)
        if request.code != self.contract:
            raise ChainError(f"no ABI found for account {request.code}", status=500)
        indexes = _INDEXES.get(request.table)
        if indexes is None:
            raise ChainError(f"table {request.table} is not specified in the ABI", status=500)
        position = request.index_position or "1"
        if position not in indexes:
            raise ChainError(f"invalid index position {position} for table {request.table}", status=500)
        field, key_type = indexes[position]
        if key_type is not None and request.key_type != key_type:
            raise ChainError(f"invalid key type {request.key_type!r} for index {position}", status=500)
        if request.scope != self.contract:
            return TableRows(rows=[])

        def key(row: dict[str, Any]) -> Any:
            return row[field] if key_type is None else row[field].lower()

        def bound(value: str | None) -> Any:
            if value is None or value == "":
                return None
            try:
                return int(value) if key_type is None else value.lower()
            except ValueError as e:
                raise ChainError(f"invalid bound {value!r} for index {position}", status=500) from e

        lower, upper = bound(request.lower_bound), bound(request.upper_bound)
        rows = sorted(self._tables[request.table], key=lambda r: (key(r), r["id"]))
        rows = [
            r for r in rows if (lower is None or key(r) >= lower) and (upper is None or key(r) <= upper)
        ]
        if request.reverse:
            rows.reverse()
        limit = request.limit if request.limit > 0 else len(rows)
        return TableRows(rows=copy.deepcopy(rows[:limit]), more=len(rows) > limit)
