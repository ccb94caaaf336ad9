"""Document graph operations against a deployed document graph contract.

Every operation takes the `ChainEndpoint` to talk to and the contract
account, performs one or two round trips, and returns plain models. Nothing
is cached between calls; every read goes back to the contract's tables.

Writes:
    - `create_document()`: submit a ``create`` action built from a JSON
      content file, then read back the newest document.
    - `create_edge()`: submit a ``newedge`` action between two documents.

Reads:
    - `get_edges_from()` / `get_edges_to()` and their ``_by_name`` variants
    - `get_last_document()`
    - `get_document()`

Each remote call runs under an optional `RequestContext` (deadline and
cancel signal). Failures are raised as the typed errors in
`docgraph.errors`, carrying the operation and its inputs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from docgraph.chain.interfaces import (
    ACTIVE_PERMISSION,
    Action,
    ChainEndpoint,
    PermissionLevel,
    TableRowsRequest,
)
from docgraph.context import RequestContext, run_remote
from docgraph.document import CreateDocumentRequest, Document
from docgraph.edge import CreateEdgeRequest, Edge, EdgeIndex
from docgraph.errors import (
    ChainError,
    DecodeError,
    DocGraphError,
    DocumentLookupError,
    EncodingError,
    FileReadError,
    NotFoundError,
    QueryError,
    SubmissionError,
)
from docgraph.logging import setup_logging

logger = setup_logging()

CREATE_ACTION = "create"
NEW_EDGE_ACTION = "newedge"
DOCUMENTS_TABLE = "documents"
EDGES_TABLE = "edges"
DOCUMENT_HASH_INDEX = "2"
HASH_KEY_TYPE = "sha256"
EDGE_QUERY_LIMIT = 1000


def load_create_request(file_name: str | Path, creator: str) -> CreateDocumentRequest:
    """Read a content file and build the ``create`` arguments for `creator`.

    The file must hold a JSON object with a ``content_groups`` list. A
    ``creator`` field in the file is replaced; other fields are kept.
    """
    operation = "create_document"
    try:
        text = Path(file_name).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(operation, f"cannot read file: {e}", file=str(file_name)) from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(operation, f"invalid JSON: {e}", file=str(file_name)) from e
    if not isinstance(data, dict):
        raise DecodeError(operation, f"expected a JSON object, got {type(data).__name__}", file=str(file_name))
    data["creator"] = creator
    try:
        return CreateDocumentRequest.model_validate(data)
    except ValidationError as e:
        raise DecodeError(operation, f"invalid document content: {e}", file=str(file_name)) from e


async def _submit(
    endpoint: ChainEndpoint,
    contract: str,
    creator: str,
    action_name: str,
    args: dict[str, Any],
    ctx: RequestContext | None,
    operation: str,
    **details: Any,
) -> str:
    """Encode `args`, wrap them in a single action authorized by creator@active, and push it."""
    try:
        data = await run_remote(
            ctx, endpoint.encoder.abi_json_to_bin(contract, action_name, args), operation, **details
        )
    except ChainError as e:
        logger.warning({"message": "abi_json_to_bin failed", "action": action_name, "error": str(e), **details})
        raise EncodingError(operation, f"cannot encode {action_name}: {e}", contract=contract, **details) from e

    action = Action(
        account=contract,
        name=action_name,
        authorization=[PermissionLevel(actor=creator, permission=ACTIVE_PERMISSION)],
        data=data,
    )
    logger.debug(action)
    try:
        return await run_remote(ctx, endpoint.executor.execute([action]), operation, **details)
    except ChainError as e:
        logger.warning({"message": "transaction failed", "action": action_name, "error": str(e), **details})
        raise SubmissionError(operation, f"transaction failed: {e}", contract=contract, **details) from e


async def _query(
    endpoint: ChainEndpoint,
    request: TableRowsRequest,
    ctx: RequestContext | None,
    operation: str,
    **details: Any,
) -> list[Any]:
    logger.debug(request)
    try:
        result = await run_remote(ctx, endpoint.reader.get_table_rows(request), operation, **details)
    except (ChainError, ValidationError) as e:
        logger.warning({"message": "get_table_rows failed", "table": request.table, "error": str(e), **details})
        raise QueryError(operation, f"get_table_rows {request.table}: {e}", contract=request.code, **details) from e
    return result.rows


def _decode_rows(rows: list[Any], model: type, operation: str, **details: Any) -> list[Any]:
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as e:
        raise QueryError(operation, f"cannot decode {model.__name__} rows: {e}", **details) from e


async def create_document(
    endpoint: ChainEndpoint,
    contract: str,
    creator: str,
    file_name: str | Path,
    ctx: RequestContext | None = None,
) -> Document:
    """Create a document on chain from a JSON content file and return it.

    The contract assigns the document's hash, and the ``create`` action does
    not return it, so the new document is found by reading back the newest
    row of the documents table. Under concurrent creators that row may
    belong to someone else; callers that need certainty should compare the
    returned content groups with what they submitted.

    Raises:
        FileReadError, DecodeError: before anything is sent.
        EncodingError, SubmissionError: the creation did not happen.
        DocumentLookupError: the creation happened but reading it back failed.
    """
    operation = "create_document"
    request = load_create_request(file_name, creator)
    transaction = await _submit(
        endpoint,
        contract,
        creator,
        CREATE_ACTION,
        request.to_action_args(),
        ctx,
        operation,
        file=str(file_name),
    )
    logger.info({"message": "document created", "file": str(file_name), "transaction": transaction})

    try:
        return await get_last_document(endpoint, contract, ctx)
    except DocGraphError as e:
        raise DocumentLookupError(
            operation,
            f"document was created but could not be read back: {e}",
            transaction=transaction,
            contract=contract,
            file=str(file_name),
        ) from e


async def create_edge(
    endpoint: ChainEndpoint,
    contract: str,
    creator: str,
    from_node: str,
    to_node: str,
    edge_name: str,
    ctx: RequestContext | None = None,
) -> str:
    """Create a directed edge named `edge_name` and return the transaction result.

    Hashes and the edge name are validated by the chain, not here.
    """
    request = CreateEdgeRequest(from_node=from_node, to_node=to_node, edge_name=edge_name)
    transaction = await _submit(
        endpoint,
        contract,
        creator,
        NEW_EDGE_ACTION,
        request.model_dump(),
        ctx,
        "create_edge",
        from_node=from_node,
        to_node=to_node,
        edge_name=edge_name,
    )
    logger.info({"message": "edge created", "edge": request.model_dump(), "transaction": transaction})
    return transaction


async def get_edges(
    endpoint: ChainEndpoint,
    contract: str,
    document: Document,
    index: EdgeIndex,
    ctx: RequestContext | None = None,
) -> list[Edge]:
    """Return all edges whose `index` node is `document`, in the chain's order."""
    operation = f"get_edges_{'from' if index is EdgeIndex.FROM_NODE else 'to'}"
    request = TableRowsRequest(
        code=contract,
        scope=contract,
        table=EDGES_TABLE,
        index_position=index.position,
        key_type=HASH_KEY_TYPE,
        lower_bound=document.hash,
        upper_bound=document.hash,
        limit=EDGE_QUERY_LIMIT,
    )
    rows = await _query(endpoint, request, ctx, operation, hash=document.hash)
    return _decode_rows(rows, Edge, operation, contract=contract, hash=document.hash)


async def get_edges_from(
    endpoint: ChainEndpoint, contract: str, document: Document, ctx: RequestContext | None = None
) -> list[Edge]:
    """Edges leaving `document`."""
    return await get_edges(endpoint, contract, document, EdgeIndex.FROM_NODE, ctx)


async def get_edges_to(
    endpoint: ChainEndpoint, contract: str, document: Document, ctx: RequestContext | None = None
) -> list[Edge]:
    """Edges arriving at `document`."""
    return await get_edges(endpoint, contract, document, EdgeIndex.TO_NODE, ctx)


async def get_edges_from_by_name(
    endpoint: ChainEndpoint,
    contract: str,
    document: Document,
    edge_name: str,
    ctx: RequestContext | None = None,
) -> list[Edge]:
    edges = await get_edges_from(endpoint, contract, document, ctx)
    return [edge for edge in edges if edge.edge_name == edge_name]


async def get_edges_to_by_name(
    endpoint: ChainEndpoint,
    contract: str,
    document: Document,
    edge_name: str,
    ctx: RequestContext | None = None,
) -> list[Edge]:
    edges = await get_edges_to(endpoint, contract, document, ctx)
    return [edge for edge in edges if edge.edge_name == edge_name]


async def get_last_document(
    endpoint: ChainEndpoint, contract: str, ctx: RequestContext | None = None
) -> Document:
    """Return the most recently created document.

    Raises:
        NotFoundError: the documents table is empty.
        QueryError: the read failed or the row did not decode.
    """
    operation = "get_last_document"
    request = TableRowsRequest(code=contract, scope=contract, table=DOCUMENTS_TABLE, reverse=True, limit=1)
    rows = await _query(endpoint, request, ctx, operation)
    if not rows:
        raise NotFoundError(operation, "no documents", contract=contract)
    return _decode_rows(rows[:1], Document, operation, contract=contract)[0]


async def get_document(
    endpoint: ChainEndpoint, contract: str, doc_hash: str, ctx: RequestContext | None = None
) -> Document:
    """Return the document with hash `doc_hash` via the documents hash index."""
    operation = "get_document"
    request = TableRowsRequest(
        code=contract,
        scope=contract,
        table=DOCUMENTS_TABLE,
        index_position=DOCUMENT_HASH_INDEX,
        key_type=HASH_KEY_TYPE,
        lower_bound=doc_hash,
        upper_bound=doc_hash,
        limit=1,
    )
    rows = await _query(endpoint, request, ctx, operation, hash=doc_hash)
    if not rows:
        raise NotFoundError(operation, "document not found", contract=contract, hash=doc_hash)
    return _decode_rows(rows[:1], Document, operation, contract=contract, hash=doc_hash)[0]


class GraphClient:
    """Binds a chain endpoint and contract account to the graph operations.

    Holds no state beyond the two bindings, so one client can be shared by
    concurrent tasks.

    Example:
        ```python
        graph = GraphClient(ChainEndpoint.of(InMemoryChain("docs.hypha")), "docs.hypha")
        a = await graph.create_document("alice", "a.json")
        b = await graph.create_document("alice", "b.json")
        await graph.create_edge("alice", a.hash, b.hash, "owns")
        assert [e.to_node for e in await graph.get_edges_from_by_name(a, "owns")] == [b.hash]
        ```
    """

    def __init__(self, endpoint: ChainEndpoint, contract: str):
        self.endpoint = endpoint
        self.contract = contract

    async def create_document(
        self, creator: str, file_name: str | Path, ctx: RequestContext | None = None
    ) -> Document:
        return await create_document(self.endpoint, self.contract, creator, file_name, ctx)

    async def create_edge(
        self, creator: str, from_node: str, to_node: str, edge_name: str, ctx: RequestContext | None = None
    ) -> str:
        return await create_edge(self.endpoint, self.contract, creator, from_node, to_node, edge_name, ctx)

    async def get_edges_from(self, document: Document, ctx: RequestContext | None = None) -> list[Edge]:
        return await get_edges_from(self.endpoint, self.contract, document, ctx)

    async def get_edges_to(self, document: Document, ctx: RequestContext | None = None) -> list[Edge]:
        return await get_edges_to(self.endpoint, self.contract, document, ctx)

    async def get_edges_from_by_name(
        self, document: Document, edge_name: str, ctx: RequestContext | None = None
    ) -> list[Edge]:
        return await get_edges_from_by_name(self.endpoint, self.contract, document, edge_name, ctx)

    async def get_edges_to_by_name(
        self, document: Document, edge_name: str, ctx: RequestContext | None = None
    ) -> list[Edge]:
        return await get_edges_to_by_name(self.endpoint, self.contract, document, edge_name, ctx)

    async def get_last_document(self, ctx: RequestContext | None = None) -> Document:
        return await get_last_document(self.endpoint, self.contract, ctx)

    async def get_document(self, doc_hash: str, ctx: RequestContext | None = None) -> Document:
        return await get_document(self.endpoint, self.contract, doc_hash, ctx)
