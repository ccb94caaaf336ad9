"""
Document Graph Client - create and query documents and edges on chain.

A document graph contract stores documents (content-addressed bundles of
content groups) and named, directed edges between them. This package builds
and submits the contract's actions and reads its tables; all graph storage
and consistency live in the contract.

The HTTP client is imported lazily so that models and the in-memory chain
can be used without httpx installed:

    # This does NOT import httpx:
    from docgraph import Document, Edge, InMemoryChain

    # This DOES import httpx (when the symbol is accessed):
    from docgraph import NodeosClient
"""

from typing import TYPE_CHECKING

from docgraph.chain import ChainEndpoint, InMemoryChain
from docgraph.config import ChainConfig, load_chain_config
from docgraph.content import CONTENT_GROUP_LABEL, Content, ContentGroup, FlexValue
from docgraph.context import RequestContext
from docgraph.document import CreateDocumentRequest, Document
from docgraph.edge import CreateEdgeRequest, Edge, EdgeIndex
from docgraph.errors import (
    ChainError,
    ContentError,
    ContentNotFoundError,
    DecodeError,
    DocGraphError,
    DocumentLookupError,
    EncodingError,
    FileReadError,
    NotFoundError,
    QueryError,
    RequestCancelledError,
    SubmissionError,
)
from docgraph.graph import (
    GraphClient,
    create_document,
    create_edge,
    get_document,
    get_edges_from,
    get_edges_from_by_name,
    get_edges_to,
    get_edges_to_by_name,
    get_last_document,
)

if TYPE_CHECKING:
    from docgraph.chain.http import NodeosClient

__all__ = [
    "CONTENT_GROUP_LABEL",
    "Content",
    "ContentGroup",
    "FlexValue",
    "Document",
    "CreateDocumentRequest",
    "Edge",
    "EdgeIndex",
    "CreateEdgeRequest",
    "ChainEndpoint",
    "InMemoryChain",
    "NodeosClient",
    "ChainConfig",
    "load_chain_config",
    "RequestContext",
    "GraphClient",
    "create_document",
    "create_edge",
    "get_edges_from",
    "get_edges_to",
    "get_edges_from_by_name",
    "get_edges_to_by_name",
    "get_last_document",
    "get_document",
    "DocGraphError",
    "FileReadError",
    "DecodeError",
    "EncodingError",
    "SubmissionError",
    "QueryError",
    "DocumentLookupError",
    "NotFoundError",
    "RequestCancelledError",
    "ContentError",
    "ContentNotFoundError",
    "ChainError",
]

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy import for the HTTP client to avoid loading httpx on light imports."""
    if name == "NodeosClient":
        from docgraph.chain.http import NodeosClient
        return NodeosClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
