"""Chain collaborators: interfaces and implementations."""

from docgraph.chain.interfaces import (
    AbiEncoderInterface,
    Action,
    ChainEndpoint,
    PermissionLevel,
    TableReaderInterface,
    TableRows,
    TableRowsRequest,
    TransactionExecutorInterface,
)
from docgraph.chain.memory import InMemoryChain

__all__ = [
    "AbiEncoderInterface",
    "TransactionExecutorInterface",
    "TableReaderInterface",
    "Action",
    "PermissionLevel",
    "TableRows",
    "TableRowsRequest",
    "ChainEndpoint",
    "InMemoryChain",
]
