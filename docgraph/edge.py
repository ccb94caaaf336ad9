"""Edges: named, directed relations between two documents."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class EdgeIndex(str, Enum):
    """Secondary indexes of the ``edges`` table that can be queried by node hash."""

    FROM_NODE = "from_node"
    TO_NODE = "to_node"

    @property
    def position(self) -> str:
        """Index position the chain's table API expects for this index."""
        return _INDEX_POSITIONS[self]


_INDEX_POSITIONS = {
    EdgeIndex.FROM_NODE: "2",
    EdgeIndex.TO_NODE: "3",
}


class Edge(BaseModel):
    """An edge row from the contract's ``edges`` table.

    Edges are immutable once created; the client only creates and reads them.
    """

    model_config = {"frozen": True, "extra": "allow"}

    from_node: str = Field(description="Hash of the source document.")
    to_node: str = Field(description="Hash of the target document.")
    edge_name: str = Field(description="Symbolic edge name (an account-style name).")
    id: int | None = None
    creator: str | None = None
    created_date: datetime | None = None
    contract: str | None = None


class CreateEdgeRequest(BaseModel):
    """Arguments of the contract's ``newedge`` action."""

    model_config = {"frozen": True}

    from_node: str
    to_node: str
    edge_name: str
