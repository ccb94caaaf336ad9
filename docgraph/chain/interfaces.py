"""Interfaces to the remote chain.

The graph client needs three capabilities from the chain, each behind its
own abstract interface so they can be backed by different libraries or by
the in-memory contract used in tests:

- **AbiEncoderInterface**: turn JSON action arguments into the contract's
  binary action data, using the ABI published by the contract.
- **TransactionExecutorInterface**: sign and push a transaction made of
  actions, returning the transaction result (usually the transaction id).
- **TableReaderInterface**: read rows from a contract table, optionally
  through a secondary index and between key bounds.

All methods are coroutines and raise `ChainError` when the remote side
rejects the call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ACTIVE_PERMISSION = "active"


class PermissionLevel(BaseModel):
    model_config = {"frozen": True}

    actor: str
    permission: str = ACTIVE_PERMISSION


class Action(BaseModel):
    """A single contract action with its authorization and binary arguments."""

    model_config = {"frozen": True}

    account: str = Field(description="Contract account the action is sent to.")
    name: str = Field(description="Action name, e.g. 'create' or 'newedge'.")
    authorization: list[PermissionLevel]
    data: str = Field(description="Hex-encoded action data from the ABI encoder.")


class TableRowsRequest(BaseModel):
    """Parameters of a ``get_table_rows`` call.

    Field names match the chain API's request body. `lower_bound` and
    `upper_bound` are inclusive; setting both to the same key is an
    equality lookup.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str
    scope: str
    table: str
    index_position: str | None = None
    key_type: str | None = None
    lower_bound: str | None = None
    upper_bound: str | None = None
    limit: int = 10
    reverse: bool = False
    json_: bool = Field(default=True, alias="json")

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class TableRows(BaseModel):
    rows: list[Any] = Field(default_factory=list)
    more: bool = False
    next_key: str | None = None


class AbiEncoderInterface(ABC):
    @abstractmethod
    async def abi_json_to_bin(self, code: str, action: str, args: dict[str, Any]) -> str:
        """Encode `args` for `code`'s `action` and return hex binary data."""


class TransactionExecutorInterface(ABC):
    @abstractmethod
    async def execute(self, actions: list[Action]) -> str:
        """Sign and push a transaction containing `actions`.

        Returns the transaction result reported by the chain, normally the
        transaction id. Delivery is at-most-once from this interface's point
        of view; implementations do not retry.
        """


class TableReaderInterface(ABC):
    @abstractmethod
    async def get_table_rows(self, request: TableRowsRequest) -> TableRows:
        """Return the rows selected by `request` as decoded JSON objects."""


class ChainEndpoint(BaseModel):
    """The remote chain as seen by the graph client: one of each capability.

    A single object may fill several roles (the in-memory chain fills all
    three).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    encoder: AbiEncoderInterface
    executor: TransactionExecutorInterface
    reader: TableReaderInterface

    @classmethod
    def of(cls, chain: Any) -> "ChainEndpoint":
        return cls(encoder=chain, executor=chain, reader=chain)
