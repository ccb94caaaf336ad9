"""Error types raised by the document graph client.

Every failure surfaced by `docgraph.graph` is a subclass of `DocGraphError`
and carries the name of the operation that failed plus the identifiers the
caller passed in (file name, contract, hash, edge name). The underlying
cause is always chained with ``raise ... from``.

Collaborators in `docgraph.chain` raise `ChainError`; the graph operations
wrap it into the typed error for the step that failed.
"""

from __future__ import annotations

from typing import Any


class DocGraphError(Exception):
    """Base class for document graph client errors."""

    def __init__(self, operation: str, message: str, **details: Any) -> None:
        self.operation = operation
        self.message = message
        self.details = {k: v for k, v in details.items() if v is not None}
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.details:
            return f"{self.operation}: {self.message}"
        context = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.operation} [{context}]: {self.message}"


class FileReadError(DocGraphError):
    """The document content file could not be read."""


class DecodeError(DocGraphError):
    """Input or response data did not decode into the expected shape."""


class EncodingError(DocGraphError):
    """The ABI encoder rejected the action arguments."""


class SubmissionError(DocGraphError):
    """The transaction executor failed to submit a transaction."""


class QueryError(DocGraphError):
    """A table query failed remotely or its rows did not decode."""


class DocumentLookupError(DocGraphError):
    """The post-creation lookup failed after the transaction was accepted.

    The creation itself succeeded; `transaction` holds the executor's result
    so the caller can reconcile.
    """

    def __init__(self, operation: str, message: str, transaction: str | None = None, **details: Any) -> None:
        self.transaction = transaction
        super().__init__(operation, message, transaction=transaction, **details)


class NotFoundError(DocGraphError):
    """A query that must return a row returned none."""


class RequestCancelledError(DocGraphError):
    """A remote call was aborted by its context's deadline or cancel signal."""


class ContentError(DocGraphError):
    """Document content is malformed."""


class ContentNotFoundError(ContentError):
    """A content group or content item is missing from a document."""


class ChainError(Exception):
    """A remote chain call failed.

    Raised by the collaborator implementations in `docgraph.chain`. `status`
    is the HTTP status when there was one, `what` is the remote message.
    """

    def __init__(self, what: str, status: int | None = None, payload: Any = None) -> None:
        self.what = what
        self.status = status
        self.payload = payload
        super().__init__(what if status is None else f"{status}: {what}")
