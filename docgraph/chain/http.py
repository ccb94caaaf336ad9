"""HTTP access to a nodeos chain API endpoint.

`NodeosClient` implements ABI encoding and table reads on top of the
``/v1/chain`` RPC endpoints using an httpx ``AsyncClient``. Transaction
signing is not done here; pair it with a `TransactionExecutorInterface`
implementation that holds the keys.
"""

from __future__ import annotations

from typing import Any

import httpx

from docgraph.chain.interfaces import AbiEncoderInterface, TableReaderInterface, TableRows, TableRowsRequest
from docgraph.config import ChainConfig
from docgraph.errors import ChainError
from docgraph.logging import setup_logging

logger = setup_logging()


def _error_message(response: httpx.Response) -> str:
    """Pull the most specific message out of a nodeos error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if not isinstance(body, dict):
        return str(body)
    error = body.get("error") or {}
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("message"):
            return detail["message"]
    return error.get("what") or body.get("message") or response.reason_phrase


class NodeosClient(AbiEncoderInterface, TableReaderInterface):
    """Chain RPC client for ``abi_json_to_bin`` and ``get_table_rows``.

    Example:
        ```python
        async with NodeosClient("https://test.telos.kitchen") as chain:
            endpoint = ChainEndpoint(encoder=chain, executor=signer, reader=chain)
            doc = await get_last_document(endpoint, "docs.hypha")
        ```
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls, config: ChainConfig) -> "NodeosClient":
        return cls(config.endpoint, timeout=config.timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "NodeosClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        url = f"{self.endpoint}/v1/chain/{path}"
        logger.debug({"message": f"POST {path}", "body": body})
        try:
            response = await self.client.post(url, json=body)
        except httpx.HTTPError as e:
            raise ChainError(f"{path}: {e}") from e
        if response.is_error:
            raise ChainError(_error_message(response), status=response.status_code, payload=response.text)
        try:
            return response.json()
        except ValueError as e:
            raise ChainError(f"{path}: response is not JSON", status=response.status_code) from e

    async def abi_json_to_bin(self, code: str, action: str, args: dict[str, Any]) -> str:
        result = await self._post("abi_json_to_bin", {"code": code, "action": action, "args": args})
        try:
            return result["binargs"]
        except (KeyError, TypeError) as e:
            raise ChainError("abi_json_to_bin: response has no binargs", payload=result) from e

    async def get_table_rows(self, request: TableRowsRequest) -> TableRows:
        result = await self._post("get_table_rows", request.to_body())
        if not isinstance(result, dict):
            raise ChainError("get_table_rows: response is not an object", payload=result)
        return TableRows.model_validate(result)
