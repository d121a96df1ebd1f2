"""
Chain-data sources for address verifications.

A verification claim binds a recent Ethereum block hash. The client asks
a :class:`BlockSource` for it; the default implementation calls
``eth_getBlockByNumber`` on a JSON-RPC endpoint over ``httpx``. Tests and
applications with their own node access can pass any object with an async
``get_latest_block_hash()``.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from farcaster_hub_rest.errors import BlockSourceError

logger = logging.getLogger(__name__)

DEFAULT_ETH_RPC_URL = "https://cloudflare-eth.com"

_request_ids = itertools.count(1)


@runtime_checkable
class BlockSource(Protocol):
    """Anything that can report the latest block hash as a ``0x`` hex string."""

    async def get_latest_block_hash(self) -> str:
        ...


class EthereumRpcBlockSource:
    """Latest block hash from an Ethereum JSON-RPC endpoint.

    Args:
        rpc_url: JSON-RPC endpoint URL.
        http_client: Optional shared ``httpx.AsyncClient``. When omitted a
            short-lived client is opened per call.
    """

    def __init__(
        self,
        rpc_url: str = DEFAULT_ETH_RPC_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._rpc_url = rpc_url
        self._http_client = http_client
        self._timeout = timeout

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def _post(self, payload: dict[str, Any]) -> Any:
        if self._http_client is not None:
            response = await self._http_client.post(self._rpc_url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._rpc_url, json=payload)
        response.raise_for_status()
        return response.json()

    async def get_latest_block_hash(self) -> str:
        """Hash of the latest block.

        Raises:
            BlockSourceError: If the node answers with an error or no hash.
            httpx.HTTPError: On transport or HTTP status failures.
        """
        payload = {
            "jsonrpc": "2.0",
            "method": "eth_getBlockByNumber",
            "params": ["latest", False],
            "id": next(_request_ids),
        }
        data = await self._post(payload)

        if not isinstance(data, dict):
            raise BlockSourceError("Malformed JSON-RPC response")
        if data.get("error"):
            error = data["error"]
            message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
            raise BlockSourceError(f"eth_getBlockByNumber failed: {message}")

        block = data.get("result") or {}
        block_hash = block.get("hash") if isinstance(block, dict) else None
        if not block_hash:
            raise BlockSourceError("eth_getBlockByNumber returned no block hash")

        logger.debug("Latest block %s: %s", block.get("number"), block_hash)
        return block_hash
