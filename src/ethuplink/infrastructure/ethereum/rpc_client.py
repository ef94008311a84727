from __future__ import annotations

import itertools
from typing import Any, Optional, Type
from types import TracebackType

import httpx

from ...domain.errors import UplinkConnectionError
from ...middleware.timing import log_timing


class EthereumRpcClient:
    """Asynchronous JSON-RPC client for an Ethereum HTTP provider.

    Only the balance lookup the uplink needs is exposed.
    """

    def __init__(
        self,
        provider_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._provider_url = provider_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        resp = await self._client.post(self._provider_url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if data.get("error"):
            error = data["error"]
            raise UplinkConnectionError(
                f"{method} failed: {error.get('message', error)}"
            )
        return data["result"]

    @log_timing("eth_getBalance")
    async def get_balance(self, account: str) -> int:
        result = await self._call("eth_getBalance", [account, "latest"])
        return int(result, 16)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "EthereumRpcClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
