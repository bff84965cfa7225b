"""
JSON-RPC adapter for node integration.

Provides node access via Ethereum JSON-RPC 2.0 over HTTP.
"""

import itertools
from typing import Any, List, Optional

import httpx
import structlog
from eth_utils import to_hex

from txprobe.config import ProbeConfig, get_config
from txprobe.node.interface import (
    NodeInterface,
    NodeConnectionError,
    Receipt,
    RpcError,
)

logger = structlog.get_logger(__name__)


class JsonRpcAdapter(NodeInterface):
    """
    JSON-RPC adapter.

    Implements the NodeInterface with one HTTP POST per call.
    """

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        rpc_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the JSON-RPC adapter.

        Args:
            config: Probe configuration. Uses global config if not provided.
            rpc_url: Endpoint override; defaults to config.rpc_url
            transport: Custom httpx transport (used by tests)
        """
        self.config = config or get_config()
        self.rpc_url = rpc_url or self.config.rpc_url
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Establish connection (create HTTP client)."""
        if self._client is not None:
            return

        if not self.rpc_url:
            raise NodeConnectionError("RPC URL not configured")

        self._client = httpx.AsyncClient(
            timeout=self.config.rpc_timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=self._transport,
        )
        logger.info("rpc_client_created", rpc_url=self.rpc_url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("rpc_client_closed")

    async def _call(self, method: str, params: List[Any]) -> Any:
        """Make a JSON-RPC call and return its result."""
        if not self._client:
            await self.connect()

        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        try:
            response = await self._client.post(self.rpc_url, json=payload)
        except httpx.RequestError as e:
            logger.error("rpc_request_error", method=method, error=str(e))
            raise NodeConnectionError(f"RPC request failed: {e}")

        if response.status_code != 200:
            # Some nodes report JSON-RPC errors with a non-200 status
            body = self._decode(response)
            if isinstance(body, dict) and body.get("error"):
                raise self._rpc_error(method, body["error"])
            logger.error(
                "rpc_http_error",
                method=method,
                status=response.status_code,
                error=response.text,
            )
            raise NodeConnectionError(f"RPC HTTP error {response.status_code}: {response.text}")

        body = self._decode(response)
        if not isinstance(body, dict):
            raise NodeConnectionError(f"Malformed RPC response: {response.text}")

        if body.get("error"):
            raise self._rpc_error(method, body["error"])

        return body.get("result")

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _rpc_error(method: str, error: Any) -> RpcError:
        if isinstance(error, dict):
            message = str(error.get("message", error))
            code = error.get("code")
            data = error.get("data")
        else:
            message, code, data = str(error), None, None
        logger.warning("rpc_error", method=method, code=code, error=message)
        return RpcError(message, code=code, data=data)

    async def get_chain_id(self) -> int:
        """Get the chain ID."""
        return int(await self._call("eth_chainId", []), 16)

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        """Get the account nonce."""
        return int(await self._call("eth_getTransactionCount", [address, block]), 16)

    async def get_gas_price(self) -> int:
        """Get the suggested gas price."""
        return int(await self._call("eth_gasPrice", []), 16)

    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        """Submit a signed transaction."""
        tx_hash = await self._call("eth_sendRawTransaction", [to_hex(raw_tx)])
        logger.info("tx_submitted", tx_hash=tx_hash)
        return tx_hash

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        """Get a transaction receipt."""
        data = await self._call("eth_getTransactionReceipt", [tx_hash])
        if data is None:
            return None
        if not isinstance(data, dict):
            raise NodeConnectionError(f"Malformed receipt for {tx_hash}: {data!r}")
        try:
            return Receipt.from_rpc(data)
        except (TypeError, ValueError) as e:
            raise NodeConnectionError(f"Malformed receipt for {tx_hash}: {e}")

    async def get_transaction(self, tx_hash: str) -> Optional[dict]:
        """Get transaction details."""
        data = await self._call("eth_getTransactionByHash", [tx_hash])
        if data is not None and not isinstance(data, dict):
            raise NodeConnectionError(f"Malformed transaction for {tx_hash}: {data!r}")
        return data
