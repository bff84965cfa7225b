"""
Node Integration Layer.

Provides abstracted access to an Ethereum JSON-RPC node for transaction
submission and receipt lookups.
"""

from txprobe.node.interface import (
    NodeConnectionError,
    NodeError,
    NodeInterface,
    Receipt,
    RpcError,
)
from txprobe.node.jsonrpc import JsonRpcAdapter

__all__ = [
    "NodeInterface",
    "NodeError",
    "NodeConnectionError",
    "RpcError",
    "Receipt",
    "JsonRpcAdapter",
]
