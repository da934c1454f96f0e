"""Protocol layer — JSON-RPC envelopes and the transport-independent router."""

from accessaudit.protocol.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse
from accessaudit.protocol.router import ProtocolRouter, build_router, to_wire

__all__ = [
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "ProtocolRouter",
    "build_router",
    "to_wire",
]
