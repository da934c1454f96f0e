"""accessaudit — accessibility audit tools served over MCP-style JSON-RPC."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from accessaudit.protocol.router import ProtocolRouter as ProtocolRouter
    from accessaudit.protocol.router import build_router as build_router

_LAZY_EXPORTS = {
    "ProtocolRouter": "accessaudit.protocol.router",
    "build_router": "accessaudit.protocol.router",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'accessaudit' has no attribute {name!r}")
