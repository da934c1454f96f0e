"""Transport bindings — stdio, HTTP and function invocation."""

from accessaudit.transports.auth import extract_credential, is_authorized
from accessaudit.transports.function import FunctionHandler, handler
from accessaudit.transports.stdio import StdioServer

__all__ = [
    "FunctionHandler",
    "StdioServer",
    "extract_credential",
    "handler",
    "is_authorized",
]
