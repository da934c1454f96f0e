"""Shared error types and JSON-RPC error codes."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 error codes
# ---------------------------------------------------------------------------

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
TOOL_EXECUTION_ERROR = -32000
# Transport level only, never produced by the router.
UNAUTHORIZED = -32001


class AuditError(Exception):
    """Base error for every failure raised inside a tool call."""

    kind = "InternalError"


# ---------------------------------------------------------------------------
# Caller-supplied input
# ---------------------------------------------------------------------------


class BadInputError(AuditError):
    """A caller-supplied argument is malformed or invalid."""

    kind = "BadInput"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail or "Invalid input")


class InvalidUrlError(BadInputError):
    """The page URL could not be parsed."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL: {url!r}" + (f" ({reason})" if reason else ""))


class HtmlParseError(BadInputError):
    """The HTML parser collaborator rejected the document."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to parse HTML: {reason}")


class PageDeserializationError(BadInputError):
    """A serialized page could not be turned back into a :class:`Page`."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to deserialize page: {reason}")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class NotFoundError(AuditError):
    """A referenced tool or rule does not exist."""

    kind = "NotFound"


class ToolNotFoundError(NotFoundError):
    """Requested tool is not in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class RuleNotFoundError(NotFoundError):
    """No rule in the catalog matches the requested identifier."""

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule {rule_id} not found")


# ---------------------------------------------------------------------------
# Engine and internal consistency
# ---------------------------------------------------------------------------


class EngineError(AuditError):
    """The evaluation engine itself failed."""

    kind = "EngineFailure"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Evaluation failed" + (f": {detail}" if detail else ""))


class AggregationError(AuditError):
    """An outcome matched zero or several categories while being counted."""


# ---------------------------------------------------------------------------
# Envelope level
# ---------------------------------------------------------------------------


class ProtocolError(AuditError):
    """The envelope itself is unusable; detected before any tool runs."""

    kind = "ProtocolError"
    code = INVALID_REQUEST


class InvalidRequestError(ProtocolError):
    """The envelope is not a valid JSON-RPC request object."""

    code = INVALID_REQUEST

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Invalid request" + (f": {detail}" if detail else ""))


class MethodNotFoundError(ProtocolError):
    """The envelope names a method the router does not serve."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvalidParamsError(ProtocolError):
    """The method exists but its ``params`` are unusable."""

    code = INVALID_PARAMS

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid params: {detail}")


class SettingsError(Exception):
    """Raised when the settings file fails parsing or validation."""
