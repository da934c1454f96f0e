"""ToolDispatcher — routes tool calls to the executor registered for the name."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from accessaudit.errors import ToolNotFoundError
from accessaudit.tools.executors import AuditTools
from accessaudit.tools.models import ToolCall
from accessaudit.tools.registry import ToolDescriptor, ToolRegistry

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolDispatcher:
    """Maintains a name-to-handler map and dispatches tool calls.

    Usage::

        dispatcher = ToolDispatcher.from_tools(AuditTools())

        tools = dispatcher.all_tools()           # registry, declaration order
        result = await dispatcher.execute(call)  # routes to the matching executor
    """

    def __init__(self, registry: ToolRegistry, handlers: Mapping[str, ToolHandler]) -> None:
        missing = [name for name in registry.names() if name not in handlers]
        if missing:
            msg = f"No handler registered for: {', '.join(missing)}"
            raise ValueError(msg)
        unknown = [name for name in handlers if name not in registry]
        if unknown:
            msg = f"Handlers for unregistered tools: {', '.join(unknown)}"
            raise ValueError(msg)
        self._registry = registry
        self._handlers = {name: handlers[name] for name in registry.names()}

    @classmethod
    def from_tools(cls, tools: AuditTools, registry: ToolRegistry | None = None) -> ToolDispatcher:
        """Bind each registered tool name to the :class:`AuditTools` method of that name."""
        registry = registry or ToolRegistry()
        return cls(registry, {name: getattr(tools, name) for name in registry.names()})

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def all_tools(self) -> list[ToolDescriptor]:
        """Return every descriptor, in declaration order."""
        return list(self._registry)

    async def execute(self, tool_call: ToolCall) -> Any:
        """Route a single tool call to its executor."""
        descriptor = self._registry.get(tool_call.name)
        if descriptor is None:
            raise ToolNotFoundError(tool_call.name)
        return await self._handlers[descriptor.name](tool_call.arguments)
