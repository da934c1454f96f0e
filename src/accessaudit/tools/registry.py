"""Tool registry — the static catalog served by ``tools/list``."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from accessaudit.engine.models import OutcomeType


class ToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="audit_html",
        description=(
            "Run an accessibility audit on HTML content. "
            "Provide the HTML string and optionally a URL for context."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "html": {"type": "string", "description": "The HTML content to audit"},
                "url": {
                    "type": "string",
                    "description": "Optional URL for context (defaults to 'about:blank')",
                },
            },
            "required": ["html"],
        },
    ),
    ToolDescriptor(
        name="audit_page",
        description=(
            "Run an accessibility audit on a serialized page "
            "(request, response, document tree and device as JSON)."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "pageJson": {"type": "string", "description": "JSON string of a serialized page"},
            },
            "required": ["pageJson"],
        },
    ),
    ToolDescriptor(
        name="filter_outcomes",
        description=(
            "Filter audit outcomes by type (passed, failed, cantTell, inapplicable) or rule ID."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "outcomes": {"type": "array", "description": "Array of outcome objects to filter"},
                "outcomeType": {
                    "type": "string",
                    "enum": [t.value for t in OutcomeType],
                    "description": "Filter by outcome type",
                },
                "ruleId": {
                    "type": "string",
                    "description": "Filter by specific rule ID (e.g., 'R1', 'R2')",
                },
            },
            "required": ["outcomes"],
        },
    ),
    ToolDescriptor(
        name="get_rule_info",
        description="Get information about a specific accessibility rule.",
        input_schema={
            "type": "object",
            "properties": {
                "ruleId": {
                    "type": "string",
                    "description": "The rule ID to get information about (e.g., 'R1', 'R2')",
                },
            },
            "required": ["ruleId"],
        },
    ),
    ToolDescriptor(
        name="list_rules",
        description="List all available accessibility rules.",
        input_schema={"type": "object", "properties": {}},
    ),
)


class ToolRegistry:
    """Immutable, ordered view over a set of tool descriptors."""

    def __init__(self, tools: tuple[ToolDescriptor, ...] = TOOLS) -> None:
        names = [t.name for t in tools]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Duplicate tool names: {', '.join(duplicates)}"
            raise ValueError(msg)
        self._tools = tools
        self._by_name = {t.name: t for t in tools}

    def list(self) -> tuple[ToolDescriptor, ...]:
        """Return every descriptor in declaration order."""
        return self._tools

    def names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self._tools)

    def get(self, name: str) -> ToolDescriptor | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)
