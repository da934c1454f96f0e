"""Tool layer — registry, executors, dispatch and outcome aggregation."""

from accessaudit.tools.aggregator import Summary, aggregate, filter_outcomes, summarize
from accessaudit.tools.dispatcher import ToolDispatcher
from accessaudit.tools.executors import AuditTools
from accessaudit.tools.models import ToolCall
from accessaudit.tools.registry import TOOLS, ToolDescriptor, ToolRegistry

__all__ = [
    "TOOLS",
    "AuditTools",
    "Summary",
    "ToolCall",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolRegistry",
    "aggregate",
    "filter_outcomes",
    "summarize",
]
