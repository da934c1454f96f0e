"""Tool call and per-tool argument models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from accessaudit.engine.models import OutcomeType

DEFAULT_PAGE_URL = "about:blank"


class ToolCall(BaseModel):
    """A request to run one registered tool."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class _Arguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AuditHtmlArguments(_Arguments):
    html: str
    url: str | None = None


class AuditPageArguments(_Arguments):
    page_json: str = Field(alias="pageJson")


class FilterOutcomesArguments(_Arguments):
    outcomes: list[dict[str, Any]]
    outcome_type: OutcomeType | None = Field(default=None, alias="outcomeType")
    rule_id: str | None = Field(default=None, alias="ruleId")


class GetRuleInfoArguments(_Arguments):
    rule_id: str = Field(alias="ruleId", min_length=1)


class ListRulesArguments(_Arguments):
    pass
