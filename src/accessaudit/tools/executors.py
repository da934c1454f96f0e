"""Tool executors — one async handler per registered tool.

Every handler takes the raw ``arguments`` mapping of a ``tools/call`` and
returns a JSON-ready result, or raises an :class:`~accessaudit.errors.AuditError`
subclass.  The engine and the HTML parser are injected collaborators.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from accessaudit.dom.adapter import adapt
from accessaudit.dom.nodes import Document
from accessaudit.dom.parser import Html5libParser, HtmlParser, parse_url
from accessaudit.engine.engine import EvaluationEngine, RuleEngine
from accessaudit.engine.page import Device, Page, Request, Response
from accessaudit.engine.rules import find_rule
from accessaudit.errors import (
    BadInputError,
    HtmlParseError,
    PageDeserializationError,
    RuleNotFoundError,
)
from accessaudit.tools.aggregator import aggregate, filter_outcomes
from accessaudit.tools.models import (
    DEFAULT_PAGE_URL,
    AuditHtmlArguments,
    AuditPageArguments,
    FilterOutcomesArguments,
    GetRuleInfoArguments,
    ListRulesArguments,
)
from accessaudit.utils.validation import describe_validation_error

logger = logging.getLogger(__name__)

_ArgsT = TypeVar("_ArgsT", bound=BaseModel)


def _parse_arguments(model: type[_ArgsT], arguments: Any) -> _ArgsT:
    if not isinstance(arguments, dict):
        raise BadInputError("Tool arguments must be an object")
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise BadInputError(f"Invalid arguments: {describe_validation_error(exc)}") from exc


class AuditTools:
    """The executors behind ``audit_html``, ``audit_page``, ``filter_outcomes``,
    ``get_rule_info`` and ``list_rules``.

    Usage::

        tools = AuditTools()
        result = await tools.audit_html({"html": "<img>", "url": "https://example.com"})
    """

    def __init__(
        self,
        engine: EvaluationEngine | None = None,
        parser: HtmlParser | None = None,
        *,
        default_url: str = DEFAULT_PAGE_URL,
    ) -> None:
        self._engine = engine or RuleEngine()
        self._parser = parser or Html5libParser()
        self._default_url = default_url

    @property
    def engine(self) -> EvaluationEngine:
        return self._engine

    async def audit_html(self, arguments: dict[str, Any]) -> dict[str, Any]:
        args = _parse_arguments(AuditHtmlArguments, arguments)
        url = parse_url(args.url if args.url is not None else self._default_url)

        foreign = await self._parser.parse(args.html, url)
        document = adapt(foreign)
        if not isinstance(document, Document):
            raise HtmlParseError("parser did not produce a document")

        page = Page.of(Request.of("GET", url), Response.of(url, 200), document, Device.standard())
        return await self._audit(page)

    async def audit_page(self, arguments: dict[str, Any]) -> dict[str, Any]:
        args = _parse_arguments(AuditPageArguments, arguments)
        try:
            data = json.loads(args.page_json)
        except json.JSONDecodeError as exc:
            raise PageDeserializationError(str(exc)) from exc
        return await self._audit(Page.from_json(data))

    async def filter_outcomes(self, arguments: dict[str, Any]) -> dict[str, Any]:
        args = _parse_arguments(FilterOutcomesArguments, arguments)
        filtered = filter_outcomes(args.outcomes, args.outcome_type, args.rule_id)
        return {"filtered": filtered, "count": len(filtered)}

    async def get_rule_info(self, arguments: dict[str, Any]) -> dict[str, Any]:
        args = _parse_arguments(GetRuleInfoArguments, arguments)
        rule = find_rule(self._engine.rules, args.rule_id)
        if rule is None:
            raise RuleNotFoundError(args.rule_id)
        return {**rule.to_json(), "uri": rule.uri}

    async def list_rules(self, arguments: dict[str, Any]) -> dict[str, Any]:
        _parse_arguments(ListRulesArguments, arguments)
        rules = [{**rule.to_json(), "uri": rule.uri} for rule in self._engine.rules]
        return {"count": len(rules), "rules": rules}

    async def _audit(self, page: Page) -> dict[str, Any]:
        outcomes = await self._engine.evaluate(page)
        logger.info("Audited %s: %d outcomes", page.request.url, len(outcomes))
        return aggregate(outcomes)
