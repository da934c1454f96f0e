"""Evaluation engine — the collaborator that turns a page into outcomes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from accessaudit.engine.models import Outcome, Rule
from accessaudit.engine.page import Page
from accessaudit.engine.rules import RULES
from accessaudit.errors import EngineError
from accessaudit.utils.telemetry import ATTR_OUTCOME_TOTAL, ATTR_RULE_COUNT, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


@runtime_checkable
class EvaluationEngine(Protocol):
    """Evaluates a page against a static rule catalog."""

    @property
    def rules(self) -> tuple[Rule, ...]: ...

    async def evaluate(self, page: Page) -> list[Outcome]: ...


class RuleEngine:
    """Runs every rule of its catalog, in order, against a page.

    Evaluation happens in a worker thread so concurrent calls do not block
    the event loop.  Any exception raised by a rule is reported as
    :class:`EngineError`.
    """

    def __init__(self, rules: Sequence[Rule] = RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    async def evaluate(self, page: Page) -> list[Outcome]:
        with _tracer.start_as_current_span("accessaudit.engine.evaluate") as span:
            span.set_attribute(ATTR_RULE_COUNT, len(self._rules))
            try:
                outcomes = await asyncio.to_thread(self._evaluate, page)
            except Exception as exc:
                logger.exception("Rule evaluation failed for %s", page.request.url)
                raise EngineError(str(exc)) from exc
            span.set_attribute(ATTR_OUTCOME_TOTAL, len(outcomes))
        logger.debug("Evaluated %d rules, %d outcomes", len(self._rules), len(outcomes))
        return outcomes

    def _evaluate(self, page: Page) -> list[Outcome]:
        outcomes: list[Outcome] = []
        for rule in self._rules:
            outcomes.extend(rule.evaluate(page))
        return outcomes
