"""Tests for RuleEngine."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from accessaudit.dom.nodes import Document
from accessaudit.engine.engine import EvaluationEngine, RuleEngine
from accessaudit.engine.models import OutcomeType, Rule, Verdict
from accessaudit.engine.page import Page, Request, Response
from accessaudit.engine.rules import RULES
from accessaudit.errors import EngineError


def _empty_page() -> Page:
    return Page.of(Request.of("GET", "about:blank"), Response.of("about:blank"), Document())


def _broken_check(page: Page) -> Iterator[Verdict]:
    raise RuntimeError("boom")
    yield  # pragma: no cover


class TestRuleEngine:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(RuleEngine(), EvaluationEngine)

    def test_default_catalog(self) -> None:
        assert RuleEngine().rules == RULES

    async def test_evaluates_every_rule_in_order(self) -> None:
        outcomes = await RuleEngine().evaluate(_empty_page())
        assert [o.rule for o in outcomes] == [r.uri for r in RULES]
        assert all(o.outcome is OutcomeType.INAPPLICABLE for o in outcomes)

    async def test_custom_catalog(self) -> None:
        engine = RuleEngine(RULES[:2])
        outcomes = await engine.evaluate(_empty_page())
        assert len(outcomes) == 2

    async def test_rule_failure_becomes_engine_error(self) -> None:
        broken = Rule(uri="urn:test:broken", code="X1", title="Broken", check=_broken_check)
        engine = RuleEngine([broken])
        with pytest.raises(EngineError, match="Evaluation failed: boom") as exc_info:
            await engine.evaluate(_empty_page())
        assert exc_info.value.kind == "EngineFailure"
