"""Evaluation engine — page model, outcomes and the built-in rule catalog."""

from accessaudit.engine.engine import EvaluationEngine, RuleEngine
from accessaudit.engine.models import Outcome, OutcomeType, Requirement, Rule, Target, Verdict
from accessaudit.engine.page import Device, Page, Request, Response, Viewport
from accessaudit.engine.rules import RULE_BASE_URI, RULES, find_rule

__all__ = [
    "RULES",
    "RULE_BASE_URI",
    "Device",
    "EvaluationEngine",
    "Outcome",
    "OutcomeType",
    "Page",
    "Request",
    "Requirement",
    "Response",
    "Rule",
    "RuleEngine",
    "Target",
    "Verdict",
    "Viewport",
    "find_rule",
]
