"""Outcome aggregation — summary counts, serialization and filtering.

The aggregator never looks inside a rule: it only classifies outcomes into
the four categories, counts them and asks each outcome for its JSON form.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from accessaudit.engine.models import Outcome, OutcomeType
from accessaudit.errors import AggregationError


def is_passed(outcome: Outcome) -> bool:
    return outcome.outcome is OutcomeType.PASSED


def is_failed(outcome: Outcome) -> bool:
    return outcome.outcome is OutcomeType.FAILED


def is_cant_tell(outcome: Outcome) -> bool:
    return outcome.outcome is OutcomeType.CANT_TELL


def is_inapplicable(outcome: Outcome) -> bool:
    return outcome.outcome is OutcomeType.INAPPLICABLE


_CLASSIFIERS: tuple[tuple[str, Callable[[Outcome], bool]], ...] = (
    ("passed", is_passed),
    ("failed", is_failed),
    ("cantTell", is_cant_tell),
    ("inapplicable", is_inapplicable),
)


class OutcomeCounts(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    passed: int = 0
    failed: int = 0
    cant_tell: int = Field(default=0, alias="cantTell")
    inapplicable: int = 0

    def total(self) -> int:
        return self.passed + self.failed + self.cant_tell + self.inapplicable


class Summary(BaseModel):
    """Total plus per-category counts; ``total`` always equals their sum."""

    total: int
    counts: OutcomeCounts

    @model_validator(mode="after")
    def _total_matches_counts(self) -> Summary:
        if self.total != self.counts.total():
            msg = f"total {self.total} does not match counts {self.counts.total()}"
            raise ValueError(msg)
        return self

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def classify(outcome: Outcome) -> str:
    """Return the single category *outcome* belongs to.

    Raises:
        AggregationError: When the outcome matches zero or several categories.
    """
    matches = [name for name, predicate in _CLASSIFIERS if predicate(outcome)]
    if len(matches) != 1:
        msg = f"Outcome for {outcome.rule} matched categories {matches}"
        raise AggregationError(msg)
    return matches[0]


def summarize(outcomes: Sequence[Outcome]) -> Summary:
    """Count *outcomes* per category in a single pass."""
    tally = {name: 0 for name, _ in _CLASSIFIERS}
    total = 0
    for outcome in outcomes:
        tally[classify(outcome)] += 1
        total += 1
    return Summary(total=total, counts=OutcomeCounts.model_validate(tally))


def serialize(outcomes: Sequence[Outcome]) -> list[dict[str, Any]]:
    return [outcome.to_json() for outcome in outcomes]


def aggregate(outcomes: Sequence[Outcome]) -> dict[str, Any]:
    """Shape engine output into the ``{summary, outcomes}`` tool result."""
    return {
        "summary": summarize(outcomes).to_json(),
        "outcomes": serialize(outcomes),
    }


def _rule_uri(outcome: dict[str, Any]) -> str:
    test = outcome.get("test")
    if isinstance(test, dict) and isinstance(test.get("@id"), str):
        return test["@id"]
    rule = outcome.get("rule")
    if isinstance(rule, dict) and isinstance(rule.get("uri"), str):
        return rule["uri"]
    return ""


def filter_outcomes(
    outcomes: list[dict[str, Any]],
    outcome_type: OutcomeType | None = None,
    rule_id: str | None = None,
) -> list[dict[str, Any]]:
    """Keep serialized outcomes matching every filter given.

    With no filters the input list is returned as is.
    """
    filtered = outcomes
    if outcome_type is not None:
        filtered = [o for o in filtered if o.get("outcome") == outcome_type.value]
    if rule_id:
        filtered = [o for o in filtered if rule_id in _rule_uri(o)]
    return filtered
