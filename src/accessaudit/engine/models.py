"""Outcome and rule models produced and consumed by the evaluation engine."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from accessaudit.dom.nodes import ElementContext
    from accessaudit.engine.page import Page


class OutcomeType(str, Enum):
    """The four verdict categories an outcome falls into."""

    PASSED = "passed"
    FAILED = "failed"
    CANT_TELL = "cantTell"
    INAPPLICABLE = "inapplicable"


class Target(BaseModel):
    """The element an outcome was evaluated against."""

    model_config = ConfigDict(frozen=True)

    path: str
    name: str


class Outcome(BaseModel):
    """One rule's verdict against one target."""

    model_config = ConfigDict(frozen=True)

    outcome: OutcomeType
    rule: str
    target: Target | None = None
    message: str = ""

    def to_json(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "rule": {"uri": self.rule},
            "test": {"@id": self.rule},
            "target": self.target.model_dump() if self.target is not None else None,
            "message": self.message,
        }


class Requirement(BaseModel):
    """A WCAG success criterion a rule maps to."""

    model_config = ConfigDict(frozen=True)

    criterion: str
    title: str
    level: Literal["A", "AA", "AAA"]


class Verdict(NamedTuple):
    context: ElementContext
    outcome: OutcomeType
    message: str


@dataclass(frozen=True)
class Rule:
    """A catalog entry: identity, metadata and the check that produces verdicts.

    ``check`` yields one :class:`Verdict` per applicable element.  A rule that
    yields nothing is reported as a single ``inapplicable`` outcome.
    """

    uri: str
    code: str
    title: str
    check: Callable[[Page], Iterable[Verdict]] = field(repr=False, compare=False)
    requirements: tuple[Requirement, ...] = ()
    tags: tuple[str, ...] = ()

    def evaluate(self, page: Page) -> list[Outcome]:
        outcomes = [
            Outcome(
                outcome=verdict.outcome,
                rule=self.uri,
                target=Target(path=verdict.context.path, name=verdict.context.element.name),
                message=verdict.message,
            )
            for verdict in self.check(page)
        ]
        if not outcomes:
            outcomes.append(
                Outcome(
                    outcome=OutcomeType.INAPPLICABLE,
                    rule=self.uri,
                    message="No applicable targets",
                )
            )
        return outcomes

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "atomic",
            "uri": self.uri,
            "code": self.code,
            "title": self.title,
            "requirements": [r.model_dump() for r in self.requirements],
            "tags": list(self.tags),
        }
