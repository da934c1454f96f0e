"""Internal node tree — the document representation the rule engine reads.

The tree is a closed tagged union discriminated by ``type``:
:class:`Document`, :class:`Element`, :class:`Text`, :class:`Comment` and
:class:`DocumentType`.  Every node is a frozen pydantic model so pages can be
validated straight from JSON and serialized back without a separate codec.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTML_NAMESPACE = "http://www.w3.org/1999/xhtml"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Text(_Node):
    """A run of character data; never empty."""

    type: Literal["text"] = "text"
    data: str = Field(min_length=1)


class Comment(_Node):
    """A comment node.

    Accepted when a serialized page carries one, never produced by the adapter.
    """

    type: Literal["comment"] = "comment"
    data: str = ""


class DocumentType(_Node):
    """A ``<!DOCTYPE>`` declaration.

    ``None`` marks an identifier that was not declared at all; an empty string
    means it was declared empty.
    """

    type: Literal["type"] = "type"
    name: str = "html"
    public_id: str | None = Field(default=None, alias="publicId")
    system_id: str | None = Field(default=None, alias="systemId")


class Element(_Node):
    """An element with a lower-case name, attributes and ordered children."""

    type: Literal["element"] = "element"
    name: str
    namespace: str | None = HTML_NAMESPACE
    attributes: dict[str, str] = Field(default_factory=dict)
    children: tuple[Node, ...] = ()

    @field_validator("name")
    @classmethod
    def _lower_name(cls, value: str) -> str:
        return value.lower()

    def attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes


class Document(_Node):
    """Root of an internal tree."""

    type: Literal["document"] = "document"
    children: tuple[Node, ...] = ()

    @property
    def document_element(self) -> Element | None:
        """The first element child, usually ``<html>``."""
        for child in self.children:
            if isinstance(child, Element):
                return child
        return None


Node = Annotated[
    Document | Element | Text | Comment | DocumentType,
    Field(discriminator="type"),
]

Element.model_rebuild()
Document.model_rebuild()


# ---------------------------------------------------------------------------
# Traversal helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ElementContext:
    """An element together with its position in the tree."""

    element: Element
    path: str
    ancestors: tuple[Element, ...]


def iter_elements(document: Document) -> Iterator[ElementContext]:
    """Yield every element in document order with an XPath-like path."""
    # One frame per open element; sibling positions are counted per name.
    stack: list[tuple[Iterator[Node], str, tuple[Element, ...], dict[str, int]]] = [
        (iter(document.children), "", (), {})
    ]
    while stack:
        children, prefix, ancestors, positions = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            continue
        if not isinstance(child, Element):
            continue
        positions[child.name] = positions.get(child.name, 0) + 1
        path = f"{prefix}/{child.name}[{positions[child.name]}]"
        yield ElementContext(element=child, path=path, ancestors=ancestors)
        stack.append((iter(child.children), path, (*ancestors, child), {}))


def text_content(node: Element | Document) -> str:
    """Concatenate the character data of every descendant text node."""
    parts: list[str] = []
    stack: list[Iterator[Node]] = [iter(node.children)]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
        elif isinstance(child, Text):
            parts.append(child.data)
        elif isinstance(child, Element):
            stack.append(iter(child.children))
    return "".join(parts)
