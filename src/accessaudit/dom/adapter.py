"""Tree adapter — foreign DOM nodes to the internal node tree.

The foreign tree is anything exposing the W3C DOM ``nodeType`` discriminator,
``childNodes`` and the per-kind properties (``localName``, ``attributes``,
``data``, ``publicId`` ...).  ``xml.dom.minidom`` trees built by html5lib are
the ones produced in practice.

Conversion is a post-order walk over an explicit stack, one branch per node
kind, so document depth is bounded by memory rather than the interpreter's
recursion limit.  Unrecognised kinds and comments adapt to ``None`` and are
dropped by their parent; the adapter degrades structurally and never raises.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from accessaudit.dom.nodes import (
    HTML_NAMESPACE,
    Document,
    DocumentType,
    Element,
    Node,
    Text,
)


class NodeKind(IntEnum):
    """DOM ``nodeType`` values the adapter understands."""

    ELEMENT = 1
    TEXT = 3
    COMMENT = 8
    DOCUMENT = 9
    DOCUMENT_TYPE = 10


_CONTAINERS = (NodeKind.ELEMENT, NodeKind.DOCUMENT)
_DONE = object()


class _Pending:
    """A foreign container whose children are still being adapted."""

    __slots__ = ("node", "children", "adapted")

    def __init__(self, node: Any) -> None:
        self.node = node
        self.children = iter(getattr(node, "childNodes", None) or ())
        self.adapted: list[Node] = []

    def build(self) -> Node:
        children = tuple(self.adapted)
        if getattr(self.node, "nodeType", None) == NodeKind.DOCUMENT:
            return Document(children=children)
        return Element(
            name=_element_name(self.node),
            namespace=getattr(self.node, "namespaceURI", None) or HTML_NAMESPACE,
            attributes=_attributes(self.node),
            children=children,
        )


def adapt(node: Any) -> Node | None:
    """Convert *node* and its subtree; ``None`` means "drop this node"."""
    if not _is_container(node):
        return _adapt_leaf(node)

    # Ids of the containers on the current path; a node that is its own
    # ancestor is dropped so cyclic trees still terminate.
    on_path = {id(node)}
    stack = [_Pending(node)]
    while True:
        top = stack[-1]
        child = next(top.children, _DONE)
        if child is _DONE:
            stack.pop()
            on_path.discard(id(top.node))
            built = top.build()
            if not stack:
                return built
            stack[-1].adapted.append(built)
        elif child is None or id(child) in on_path:
            continue
        elif _is_container(child):
            on_path.add(id(child))
            stack.append(_Pending(child))
        else:
            leaf = _adapt_leaf(child)
            if leaf is not None:
                top.adapted.append(leaf)


def _is_container(node: Any) -> bool:
    return node is not None and getattr(node, "nodeType", None) in _CONTAINERS


def _adapt_leaf(node: Any) -> Node | None:
    kind = getattr(node, "nodeType", None)

    if kind == NodeKind.TEXT:
        data = getattr(node, "data", None)
        if not data:
            return None
        return Text(data=str(data))

    if kind == NodeKind.DOCUMENT_TYPE:
        return DocumentType(
            name=getattr(node, "name", None) or "html",
            public_id=_optional_str(getattr(node, "publicId", None)),
            system_id=_optional_str(getattr(node, "systemId", None)),
        )

    # Comments and unknown kinds.
    return None


def _element_name(node: Any) -> str:
    name = getattr(node, "localName", None) or getattr(node, "tagName", None) or ""
    return str(name).lower()


def _attributes(node: Any) -> dict[str, str]:
    raw = getattr(node, "attributes", None)
    if not raw:
        return {}
    # minidom exposes a NamedNodeMap with items(); other DOMs expose Attr lists.
    if hasattr(raw, "items"):
        return {str(name): str(value) for name, value in raw.items()}
    return {str(attr.name): str(attr.value) for attr in raw}


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)
