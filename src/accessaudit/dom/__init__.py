"""DOM layer — internal node tree, tree adapter and parsing collaborators."""

from accessaudit.dom.adapter import NodeKind, adapt
from accessaudit.dom.nodes import (
    Comment,
    Document,
    DocumentType,
    Element,
    ElementContext,
    Node,
    Text,
    iter_elements,
    text_content,
)
from accessaudit.dom.parser import Html5libParser, HtmlParser, parse_url

__all__ = [
    "Comment",
    "Document",
    "DocumentType",
    "Element",
    "ElementContext",
    "Html5libParser",
    "HtmlParser",
    "Node",
    "NodeKind",
    "Text",
    "adapt",
    "iter_elements",
    "parse_url",
    "text_content",
]
