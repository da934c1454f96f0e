"""Built-in rule catalog.

Each rule is a plain generator over the page's elements; :class:`Rule` turns
the verdicts into outcomes.  Rules only read the internal tree, they never
mutate it.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterable, Iterator
from pathlib import PurePosixPath
from urllib.parse import urlsplit

from accessaudit.dom.nodes import (
    Element,
    ElementContext,
    Node,
    Text,
    iter_elements,
    text_content,
)
from accessaudit.engine.models import OutcomeType, Requirement, Rule, Verdict
from accessaudit.engine.page import Page

RULE_BASE_URI = "https://accessaudit.dev/rules/"

_UNRENDERED = frozenset({"head", "script", "style", "template", "noscript"})
_NON_TEXT_INPUTS = frozenset({"hidden", "submit", "reset", "button", "image"})
_DEFAULT_BUTTON_NAMES = {"submit": "Submit", "reset": "Reset"}
_LANG_RE = re.compile(r"^[A-Za-z]{2,3}(-[A-Za-z0-9]{1,8})*$")

PASSED = OutcomeType.PASSED
FAILED = OutcomeType.FAILED
CANT_TELL = OutcomeType.CANT_TELL


# ---------------------------------------------------------------------------
# Tree queries shared by the rules
# ---------------------------------------------------------------------------


def _is_hidden(element: Element) -> bool:
    return (
        element.name in _UNRENDERED
        or element.has_attribute("hidden")
        or (element.attribute("aria-hidden") or "").strip().lower() == "true"
    )


def _is_rendered(context: ElementContext) -> bool:
    return not any(_is_hidden(e) for e in (*context.ancestors, context.element))


def _root(page: Page) -> ElementContext | None:
    first = next(iter_elements(page.document), None)
    if first is None or first.element.name != "html":
        return None
    return first


def _ids(page: Page) -> dict[str, Element]:
    ids: dict[str, Element] = {}
    for context in iter_elements(page.document):
        element_id = context.element.attribute("id")
        if element_id and element_id not in ids:
            ids[element_id] = context.element
    return ids


def _aria_name(element: Element, ids: dict[str, Element]) -> str:
    labelledby = element.attribute("aria-labelledby")
    if labelledby:
        name = " ".join(
            text_content(ids[ref]).strip() for ref in labelledby.split() if ref in ids
        ).strip()
        if name:
            return name
    return (element.attribute("aria-label") or "").strip()


def _content_name(element: Element) -> str:
    """Name from content: descendant text plus the alt text of images."""
    parts: list[str] = []
    stack: list[Iterator[Node]] = [iter(element.children)]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
        elif isinstance(child, Text):
            parts.append(child.data.strip())
        elif isinstance(child, Element) and not _is_hidden(child):
            if child.name == "img":
                parts.append((child.attribute("alt") or "").strip())
            else:
                stack.append(iter(child.children))
    return " ".join(part for part in parts if part)


def _title(element: Element) -> str:
    return (element.attribute("title") or "").strip()


def _verdict(context: ElementContext, ok: bool, passed: str, failed: str) -> Verdict:
    if ok:
        return Verdict(context, PASSED, passed)
    return Verdict(context, FAILED, failed)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _page_has_title(page: Page) -> Iterator[Verdict]:
    root = _root(page)
    if root is None:
        return
    titled = any(
        c.element.name == "title" and text_content(c.element).strip()
        for c in iter_elements(page.document)
    )
    yield _verdict(
        root,
        titled,
        "The document has a non-empty <title>",
        "The document has no non-empty <title>",
    )


def _image_has_name(page: Page) -> Iterator[Verdict]:
    ids = _ids(page)
    for context in iter_elements(page.document):
        element = context.element
        if element.name != "img" or not _is_rendered(context):
            continue
        if (element.attribute("role") or "").strip() in ("presentation", "none"):
            continue
        aria = _aria_name(element, ids)
        if element.attribute("alt") == "" and not aria:
            continue
        named = bool(aria or (element.attribute("alt") or "").strip() or _title(element))
        yield _verdict(
            context,
            named,
            "The image has an accessible name",
            "The image has no accessible name",
        )


def _ids_are_unique(page: Page) -> Iterator[Verdict]:
    contexts = [c for c in iter_elements(page.document) if c.element.attribute("id")]
    counts = Counter(c.element.attributes["id"] for c in contexts)
    for context in contexts:
        element_id = context.element.attributes["id"]
        yield _verdict(
            context,
            counts[element_id] == 1,
            f"The id {element_id!r} is unique",
            f"The id {element_id!r} is used {counts[element_id]} times",
        )


def _page_has_lang(page: Page) -> Iterator[Verdict]:
    root = _root(page)
    if root is None:
        return
    yield _verdict(
        root,
        bool((root.element.attribute("lang") or "").strip()),
        "The <html> element has a lang attribute",
        "The <html> element has no lang attribute",
    )


def _page_lang_is_valid(page: Page) -> Iterator[Verdict]:
    root = _root(page)
    if root is None:
        return
    lang = (root.element.attribute("lang") or "").strip()
    if not lang:
        return
    yield _verdict(
        root,
        bool(_LANG_RE.match(lang)),
        f"The lang attribute {lang!r} is well formed",
        f"The lang attribute {lang!r} is not a valid language tag",
    )


def _form_field_has_name(page: Page) -> Iterator[Verdict]:
    ids = _ids(page)
    labels: dict[str, str] = {}
    for context in iter_elements(page.document):
        target = context.element.attribute("for")
        if context.element.name == "label" and target:
            labels.setdefault(target, _content_name(context.element))

    for context in iter_elements(page.document):
        element = context.element
        if element.name == "input":
            input_type = (element.attribute("type") or "text").strip().lower()
            if input_type in _NON_TEXT_INPUTS:
                continue
        elif element.name not in ("select", "textarea"):
            continue
        if not _is_rendered(context):
            continue
        wrapping = [a for a in context.ancestors if a.name == "label"]
        named = bool(
            _aria_name(element, ids)
            or labels.get(element.attribute("id") or "", "")
            or (wrapping and _content_name(wrapping[-1]))
            or _title(element)
            or (element.attribute("placeholder") or "").strip()
        )
        yield _verdict(
            context,
            named,
            "The form field has an accessible name",
            "The form field has no accessible name",
        )


def _link_has_name(page: Page) -> Iterator[Verdict]:
    ids = _ids(page)
    for context in iter_elements(page.document):
        element = context.element
        if element.name != "a" or not element.has_attribute("href"):
            continue
        if not _is_rendered(context):
            continue
        named = bool(_aria_name(element, ids) or _content_name(element) or _title(element))
        yield _verdict(
            context,
            named,
            "The link has an accessible name",
            "The link has no accessible name",
        )


def _button_has_name(page: Page) -> Iterator[Verdict]:
    ids = _ids(page)
    for context in iter_elements(page.document):
        element = context.element
        if element.name == "button":
            native = _content_name(element)
        elif element.name == "input":
            input_type = (element.attribute("type") or "").strip().lower()
            if input_type == "image":
                native = (element.attribute("alt") or "").strip()
            elif input_type in ("button", "submit", "reset"):
                native = (element.attribute("value") or "").strip()
                if element.attribute("value") is None:
                    native = _DEFAULT_BUTTON_NAMES.get(input_type, "")
            else:
                continue
        else:
            continue
        if not _is_rendered(context):
            continue
        named = bool(_aria_name(element, ids) or native or _title(element))
        yield _verdict(
            context,
            named,
            "The button has an accessible name",
            "The button has no accessible name",
        )


def _image_name_is_not_filename(page: Page) -> Iterator[Verdict]:
    for context in iter_elements(page.document):
        element = context.element
        if element.name != "img" or not _is_rendered(context):
            continue
        alt = (element.attribute("alt") or "").strip().lower()
        src = element.attribute("src") or ""
        filename = PurePosixPath(urlsplit(src).path).name.lower()
        if not alt or not filename or alt != filename:
            continue
        yield Verdict(
            context,
            CANT_TELL,
            f"The accessible name is the file name {filename!r}; check that it describes the image",
        )


def _heading_has_name(page: Page) -> Iterator[Verdict]:
    ids = _ids(page)
    for context in iter_elements(page.document):
        element = context.element
        if element.name not in ("h1", "h2", "h3", "h4", "h5", "h6"):
            continue
        if not _is_rendered(context):
            continue
        yield _verdict(
            context,
            bool(_aria_name(element, ids) or _content_name(element)),
            "The heading has an accessible name",
            "The heading is empty",
        )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

_NON_TEXT_CONTENT = Requirement(criterion="1.1.1", title="Non-text Content", level="A")
_INFO_RELATIONSHIPS = Requirement(criterion="1.3.1", title="Info and Relationships", level="A")
_PAGE_TITLED = Requirement(criterion="2.4.2", title="Page Titled", level="A")
_LINK_PURPOSE = Requirement(criterion="2.4.4", title="Link Purpose (In Context)", level="A")
_HEADINGS_LABELS = Requirement(criterion="2.4.6", title="Headings and Labels", level="AA")
_LANGUAGE = Requirement(criterion="3.1.1", title="Language of Page", level="A")
_PARSING = Requirement(criterion="4.1.1", title="Parsing", level="A")
_NAME_ROLE_VALUE = Requirement(criterion="4.1.2", title="Name, Role, Value", level="A")


def _rule(
    code: str,
    title: str,
    check: Callable[[Page], Iterable[Verdict]],
    requirements: tuple[Requirement, ...],
    tags: tuple[str, ...],
) -> Rule:
    return Rule(
        uri=f"{RULE_BASE_URI}{code}",
        code=code,
        title=title,
        check=check,
        requirements=requirements,
        tags=tags,
    )


RULES: tuple[Rule, ...] = (
    _rule("R1", "HTML page has a title", _page_has_title, (_PAGE_TITLED,), ("document",)),
    _rule(
        "R2",
        "Image has an accessible name",
        _image_has_name,
        (_NON_TEXT_CONTENT, _NAME_ROLE_VALUE),
        ("image",),
    ),
    _rule("R3", "Element IDs are unique", _ids_are_unique, (_PARSING,), ("document",)),
    _rule("R4", "HTML page has a lang attribute", _page_has_lang, (_LANGUAGE,), ("language",)),
    _rule(
        "R5",
        "HTML page lang attribute is valid",
        _page_lang_is_valid,
        (_LANGUAGE,),
        ("language",),
    ),
    _rule(
        "R8",
        "Form field has an accessible name",
        _form_field_has_name,
        (_NAME_ROLE_VALUE,),
        ("form",),
    ),
    _rule(
        "R11",
        "Link has an accessible name",
        _link_has_name,
        (_LINK_PURPOSE, _NAME_ROLE_VALUE),
        ("link",),
    ),
    _rule("R12", "Button has an accessible name", _button_has_name, (_NAME_ROLE_VALUE,), ("form",)),
    _rule(
        "R39",
        "Image filename is not the accessible name",
        _image_name_is_not_filename,
        (_NON_TEXT_CONTENT,),
        ("image",),
    ),
    _rule(
        "R64",
        "Heading has an accessible name",
        _heading_has_name,
        (_INFO_RELATIONSHIPS, _HEADINGS_LABELS),
        ("heading",),
    ),
)


def find_rule(rules: tuple[Rule, ...], rule_id: str) -> Rule | None:
    """Return the first rule whose URI ends with *rule_id*, else the first containing it."""
    for rule in rules:
        if rule.uri.endswith(rule_id):
            return rule
    for rule in rules:
        if rule_id in rule.uri:
            return rule
    return None
