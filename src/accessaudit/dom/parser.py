"""Parsing collaborators — HTML to a foreign DOM tree, and page URLs."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

import html5lib
from pydantic import AnyUrl, TypeAdapter, ValidationError

from accessaudit.errors import HtmlParseError, InvalidUrlError

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def parse_url(value: str) -> str:
    """Validate *value* as an absolute URL and return its normalized form.

    Raises:
        InvalidUrlError: When *value* is not an absolute URL.
    """
    try:
        return str(_URL_ADAPTER.validate_python(value))
    except ValidationError as exc:
        errors = exc.errors()
        reason = str(errors[0]["msg"]) if errors else str(exc)
        raise InvalidUrlError(value, reason) from exc


@runtime_checkable
class HtmlParser(Protocol):
    """Turns an HTML string into a foreign DOM tree."""

    async def parse(self, html: str, base_url: str) -> Any: ...


class Html5libParser:
    """Parses with html5lib into an ``xml.dom.minidom`` document.

    Parsing runs in a worker thread.  The resulting tree is returned to the
    caller; nothing is installed as a global ``document``.
    """

    async def parse(self, html: str, base_url: str) -> Any:
        try:
            document = await asyncio.to_thread(html5lib.parse, html, treebuilder="dom")
        except Exception as exc:
            raise HtmlParseError(str(exc)) from exc
        document.documentURI = base_url
        return document
