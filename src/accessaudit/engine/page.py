"""Page model — the unit of work handed to the evaluation engine."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from accessaudit.dom.nodes import Document
from accessaudit.errors import PageDeserializationError
from accessaudit.utils.validation import describe_validation_error


class Viewport(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = 1280
    height: int = 720
    orientation: Literal["landscape", "portrait"] = "landscape"


class Device(BaseModel):
    """The rendering context a page is evaluated for."""

    model_config = ConfigDict(frozen=True)

    type: Literal["screen", "print", "speech"] = "screen"
    viewport: Viewport = Field(default_factory=Viewport)
    scripting: bool = True

    @classmethod
    def standard(cls) -> Device:
        return cls()


class Request(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    url: str
    headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def of(cls, method: str, url: str) -> Request:
        return cls(method=method, url=url)


class Response(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    status: int = 200
    headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def of(cls, url: str, status: int = 200) -> Response:
        return cls(url=url, status=status)


class Page(BaseModel):
    """A document together with the exchange that produced it and a device."""

    model_config = ConfigDict(frozen=True)

    request: Request
    response: Response
    document: Document
    device: Device = Field(default_factory=Device.standard)

    @classmethod
    def of(
        cls,
        request: Request,
        response: Response,
        document: Document,
        device: Device | None = None,
    ) -> Page:
        return cls(
            request=request,
            response=response,
            document=document,
            device=device or Device.standard(),
        )

    @classmethod
    def from_json(cls, data: Any) -> Page:
        """Rebuild a page from its JSON form.

        Raises:
            PageDeserializationError: When *data* is not a valid page.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise PageDeserializationError(describe_validation_error(exc)) from exc

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
